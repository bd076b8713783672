# trans_relay/language_codes.py
"""
短语言代码与后备模型（NLLB）命名空间代码之间的静态映射表。

这是代码转换的唯一事实来源：任何面向调用方的语言选择器所接受的
语言，都必须是本表中的键。
"""

from types import MappingProxyType
from typing import Mapping, Optional

from trans_relay.exceptions import UnsupportedLanguageError

DEFAULT_SOURCE_LANGUAGE = "en"

LANGUAGE_CODE_MAP: Mapping[str, str] = MappingProxyType(
    {
        "en": "eng_Latn",  # English
        "es": "spa_Latn",  # Spanish
        "fr": "fra_Latn",  # French
        "de": "deu_Latn",  # German
        "ja": "jpn_Jpan",  # Japanese
        "uk": "ukr_Cyrl",  # Ukrainian
        "hi": "hin_Deva",  # Hindi
    }
)

# 面向用户的目标语言选择器，带 * 的语言仅由后备模型可靠支持。
SUPPORTED_TARGET_LANGUAGES: Mapping[str, str] = MappingProxyType(
    {
        "es": "Spanish",
        "fr": "French",
        "de": "German",
        "ja": "Japanese",
        "uk": "Ukrainian*",
        "hi": "Hindi*",
    }
)

_missing = set(SUPPORTED_TARGET_LANGUAGES) - set(LANGUAGE_CODE_MAP)
if _missing:
    raise RuntimeError(f"选择器中的语言未在代码表中定义: {sorted(_missing)}")


def resolve_source_code(language: Optional[str]) -> str:
    """解析源语言。缺失或未收录的代码一律回退为英语，从不失败。"""
    if language and language in LANGUAGE_CODE_MAP:
        return LANGUAGE_CODE_MAP[language]
    return LANGUAGE_CODE_MAP[DEFAULT_SOURCE_LANGUAGE]


def resolve_target_code(language: str) -> str:
    """解析目标语言。未收录的代码会引发 UnsupportedLanguageError。"""
    try:
        return LANGUAGE_CODE_MAP[language]
    except (KeyError, TypeError):
        raise UnsupportedLanguageError(language) from None


def is_selectable_target(language: str) -> bool:
    """调用方可以选择的目标语言只限于选择器中列出的语言。"""
    return language in SUPPORTED_TARGET_LANGUAGES
