# trans_relay/utils.py
"""本模块包含项目范围内的通用工具函数。"""

import re

from langcodes import Language
from langcodes.tag_parser import LanguageTagError

from trans_relay.exceptions import UnsupportedLanguageError
from trans_relay.language_codes import is_selectable_target

# 主语言子标签应该由 2-3 个字母组成 (BCP 47)
PRIMARY_SUBTAG_PATTERN = re.compile(r"^[a-zA-Z]{2,3}$")


def validate_target_language(code: str) -> str:
    """
    校验调用方给出的目标语言代码，校验通过时原样返回。

    先用 `langcodes` 确认它是格式正确的 BCP 47 标签，再确认它在目标语言选择器中。

    Raises:
        ValueError: 代码不是格式正确的语言标签。
        UnsupportedLanguageError: 代码格式正确，但不在选择器中。
    """
    try:
        language = Language.get(code)
    except LanguageTagError as e:
        raise ValueError(f"语言代码 '{code}' 格式无效: {e}") from e
    if not language.language or not PRIMARY_SUBTAG_PATTERN.match(language.language):
        raise ValueError(f"语言代码 '{code}' 格式无效: 缺少 2-3 个字母的主语言子标签。")
    if not is_selectable_target(code):
        raise UnsupportedLanguageError(code)
    return code


def format_progress(loaded: float, total: float) -> str:
    """把下载进度格式化为 `Downloading: NN%`。总量未知时显示 0%。"""
    percentage = (loaded / total) * 100 if total else 0.0
    return f"Downloading: {percentage:.0f}%"
