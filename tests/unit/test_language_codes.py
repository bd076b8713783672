# tests/unit/test_language_codes.py
"""针对 `trans_relay.language_codes` 模块的单元测试。"""

import pytest

from trans_relay.exceptions import UnsupportedLanguageError
from trans_relay.language_codes import (
    LANGUAGE_CODE_MAP,
    SUPPORTED_TARGET_LANGUAGES,
    is_selectable_target,
    resolve_source_code,
    resolve_target_code,
)


def test_code_map_contains_minimum_set() -> None:
    assert dict(LANGUAGE_CODE_MAP) == {
        "en": "eng_Latn",
        "es": "spa_Latn",
        "fr": "fra_Latn",
        "de": "deu_Latn",
        "ja": "jpn_Jpan",
        "uk": "ukr_Cyrl",
        "hi": "hin_Deva",
    }


def test_code_map_is_immutable() -> None:
    with pytest.raises(TypeError):
        LANGUAGE_CODE_MAP["pt"] = "por_Latn"  # type: ignore[index]


def test_selector_languages_are_table_keys() -> None:
    """面向用户的选择器中的每个语言都必须能在代码表中解析。"""
    for code in SUPPORTED_TARGET_LANGUAGES:
        assert resolve_target_code(code) == LANGUAGE_CODE_MAP[code]


@pytest.mark.parametrize("code", sorted(LANGUAGE_CODE_MAP))
def test_resolve_target_code_for_supported(code: str) -> None:
    assert resolve_target_code(code) == LANGUAGE_CODE_MAP[code]


@pytest.mark.parametrize("code", ["xx", "pt", "EN", "es-ES", ""])
def test_resolve_target_code_rejects_unknown(code: str) -> None:
    with pytest.raises(UnsupportedLanguageError) as exc_info:
        resolve_target_code(code)
    assert f'"{code}"' in str(exc_info.value)
    assert exc_info.value.language == code
    assert not is_selectable_target(code)


@pytest.mark.parametrize("code", [None, "", "xx", "pt", "es-ES"])
def test_resolve_source_code_defaults_to_english(code: str | None) -> None:
    assert resolve_source_code(code) == "eng_Latn"


def test_resolve_source_code_for_known_language() -> None:
    assert resolve_source_code("ja") == "jpn_Jpan"


def test_unsupported_language_error_is_key_error() -> None:
    """继承 KeyError，调用方可以像处理字典查找失败一样处理它。"""
    with pytest.raises(KeyError):
        resolve_target_code("xx")


def test_english_resolves_but_is_not_selectable() -> None:
    """英语只作为源语言的默认值存在，调用方不能把它选为目标语言。"""
    assert resolve_target_code("en") == "eng_Latn"
    assert not is_selectable_target("en")


@pytest.mark.parametrize("code", sorted(SUPPORTED_TARGET_LANGUAGES))
def test_selector_languages_are_selectable(code: str) -> None:
    assert is_selectable_target(code)
