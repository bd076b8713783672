# tests/unit/test_utils.py
"""针对 `trans_relay.utils` 模块的单元测试。"""

import pytest

from trans_relay.exceptions import UnsupportedLanguageError
from trans_relay.utils import format_progress, validate_target_language


@pytest.mark.parametrize("code", ["es", "fr", "de", "ja", "uk", "hi"])
def test_validate_target_language_accepts_selector_codes(code: str) -> None:
    assert validate_target_language(code) == code


@pytest.mark.parametrize("invalid_code", ["german", "123", "e", "zh-CN-"])
def test_validate_target_language_rejects_malformed_tags(invalid_code: str) -> None:
    with pytest.raises(ValueError, match="格式无效"):
        validate_target_language(invalid_code)


@pytest.mark.parametrize("code", ["en", "pt", "en-US", "zh-Hant"])
def test_validate_target_language_rejects_well_formed_but_unselectable(
    code: str,
) -> None:
    """格式正确但不在选择器中的代码报告为不支持，而不是格式错误。"""
    with pytest.raises(UnsupportedLanguageError) as exc_info:
        validate_target_language(code)
    assert exc_info.value.language == code


@pytest.mark.parametrize(
    "loaded, total, expected",
    [
        (0, 100, "Downloading: 0%"),
        (1, 3, "Downloading: 33%"),
        (2, 3, "Downloading: 67%"),
        (5, 5, "Downloading: 100%"),
        (10, 0, "Downloading: 0%"),
    ],
)
def test_format_progress(loaded: float, total: float, expected: str) -> None:
    assert format_progress(loaded, total) == expected
