# tests/conftest.py
"""项目全局共享的测试 Fixtures。"""

import os
from collections.abc import Generator
from typing import Any

import pytest
from pytest_mock import MockerFixture
from rich.console import Console


@pytest.fixture(scope="session", autouse=True)
def disable_rich_colors_for_tests(
    session_mocker: MockerFixture,
) -> Generator[None, None, None]:
    """全局禁用 rich 库的颜色输出，以确保测试结果的确定性。"""
    original_init = Console.__init__

    def new_init(self: Console, *args: Any, **kwargs: Any) -> None:
        kwargs["force_terminal"] = False
        kwargs["color_system"] = None
        original_init(self, *args, **kwargs)

    session_mocker.patch("rich.console.Console.__init__", new=new_init)
    yield


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """避免开发者本地的 TR_* 环境变量或 .env 文件影响配置相关的测试。"""
    for key in list(os.environ):
        if key.startswith("TR_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
