# trans_relay/cli/translate.py
"""处理单次翻译的 CLI 命令。"""

import asyncio
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from trans_relay.cli.state import State
from trans_relay.cli.utils import create_coordinator
from trans_relay.coordinator import Coordinator
from trans_relay.exceptions import ConfigurationError, UnsupportedLanguageError
from trans_relay.language_codes import SUPPORTED_TARGET_LANGUAGES
from trans_relay.target import TargetStatus, TranslationTarget
from trans_relay.types import OutcomeStatus, TranslationOutcome, TranslationPath
from trans_relay.utils import validate_target_language

console = Console()

_STATUS_MESSAGES = {
    TargetStatus.PREPARING: "正在准备原生翻译器...",
    TargetStatus.INITIALIZING_FALLBACK: "正在初始化后备翻译...",
    TargetStatus.LOADING_MODEL: "正在加载后备模型...",
    TargetStatus.TRANSLATING: "正在翻译...",
}


class ProgressPrinter:
    """输出端的监听器：打印状态提示，并在原生路径上逐片打印流式译文。"""

    def __init__(self) -> None:
        self.streaming = False
        self._printed = 0

    def __call__(self, target: TranslationTarget, event: str) -> None:
        if event == "append":
            chunk = target.text[self._printed :]
            self._printed = len(target.text)
            console.print(chunk, end="", markup=False, highlight=False, soft_wrap=True)
        elif event == "status":
            self._on_status(target)
        elif event == "text":
            if self.streaming:
                # 流被中断，输出端已回退到原文
                console.print()
                self.streaming = False
            elif target.status == TargetStatus.DOWNLOADING and target.text:
                console.print(f"[dim]{target.text}[/dim]")

    def _on_status(self, target: TranslationTarget) -> None:
        if target.status == TargetStatus.STREAMING:
            self.streaming = True
            self._printed = 0
            console.print("[dim](native)[/dim] ", end="", soft_wrap=True)
        elif target.status == TargetStatus.DONE and self.streaming:
            console.print()
            self.streaming = False
        elif target.status in _STATUS_MESSAGES:
            console.print(f"[dim]{_STATUS_MESSAGES[target.status]}[/dim]")


async def _async_translate(
    coordinator: Coordinator, target: TranslationTarget, language: str, force: bool
) -> TranslationOutcome:
    try:
        await coordinator.initialize()
        return await coordinator.translate(target, language, force_fallback=force)
    finally:
        await coordinator.close()


def translate(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="要翻译的文本。")],
    target_language: Annotated[
        Optional[str],
        typer.Option("--target", "-t", help="目标语言代码，默认取配置。"),
    ] = None,
    force_fallback: Annotated[
        bool, typer.Option("--force-fallback", help="跳过原生路径，直接使用后备模型。")
    ] = False,
) -> None:
    """翻译一段文本：原生能力优先，失败时自动回退到后备模型。"""
    state: State = ctx.obj
    language = target_language or state.config.default_target_language

    try:
        validate_target_language(language)
    except ValueError as e:
        console.print(f"[bold red]❌ 语言代码错误: {e}[/bold red]")
        raise typer.Exit(code=1) from e
    except UnsupportedLanguageError as e:
        supported = ", ".join(sorted(SUPPORTED_TARGET_LANGUAGES))
        console.print(
            f"[bold red]❌ 不支持的目标语言 '{language}'。可选: {supported}[/bold red]"
        )
        raise typer.Exit(code=1) from e

    try:
        coordinator = create_coordinator(state.config)
    except ConfigurationError as e:
        console.print(f"[bold red]❌ 配置错误: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1) from e

    target = TranslationTarget(text, listener=ProgressPrinter())
    outcome = asyncio.run(_async_translate(coordinator, target, language, force_fallback))

    if outcome.status == OutcomeStatus.SUCCESS:
        # 原生路径的译文已经逐片打印过
        if outcome.path != TranslationPath.NATIVE:
            console.print(
                f"[dim]({outcome.path.value})[/dim] {escape(outcome.text or '')}"
            )
        return
    console.print(f"[bold red]❌ 翻译失败: {escape(outcome.error or '')}[/bold red]")
    raise typer.Exit(code=1)
