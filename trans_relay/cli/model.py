# trans_relay/cli/model.py
"""管理后备模型的 CLI 命令。"""

import asyncio

import structlog
import typer
from rich.console import Console

from trans_relay.cli.state import State
from trans_relay.engines.nllb import NllbEngine, NllbEngineConfig
from trans_relay.model_state import ModelLoadState

logger = structlog.get_logger(__name__)
console = Console()
model_app = typer.Typer(help="管理后备翻译模型")


@model_app.command("preload")
def model_preload(ctx: typer.Context) -> None:
    """下载并加载一次后备模型，用于预先填充本地模型缓存。"""
    state: State = ctx.obj
    try:
        engine_config = NllbEngineConfig(**state.config.engine_configs.get("nllb", {}))
    except ValueError as e:
        console.print(f"[bold red]❌ 模型配置无效: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    engine = NllbEngine(engine_config)
    model_state = ModelLoadState(engine.load_model)
    try:
        with console.status(f"正在加载 {engine_config.model_name} ..."):
            asyncio.run(model_state.ensure_loaded())
    except Exception as e:
        console.print(f"[bold red]❌ 模型加载失败: {e}[/bold red]")
        logger.error("模型预加载失败", exc_info=True)
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]✅ 模型 {engine_config.model_name} 已就绪。[/bold green]")
