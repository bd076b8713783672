# trans_relay/cli/languages.py
"""列出语言代码表的 CLI 命令。"""

from rich.console import Console
from rich.table import Table

from trans_relay.language_codes import LANGUAGE_CODE_MAP, SUPPORTED_TARGET_LANGUAGES

console = Console()


def languages() -> None:
    """显示短语言代码与后备模型代码的映射表。"""
    table = Table(title="语言代码表")
    table.add_column("代码", style="cyan")
    table.add_column("模型代码", style="magenta")
    table.add_column("可选目标", justify="center")
    for code, model_code in LANGUAGE_CODE_MAP.items():
        label = SUPPORTED_TARGET_LANGUAGES.get(code)
        table.add_row(code, model_code, label or "-")
    console.print(table)
