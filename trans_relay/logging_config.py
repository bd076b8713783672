# trans_relay/logging_config.py
"""
本模块负责集中配置项目的日志系统。

`console` 格式通过 Rich 渲染为带颜色的单行日志，键值对附在行尾；
`json` 格式用于生产环境的机器可读输出。
"""

import logging
from collections.abc import MutableMapping
from typing import Any, Literal

import structlog
from rich.console import Console
from rich.text import Text
from structlog.typing import Processor

APP_LOGGER_NAME = "trans_relay"


class RichLineRenderer:
    """一个 structlog 处理器，把日志渲染为 `时间 级别 消息 (记录器) key=value` 的单行。"""

    _level_styles = {
        "debug": ("blue", "DEBUG   "),
        "info": ("green", "INFO    "),
        "warning": ("yellow", "WARNING "),
        "error": ("bold red", "ERROR   "),
        "critical": ("bold magenta", "CRITICAL"),
    }

    def __init__(
        self,
        show_timestamp: bool = True,
        show_logger_name: bool = True,
        kv_truncate_at: int = 80,
    ):
        self._console = Console(stderr=True)
        self._show_timestamp = show_timestamp
        self._show_logger_name = show_logger_name
        self._kv_truncate_at = kv_truncate_at

    def __call__(
        self, logger: Any, name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        event = str(event_dict.pop("event", "")).strip()
        if not event:
            return ""

        timestamp = event_dict.pop("timestamp", "")
        level = event_dict.pop("level", "info").lower()
        logger_name = event_dict.pop("logger", "unknown")
        exception = event_dict.pop("exception", None)
        style, level_text = self._level_styles.get(level, ("default", level.upper()))

        line = Text()
        if self._show_timestamp and timestamp:
            line.append(str(timestamp), style="dim")
            line.append(" ")
        line.append(level_text, style=style)
        line.append(" ")
        line.append(event)
        if self._show_logger_name:
            line.append(f" ({logger_name})", style="cyan dim")
        for key, value in sorted(event_dict.items()):
            value_repr = repr(value)
            if len(value_repr) > self._kv_truncate_at:
                value_repr = value_repr[: self._kv_truncate_at] + "…"
            line.append(f" {key}=", style="dim")
            line.append(value_repr, style="bright_white")

        with self._console.capture() as capture:
            self._console.print(line, soft_wrap=True)
        rendered = capture.get().rstrip()
        if exception:
            rendered = f"{rendered}\n{exception}"
        return rendered


def setup_logging(
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "console",
    show_timestamp: bool = True,
    show_logger_name: bool = True,
) -> None:
    """
    配置全局的 structlog 日志系统。这是整个应用的日志配置入口。

    Args:
        log_level: 要显示的最低日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)。
        log_format: 'console' 用于开发环境的美观输出，'json' 用于生产环境。
        show_timestamp: 是否在日志中包含时间戳。
        show_logger_name: 是否在日志中包含记录器的名称。

    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "console":
        processors.append(
            RichLineRenderer(
                show_timestamp=show_timestamp, show_logger_name=show_logger_name
            )
        )
    else:
        processors[3] = structlog.processors.TimeStamper(fmt="iso", utc=True)
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # 标准 logging 只负责输出 structlog 已经渲染好的字符串
    handler = logging.StreamHandler()

    class PassthroughFormatter(logging.Formatter):
        def format(self, record: logging.LogRecord) -> str:
            return str(record.getMessage())

    handler.setFormatter(PassthroughFormatter())

    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)  # 避免第三方库（如 transformers）的噪音

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(log_level.upper())
    app_logger.propagate = True

    structlog.get_logger("trans_relay.logging_config").info(
        "日志系统已配置完成。",
        log_format=log_format,
        app_log_level=log_level.upper(),
    )
