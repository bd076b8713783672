# trans_relay/__init__.py
"""Trans-Relay: 原生优先、模型兜底的双路径翻译协调器。

原生翻译能力可用时直接流式输出译文；不可用、被强制关闭或中途失败时，
透明地转交给在独立执行器中惰性加载的 NLLB 模型。
"""

__version__ = "0.3.0"

from .capabilities import AbsentProvider, NativeProvider, resolve_capabilities
from .config import NativeEngineName, TransRelayConfig
from .coordinator import Coordinator
from .target import TargetStatus, TranslationTarget
from .types import OutcomeStatus, TranslationOutcome, TranslationPath

__all__ = [
    "__version__",
    "Coordinator",
    "TransRelayConfig",
    "NativeEngineName",
    "NativeProvider",
    "AbsentProvider",
    "resolve_capabilities",
    "TranslationTarget",
    "TargetStatus",
    "TranslationOutcome",
    "TranslationPath",
    "OutcomeStatus",
]
