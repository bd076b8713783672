# trans_relay/strategy.py
"""
翻译策略的纯决策函数。

恢复策略（原生失败后转向后备）被表达为一个显式的策略值，
因此可以独立于原生/后备适配器进行测试。
"""

import enum
from dataclasses import dataclass
from typing import Optional, Union

from trans_relay.exceptions import DetectionFailure, EngineFailure


class FallbackReason(str, enum.Enum):
    FORCED = "forced"
    NATIVE_UNAVAILABLE = "native_unavailable"
    DETECTION_FAILED = "detection_failed"
    ENGINE_FAILED = "engine_failed"


@dataclass(frozen=True)
class TryNative:
    pass


@dataclass(frozen=True)
class Fallback:
    reason: FallbackReason
    source_language: Optional[str] = None


Strategy = Union[TryNative, Fallback]


def decide_strategy(
    force_fallback: bool,
    native_available: bool,
    failure: Optional[BaseException] = None,
) -> Strategy:
    """
    根据请求参数、能力探测结果以及（可选的）原生路径失败，决定下一步策略。

    Args:
        force_fallback: 调用方是否强制使用后备路径。
        native_available: 启动时解析出的能力提供者是否为原生提供者。
        failure: 原生路径上发生的失败；为 None 表示尚未尝试。

    """
    if failure is not None:
        if isinstance(failure, DetectionFailure):
            return Fallback(FallbackReason.DETECTION_FAILED)
        if isinstance(failure, EngineFailure):
            return Fallback(FallbackReason.ENGINE_FAILED, failure.source_language)
        return Fallback(FallbackReason.ENGINE_FAILED)
    if force_fallback:
        return Fallback(FallbackReason.FORCED)
    if not native_available:
        return Fallback(FallbackReason.NATIVE_UNAVAILABLE)
    return TryNative()
