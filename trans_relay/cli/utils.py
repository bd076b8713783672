# trans_relay/cli/utils.py
"""提供 CLI 命令使用的共享工具函数。"""

from functools import partial

from trans_relay.capabilities import resolve_capabilities
from trans_relay.config import TransRelayConfig
from trans_relay.coordinator import Coordinator
from trans_relay.worker import create_fallback_worker


def create_coordinator(config: TransRelayConfig) -> Coordinator:
    """
    根据配置创建并返回一个未初始化的 Coordinator 实例。

    能力提供者在这里一次性解析；后备执行器的构建推迟到 `initialize()`，
    以便构建失败能被协调器记录为致命错误而不是直接中断 CLI。
    """
    capabilities = resolve_capabilities(config)
    return Coordinator(
        config, capabilities, worker_factory=partial(create_fallback_worker, config)
    )
