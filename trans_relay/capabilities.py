# trans_relay/capabilities.py
"""
能力提供者：在启动时一次性解析原生翻译能力是否可用，并注入协调器。

只有两种变体：`NativeProvider` 持有一个原生引擎，`AbsentProvider` 表示不可用。
"""

from typing import Any, Optional

import structlog

from trans_relay.config import NativeEngineName, TransRelayConfig
from trans_relay.engines.base import BaseNativeEngine
from trans_relay.engines.debug import DebugEngine
from trans_relay.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

NATIVE_ENGINES: dict[NativeEngineName, type[BaseNativeEngine[Any]]] = {
    NativeEngineName.DEBUG: DebugEngine,
}


class CapabilityProvider:
    is_native: bool = False
    engine: Optional[BaseNativeEngine[Any]] = None

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass


class NativeProvider(CapabilityProvider):
    is_native = True

    def __init__(self, engine: BaseNativeEngine[Any]):
        self.engine = engine

    async def initialize(self) -> None:
        if self.engine is not None and not self.engine.initialized:
            await self.engine.initialize()

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.close()


class AbsentProvider(CapabilityProvider):
    pass


def resolve_capabilities(config: TransRelayConfig) -> CapabilityProvider:
    """根据配置解析能力提供者。"""
    if config.native_engine == NativeEngineName.NONE:
        logger.info("未配置原生翻译能力，将始终使用后备路径。")
        return AbsentProvider()

    engine_class = NATIVE_ENGINES.get(config.native_engine)
    if engine_class is None:
        raise ConfigurationError(f"原生引擎 '{config.native_engine.value}' 不可用。")

    engine_config_data = config.engine_configs.get(config.native_engine.value, {})
    try:
        engine_config = engine_class.CONFIG_MODEL(**engine_config_data)
    except ValueError as e:
        raise ConfigurationError(
            f"原生引擎 '{config.native_engine.value}' 配置无效: {e}"
        ) from e
    logger.info("已解析原生翻译能力。", engine_name=config.native_engine.value)
    return NativeProvider(engine_class(engine_config))
