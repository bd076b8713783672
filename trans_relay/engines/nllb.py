# trans_relay/engines/nllb.py
"""提供后备执行器使用的 NLLB 模型适配器（基于 `transformers` 库）。"""

import asyncio
from typing import Any

import structlog
from pydantic import Field

from trans_relay.engines.base import BaseEngineConfig
from trans_relay.exceptions import InferenceError

logger = structlog.get_logger(__name__)


class NllbEngineConfig(BaseEngineConfig):
    """NLLB 后备模型的配置。"""

    model_name: str = "facebook/nllb-200-distilled-600M"
    device: int = Field(default=-1, description="-1 表示 CPU，>=0 表示 GPU 序号")
    max_length: int = Field(default=512, gt=0)


class NllbEngine:
    """
    加载并调用 NLLB 翻译流水线。

    模型加载与推理都是阻塞调用，统一放到线程中执行，避免阻塞事件循环。
    """

    CONFIG_MODEL = NllbEngineConfig
    VERSION = "1.0.0"

    def __init__(self, config: NllbEngineConfig):
        self.config = config
        logger.info("NLLB 引擎已配置。", model_name=config.model_name)

    def _import_pipeline(self) -> Any:
        logger.debug("正在惰性加载 'transformers' 库...")
        try:
            from transformers import pipeline
        except ImportError as e:
            raise ImportError(
                "要使用 NllbEngine, 请安装 'transformers' 库: "
                'pip install "trans-relay[nllb]"'
            ) from e
        return pipeline

    async def load_model(self) -> Any:
        """加载翻译流水线并返回模型句柄。"""
        pipeline = self._import_pipeline()

        def _load_sync() -> Any:
            return pipeline(
                "translation", model=self.config.model_name, device=self.config.device
            )

        try:
            return await asyncio.to_thread(_load_sync)
        except Exception as e:
            raise InferenceError(
                f"模型 '{self.config.model_name}' 加载失败: {e}"
            ) from e

    async def run_inference(
        self, handle: Any, text: str, source_code: str, target_code: str
    ) -> str:
        """使用已加载的模型句柄翻译单条文本。"""
        if not text.strip():
            return ""

        def _translate_sync() -> str:
            result = handle(
                text,
                src_lang=source_code,
                tgt_lang=target_code,
                max_length=self.config.max_length,
            )
            return str(result[0]["translation_text"])

        return await asyncio.to_thread(_translate_sync)
