# trans_relay/engines/debug.py
"""提供一个用于开发和测试的调试原生引擎。"""

import asyncio
from typing import AsyncIterator, Dict, Optional

from pydantic import Field

from trans_relay.engines.base import (
    BaseEngineConfig,
    BaseLanguageDetector,
    BaseNativeEngine,
    BaseNativeTranslator,
    ProgressCallback,
)
from trans_relay.exceptions import EngineFailure
from trans_relay.types import DetectionResult


class DebugEngineConfig(BaseEngineConfig):
    """Debug 引擎的配置模型。"""

    detected_language: Optional[str] = Field(
        default="en", description="检测器返回的语言；为 None 时返回无效结果"
    )
    fail_detection: bool = False
    fail_on_prepare: bool = False
    fail_mid_stream: bool = False
    chunk_size: int = Field(default=4, gt=0)
    progress_steps: int = Field(default=0, ge=0)
    translation_map: Dict[str, str] = Field(default_factory=dict)


class DebugLanguageDetector(BaseLanguageDetector):
    def __init__(self, config: DebugEngineConfig):
        self.config = config

    async def detect(self, text: str) -> list[DetectionResult]:
        await asyncio.sleep(0)
        if self.config.fail_detection:
            raise EngineFailure("DebugEngine 检测器处于 FAIL 模式。")
        if not text.strip():
            return []
        return [DetectionResult(detected_language=self.config.detected_language)]


class DebugTranslator(BaseNativeTranslator):
    def __init__(
        self, config: DebugEngineConfig, source_language: str, target_language: str
    ):
        super().__init__(source_language, target_language)
        self.config = config

    def render(self, text: str) -> str:
        return self.config.translation_map.get(
            text, f"Translated({text}) to {self.target_language}"
        )

    async def translate_streaming(self, text: str) -> AsyncIterator[str]:
        translated = self.render(text)
        size = self.config.chunk_size
        for index, start in enumerate(range(0, len(translated), size)):
            if self.config.fail_mid_stream and index == 1:
                raise EngineFailure("DebugEngine 在流式输出中途失败。")
            await asyncio.sleep(0)
            yield translated[start : start + size]

    async def translate(self, text: str) -> str:
        return self.render(text)


class DebugEngine(BaseNativeEngine[DebugEngineConfig]):
    """一个简单的调试原生引擎实现。"""

    CONFIG_MODEL = DebugEngineConfig
    VERSION = "1.1.0"

    async def create_detector(self) -> DebugLanguageDetector:
        return DebugLanguageDetector(self.config)

    async def create_translator(
        self,
        source_language: str,
        target_language: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> DebugTranslator:
        if self.config.fail_on_prepare:
            raise EngineFailure(
                f"模拟失败：无法准备 {source_language}->{target_language} 翻译器"
            )
        steps = self.config.progress_steps
        for step in range(1, steps + 1):
            await asyncio.sleep(0)
            if on_progress is not None:
                on_progress(step, steps)
        return DebugTranslator(self.config, source_language, target_language)
