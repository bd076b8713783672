# trans_relay/engines/base.py
"""
本模块定义了原生翻译能力必须实现的抽象基类（ABC）。

原生能力由两部分组成：语言检测器和（按语言对创建的）流式翻译器。
二者对本项目而言都是不透明的异步能力。
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from trans_relay.types import DetectionResult

_ConfigType = TypeVar("_ConfigType", bound="BaseEngineConfig")

ProgressCallback = Callable[[float, float], None]
"""下载/准备进度回调，参数为 (已加载量, 总量)。"""


class BaseEngineConfig(BaseModel):
    """所有引擎配置模型的基类。拒绝未知字段，以便尽早暴露配置拼写错误。"""

    model_config = ConfigDict(extra="forbid")


class BaseLanguageDetector(ABC):
    @abstractmethod
    async def detect(self, text: str) -> list[DetectionResult]:
        """按可信度从高到低返回检测结果，可能为空。"""
        ...


class BaseNativeTranslator(ABC):
    """为某个固定语言对创建的原生翻译器。"""

    def __init__(self, source_language: str, target_language: str):
        self.source_language = source_language
        self.target_language = target_language

    @abstractmethod
    def translate_streaming(self, text: str) -> AsyncIterator[str]:
        """按顺序产出译文片段。序列有限且不可重启。"""
        ...

    async def translate(self, text: str) -> str:
        """非流式翻译。默认实现为拼接全部流式片段。"""
        return "".join([chunk async for chunk in self.translate_streaming(text)])


class BaseNativeEngine(ABC, Generic[_ConfigType]):
    """原生翻译能力的纯异步抽象基类。"""

    CONFIG_MODEL: type[_ConfigType]
    VERSION: str = "1.0.0"

    def __init__(self, config: _ConfigType):
        self.config = config
        self.initialized: bool = False

    @property
    def name(self) -> str:
        """从类名自动推断引擎的名称。"""
        return self.__class__.__name__.replace("Engine", "").lower()

    async def initialize(self) -> None:
        self.initialized = True

    async def close(self) -> None:
        self.initialized = False

    @abstractmethod
    async def create_detector(self) -> BaseLanguageDetector:
        ...

    @abstractmethod
    async def create_translator(
        self,
        source_language: str,
        target_language: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BaseNativeTranslator:
        """
        为 (源语言, 目标语言) 准备一个翻译器。

        准备期间可能多次（也可能一次都不）调用 on_progress 报告下载进度。
        """
        ...
