# trans_relay/model_state.py
"""
本模块提供后备模型的单次加载守卫。

`ModelLoadState` 是一个显式持有的三态资源（未开始 / 加载中 / 就绪），
在构建后备执行器时注入。所有命令都通过 `ensure_loaded()` 获取模型句柄，
加载期间到达的调用者会等待同一个进行中的加载任务，而不是各自再启动一次。
"""

import asyncio
import enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

import structlog

logger = structlog.get_logger(__name__)

_HandleType = TypeVar("_HandleType")


class LoadPhase(str, enum.Enum):
    UNSTARTED = "unstarted"
    LOADING = "loading"
    READY = "ready"


class ModelLoadState(Generic[_HandleType]):
    """模型句柄的持有者。一个执行器生命周期内最多成功加载一次。"""

    def __init__(self, loader: Callable[[], Awaitable[_HandleType]]):
        self._loader = loader
        self._pending: Optional[asyncio.Task[_HandleType]] = None
        self._handle: Optional[_HandleType] = None
        self._ready = False
        self.load_attempts = 0

    @property
    def phase(self) -> LoadPhase:
        if self._ready:
            return LoadPhase.READY
        if self._pending is not None:
            return LoadPhase.LOADING
        return LoadPhase.UNSTARTED

    @property
    def handle(self) -> Optional[_HandleType]:
        return self._handle

    def start(self) -> Optional[asyncio.Task[_HandleType]]:
        """
        幂等的预热操作：仅在未开始时启动加载，不等待其完成。

        Returns:
            进行中的加载任务；若模型已就绪则返回 None。
        """
        if self._ready:
            return None
        if self._pending is None:
            self._pending = asyncio.create_task(self._load())
            self._pending.add_done_callback(self._on_load_done)
        return self._pending

    async def ensure_loaded(self) -> _HandleType:
        """返回已加载的模型句柄，必要时启动或等待唯一的加载任务。"""
        if self._ready:
            return self._handle  # type: ignore[return-value]
        task = self.start()
        assert task is not None
        # shield: 单个调用方被取消时不应中断其他调用方共享的加载
        return await asyncio.shield(task)

    async def _load(self) -> _HandleType:
        self.load_attempts += 1
        logger.info("开始加载后备翻译模型...", attempt=self.load_attempts)
        handle = await self._loader()
        self._handle = handle
        self._ready = True
        logger.info("后备翻译模型加载完成。")
        return handle

    def _on_load_done(self, task: "asyncio.Task[Any]") -> None:
        if task.cancelled():
            self._pending = None
            return
        error = task.exception()
        if error is not None:
            # 回到未开始状态，后续命令可以重新尝试加载
            self._pending = None
            logger.error(
                "后备翻译模型加载失败",
                error=f"{error.__class__.__name__}: {error}",
            )
