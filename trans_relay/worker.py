# trans_relay/worker.py
"""
本模块实现后备执行器（Actor 模型）及其在协调器一侧的客户端。

执行器只通过两个队列与外界交互：收件箱（单一消费者）接收命令字典，
发件箱发出响应字典。双方不共享任何可变对象。
"""

import asyncio
import uuid
from typing import Any, Awaitable, Callable, Optional, Union

import structlog

from trans_relay.config import TransRelayConfig
from trans_relay.engines.nllb import NllbEngine, NllbEngineConfig
from trans_relay.exceptions import ProtocolError, UnsupportedLanguageError
from trans_relay.language_codes import resolve_source_code, resolve_target_code
from trans_relay.model_state import ModelLoadState
from trans_relay.protocol import (
    ErrorResponse,
    LoadingModelResponse,
    PreloadCommand,
    SuccessResponse,
    TerminalResponse,
    TranslateCommand,
    TranslatingResponse,
    is_terminal,
    parse_command,
    parse_response,
)

logger = structlog.get_logger(__name__)

InferenceFunc = Callable[[Any, str, str, str], Awaitable[str]]
StatusCallback = Callable[[Union[LoadingModelResponse, TranslatingResponse]], None]


class FallbackWorker:
    """在独立任务中运行的后备执行器，按需惰性加载一次模型并处理翻译命令。"""

    def __init__(self, model_state: ModelLoadState[Any], run_inference: InferenceFunc):
        self.model_state = model_state
        self._run_inference = run_inference
        self.inbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._consumer: Optional[asyncio.Task[None]] = None
        self._handlers: set[asyncio.Task[None]] = set()

    @property
    def running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    def start(self) -> None:
        if self.running:
            return
        self._consumer = asyncio.create_task(self._consume())
        logger.debug("后备执行器已启动。")

    async def close(self) -> None:
        tasks = [t for t in [self._consumer, *self._handlers] if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._consumer = None
        self._handlers.clear()
        logger.debug("后备执行器已关闭。")

    def post_message(self, data: dict[str, Any]) -> None:
        """向执行器投递一条命令。复制一份字典，不与调用方共享。"""
        self.inbox.put_nowait(dict(data))

    async def _consume(self) -> None:
        while True:
            data = await self.inbox.get()
            try:
                command = parse_command(data)
            except ProtocolError:
                logger.warning("忽略无法识别的执行器命令", payload=data, exc_info=True)
                continue

            if isinstance(command, PreloadCommand):
                logger.debug("收到预热命令", phase=self.model_state.phase.value)
                self.model_state.start()
            else:
                task = asyncio.create_task(self._handle_translate(command))
                self._handlers.add(task)
                task.add_done_callback(self._handlers.discard)

    def _emit(self, response: Any) -> None:
        self.outbox.put_nowait(response.to_wire())

    async def _handle_translate(self, command: TranslateCommand) -> None:
        request_id = command.request_id
        log = logger.bind(request_id=request_id, target_language=command.target_language)

        # 不支持的目标语言直接失败，不触碰模型
        try:
            target_code = resolve_target_code(command.target_language)
        except UnsupportedLanguageError as e:
            log.warning("目标语言不受后备模型支持")
            self._emit(ErrorResponse(message=str(e), request_id=request_id))
            return

        self._emit(LoadingModelResponse(request_id=request_id))
        try:
            handle = await self.model_state.ensure_loaded()
            self._emit(TranslatingResponse(request_id=request_id))
            source_code = resolve_source_code(command.source_language)
            translated_text = await self._run_inference(
                handle, command.text, source_code, target_code
            )
        except Exception as e:
            log.error("后备翻译失败", exc_info=True)
            message = str(e) or e.__class__.__name__
            self._emit(ErrorResponse(message=message, request_id=request_id))
            return

        log.debug("后备翻译完成", source_code=source_code, target_code=target_code)
        self._emit(
            SuccessResponse(translated_text=translated_text, request_id=request_id)
        )


class FallbackClient:
    """协调器一侧的执行器客户端：按 requestId 将响应路由给等待中的请求。"""

    def __init__(self, worker: FallbackWorker):
        self._worker = worker
        self._waiters: dict[str, asyncio.Queue[Any]] = {}
        self._dispatcher: Optional[asyncio.Task[None]] = None

    def start(self) -> None:
        self._worker.start()
        if self._dispatcher is None or self._dispatcher.done():
            self._dispatcher = asyncio.create_task(self._dispatch())

    async def close(self) -> None:
        if self._dispatcher is not None:
            self._dispatcher.cancel()
            await asyncio.gather(self._dispatcher, return_exceptions=True)
            self._dispatcher = None
        await self._worker.close()

    def preload(self) -> None:
        self._worker.post_message(PreloadCommand().to_wire())

    async def request(
        self, command: TranslateCommand, on_status: Optional[StatusCallback] = None
    ) -> TerminalResponse:
        """发送一条翻译命令并等待其终态响应。中间状态交给 on_status。"""
        if command.request_id is None:
            command = command.model_copy(update={"request_id": uuid.uuid4().hex})
        request_id = command.request_id
        assert request_id is not None

        queue: asyncio.Queue[Any] = asyncio.Queue()
        self._waiters[request_id] = queue
        try:
            self._worker.post_message(command.to_wire())
            while True:
                response = await queue.get()
                if is_terminal(response):
                    return response  # type: ignore[no-any-return]
                if on_status is not None:
                    on_status(response)
        finally:
            self._waiters.pop(request_id, None)

    async def _dispatch(self) -> None:
        while True:
            data = await self._worker.outbox.get()
            try:
                response = parse_response(data)
            except ProtocolError:
                logger.warning("忽略无法识别的执行器响应", payload=data, exc_info=True)
                continue
            waiter = self._waiters.get(response.request_id or "")
            if waiter is None:
                logger.warning(
                    "收到无人认领的执行器响应",
                    status=response.status,
                    request_id=response.request_id,
                )
                continue
            waiter.put_nowait(response)


def create_fallback_worker(config: TransRelayConfig) -> FallbackWorker:
    """根据配置构建后备执行器。配置无效时会引发异常，由协调器视为致命错误。"""
    engine_config = NllbEngineConfig(**config.engine_configs.get("nllb", {}))
    engine = NllbEngine(engine_config)
    return FallbackWorker(ModelLoadState(engine.load_model), engine.run_inference)
