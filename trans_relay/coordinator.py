# trans_relay/coordinator.py
"""本模块包含 Trans-Relay 的主协调器：原生优先、后备兜底的双路径翻译。"""

import time
import uuid
import weakref
from typing import Callable, Optional

import structlog

from trans_relay.capabilities import CapabilityProvider
from trans_relay.config import TransRelayConfig
from trans_relay.exceptions import (
    DetectionFailure,
    EngineFailure,
    ExecutorUnavailableError,
)
from trans_relay.protocol import SuccessResponse, TranslateCommand, TranslatingResponse
from trans_relay.strategy import Fallback, TryNative, decide_strategy
from trans_relay.target import TargetStatus, TranslationTarget
from trans_relay.types import (
    OutcomeStatus,
    TranslationOutcome,
    TranslationPath,
    TranslationRequest,
)
from trans_relay.utils import format_progress
from trans_relay.worker import FallbackClient, FallbackWorker

logger = structlog.get_logger(__name__)

WorkerFactory = Callable[[], FallbackWorker]


class Coordinator:
    """
    异步主协调器。

    每次请求先通过 `decide_strategy` 选择路径：原生路径在本地流式输出译文；
    原生能力缺失、被强制关闭或中途失败时，把命令转发给后备执行器，并应用其终态响应。
    `translate` 从不抛出异常，所有失败都会转化为输出端上可见的错误状态。
    """

    def __init__(
        self,
        config: TransRelayConfig,
        capabilities: CapabilityProvider,
        worker_factory: Optional[WorkerFactory] = None,
    ):
        self.config = config
        self.capabilities = capabilities
        self._worker_factory = worker_factory
        self._client: Optional[FallbackClient] = None
        self._executor_error: Optional[ExecutorUnavailableError] = None
        self._latest_requests: "weakref.WeakKeyDictionary[TranslationTarget, str]" = (
            weakref.WeakKeyDictionary()
        )
        self.initialized = False

    @property
    def fallback_available(self) -> bool:
        return self._client is not None

    async def initialize(self) -> None:
        """初始化能力提供者并构建后备执行器。执行器构建失败只会被记录，不会重试。"""
        if self.initialized:
            return
        logger.info("协调器初始化开始...", native=self.capabilities.is_native)
        await self.capabilities.initialize()

        if self._worker_factory is None:
            self._executor_error = ExecutorUnavailableError("未配置后备执行器。")
        else:
            try:
                client = FallbackClient(self._worker_factory())
                client.start()
                self._client = client
            except Exception as e:
                self._executor_error = ExecutorUnavailableError(
                    f"{e.__class__.__name__}: {e}"
                )
                logger.error("后备执行器初始化失败。", exc_info=True)

        if (
            self._client is not None
            and not self.capabilities.is_native
            and self.config.preload_on_startup
        ):
            logger.info("原生能力不可用，正在预热后备模型。")
            self._client.preload()

        self.initialized = True
        logger.info("协调器初始化完成。", fallback_available=self.fallback_available)

    async def close(self) -> None:
        if not self.initialized:
            return
        if self._client is not None:
            await self._client.close()
            self._client = None
        await self.capabilities.close()
        self.initialized = False
        logger.info("协调器已关闭。")

    async def translate(
        self,
        target: TranslationTarget,
        target_language: str,
        force_fallback: bool = False,
    ) -> TranslationOutcome:
        """翻译输出端上的原文，并把结果写回输出端。"""
        original_text = target.remember_original()
        request_id = uuid.uuid4().hex
        self._latest_requests[target] = request_id
        log = logger.bind(request_id=request_id, target_language=target_language)

        try:
            request = TranslationRequest(
                request_id=request_id,
                text=original_text,
                target_language=target_language,
                force_fallback=force_fallback,
            )
            if not self.initialized:
                await self.initialize()

            strategy = decide_strategy(force_fallback, self.capabilities.is_native)
            if isinstance(strategy, TryNative):
                try:
                    return await self._translate_native(target, request)
                except Exception as e:
                    log.warning("原生翻译失败，正在转向后备翻译。", exc_info=True)
                    target.set_text(original_text)
                    strategy = decide_strategy(
                        force_fallback, self.capabilities.is_native, failure=e
                    )

            assert isinstance(strategy, Fallback)
            log.info(
                "使用后备翻译。",
                reason=strategy.reason.value,
                source_language=strategy.source_language,
            )
            return await self._translate_fallback(target, request, strategy)
        except Exception as e:
            log.error("翻译过程中发生未预期的错误。", exc_info=True)
            message = f"{e.__class__.__name__}: {e}"
            target.fail(message)
            return TranslationOutcome(
                request_id=request_id,
                path=TranslationPath.FALLBACK,
                status=OutcomeStatus.FAILED,
                error=message,
            )

    async def _translate_native(
        self, target: TranslationTarget, request: TranslationRequest
    ) -> TranslationOutcome:
        engine = self.capabilities.engine
        assert engine is not None

        try:
            detector = await engine.create_detector()
            results = await detector.detect(request.text)
        except Exception as e:
            raise DetectionFailure(f"语言检测失败: {e}") from e
        if not results or not results[0].detected_language:
            raise DetectionFailure("语言检测返回了空的或无效的结果。")
        source_language = results[0].detected_language

        target.set_text("Preparing model...", status=TargetStatus.PREPARING)

        def on_progress(loaded: float, total: float) -> None:
            target.set_text(format_progress(loaded, total), status=TargetStatus.DOWNLOADING)

        try:
            translator = await engine.create_translator(
                source_language, request.target_language, on_progress
            )
            # 第一个片段到达前清空旧内容
            target.set_text("", status=TargetStatus.STREAMING)
            async for chunk in translator.translate_streaming(request.text):
                target.append(chunk)
        except Exception as e:
            raise EngineFailure(
                f"原生翻译器失败: {e}", source_language=source_language
            ) from e

        target.set_status(TargetStatus.DONE)
        logger.info(
            "原生翻译完成。",
            request_id=request.request_id,
            source_language=source_language,
        )
        return TranslationOutcome(
            request_id=request.request_id,
            path=TranslationPath.NATIVE,
            status=OutcomeStatus.SUCCESS,
            text=target.text,
        )

    async def _translate_fallback(
        self,
        target: TranslationTarget,
        request: TranslationRequest,
        strategy: Fallback,
    ) -> TranslationOutcome:
        reason = strategy.reason.value
        if self._client is None:
            message = f"Fallback worker is not available. ({self._executor_error})"
            logger.error("后备执行器不可用。", request_id=request.request_id)
            target.fail(message)
            return TranslationOutcome(
                request_id=request.request_id,
                path=TranslationPath.FALLBACK,
                status=OutcomeStatus.FAILED,
                error=message,
                fallback_reason=reason,
            )

        target.set_text(
            "Initializing fallback...", status=TargetStatus.INITIALIZING_FALLBACK
        )
        command = TranslateCommand(
            text=request.text,
            source_language=strategy.source_language,
            target_language=request.target_language,
            request_id=request.request_id,
        )

        def on_status(response: object) -> None:
            if self._is_current(target, request):
                status = (
                    TargetStatus.TRANSLATING
                    if isinstance(response, TranslatingResponse)
                    else TargetStatus.LOADING_MODEL
                )
                target.set_status(status)

        started = time.perf_counter()
        response = await self._client.request(command, on_status=on_status)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)

        if not self._is_current(target, request):
            logger.info(
                "丢弃过期的后备翻译响应。",
                request_id=request.request_id,
                status=response.status,
            )
            return TranslationOutcome(
                request_id=request.request_id,
                path=TranslationPath.FALLBACK,
                status=OutcomeStatus.STALE,
                fallback_reason=reason,
            )

        if isinstance(response, SuccessResponse):
            target.set_text(response.translated_text, status=TargetStatus.DONE)
            logger.info(
                "后备翻译完成。", request_id=request.request_id, elapsed_ms=elapsed_ms
            )
            return TranslationOutcome(
                request_id=request.request_id,
                path=TranslationPath.FALLBACK,
                status=OutcomeStatus.SUCCESS,
                text=response.translated_text,
                fallback_reason=reason,
            )

        logger.error(
            "后备翻译失败。",
            request_id=request.request_id,
            message=response.message,
            elapsed_ms=elapsed_ms,
        )
        target.fail(response.message)
        return TranslationOutcome(
            request_id=request.request_id,
            path=TranslationPath.FALLBACK,
            status=OutcomeStatus.FAILED,
            error=response.message,
            fallback_reason=reason,
        )

    def _is_current(self, target: TranslationTarget, request: TranslationRequest) -> bool:
        return self._latest_requests.get(target) == request.request_id
