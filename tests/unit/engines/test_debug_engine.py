# tests/unit/engines/test_debug_engine.py
"""测试调试原生引擎的检测、准备与流式输出行为。"""

import pytest

from trans_relay.engines.debug import DebugEngine, DebugEngineConfig
from trans_relay.exceptions import EngineFailure


@pytest.mark.asyncio
async def test_detector_returns_configured_language() -> None:
    engine = DebugEngine(DebugEngineConfig(detected_language="ja"))
    detector = await engine.create_detector()
    results = await detector.detect("こんにちは")
    assert [r.detected_language for r in results] == ["ja"]
    assert await detector.detect("  ") == []


@pytest.mark.asyncio
async def test_detector_fail_mode() -> None:
    engine = DebugEngine(DebugEngineConfig(fail_detection=True))
    detector = await engine.create_detector()
    with pytest.raises(EngineFailure):
        await detector.detect("Hello")


@pytest.mark.asyncio
async def test_streaming_chunks_in_order() -> None:
    engine = DebugEngine(DebugEngineConfig(chunk_size=5))
    translator = await engine.create_translator("en", "fr")
    chunks = [chunk async for chunk in translator.translate_streaming("Hi")]
    assert chunks == ["Trans", "lated", "(Hi) ", "to fr"]
    assert "".join(chunks) == await translator.translate("Hi")


@pytest.mark.asyncio
async def test_progress_callback_fires_per_step() -> None:
    engine = DebugEngine(DebugEngineConfig(progress_steps=3))
    calls: list[tuple[float, float]] = []
    await engine.create_translator("en", "es", lambda loaded, total: calls.append((loaded, total)))
    assert calls == [(1, 3), (2, 3), (3, 3)]


@pytest.mark.asyncio
async def test_prepare_failure() -> None:
    engine = DebugEngine(DebugEngineConfig(fail_on_prepare=True))
    with pytest.raises(EngineFailure, match="en->es"):
        await engine.create_translator("en", "es")


def test_engine_name_and_lifecycle_flags() -> None:
    engine = DebugEngine(DebugEngineConfig())
    assert engine.name == "debug"
    assert engine.initialized is False


def test_config_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError):
        DebugEngineConfig(mode="FAIL")  # type: ignore[call-arg]
