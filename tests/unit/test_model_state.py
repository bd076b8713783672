# tests/unit/test_model_state.py
"""
针对 `ModelLoadState` 的单元测试。

验证三态转换、预热的幂等性，以及并发调用方会汇聚到同一个进行中的加载。
"""

import asyncio

import pytest

from tests.helpers.fakes import FakeNllbModel, wait_until
from trans_relay.exceptions import InferenceError
from trans_relay.model_state import LoadPhase, ModelLoadState


@pytest.mark.asyncio
async def test_phase_transitions() -> None:
    gate = asyncio.Event()
    model = FakeNllbModel(load_gate=gate)
    state = ModelLoadState(model.load)
    assert state.phase == LoadPhase.UNSTARTED
    assert state.handle is None

    task = state.start()
    assert task is not None
    assert state.phase == LoadPhase.LOADING

    gate.set()
    handle = await task
    assert handle is model
    assert state.phase == LoadPhase.READY
    assert state.handle is model
    assert state.start() is None


@pytest.mark.asyncio
async def test_start_is_idempotent() -> None:
    gate = asyncio.Event()
    model = FakeNllbModel(load_gate=gate)
    state = ModelLoadState(model.load)

    first = state.start()
    for _ in range(5):
        assert state.start() is first
    gate.set()
    await state.ensure_loaded()
    assert model.load_calls == 1
    assert state.load_attempts == 1


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_load() -> None:
    gate = asyncio.Event()
    model = FakeNllbModel(load_gate=gate)
    state = ModelLoadState(model.load)

    callers = [asyncio.create_task(state.ensure_loaded()) for _ in range(10)]
    await wait_until(lambda: model.load_calls == 1)
    assert state.phase == LoadPhase.LOADING
    gate.set()

    handles = await asyncio.gather(*callers)
    assert all(handle is model for handle in handles)
    assert model.load_calls == 1


@pytest.mark.asyncio
async def test_ready_state_does_not_reload() -> None:
    model = FakeNllbModel()
    state = ModelLoadState(model.load)
    await state.ensure_loaded()
    await state.ensure_loaded()
    assert model.load_calls == 1


@pytest.mark.asyncio
async def test_failed_load_resets_to_unstarted() -> None:
    model = FakeNllbModel(fail_load=True)
    state = ModelLoadState(model.load)

    with pytest.raises(InferenceError, match="模型文件缺失"):
        await state.ensure_loaded()
    assert state.phase == LoadPhase.UNSTARTED

    model.fail_load = False
    assert await state.ensure_loaded() is model
    assert model.load_calls == 2
    assert state.phase == LoadPhase.READY


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_shared_load() -> None:
    gate = asyncio.Event()
    model = FakeNllbModel(load_gate=gate)
    state = ModelLoadState(model.load)

    impatient = asyncio.create_task(state.ensure_loaded())
    patient = asyncio.create_task(state.ensure_loaded())
    await wait_until(lambda: model.load_calls == 1)
    impatient.cancel()
    gate.set()

    assert await patient is model
    assert state.phase == LoadPhase.READY
    with pytest.raises(asyncio.CancelledError):
        await impatient
