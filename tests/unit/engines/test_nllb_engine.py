# tests/unit/engines/test_nllb_engine.py
"""测试 NLLB 适配器。`transformers` 流水线被替换为假对象，测试不需要真实模型。"""

from typing import Any
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from trans_relay.engines.nllb import NllbEngine, NllbEngineConfig
from trans_relay.exceptions import InferenceError


@pytest.mark.asyncio
async def test_load_model_builds_translation_pipeline(mocker: MockerFixture) -> None:
    handle = MagicMock(name="pipeline-handle")
    pipeline_factory = MagicMock(return_value=handle)
    engine = NllbEngine(NllbEngineConfig(model_name="tiny-nllb", device=0))
    mocker.patch.object(engine, "_import_pipeline", return_value=pipeline_factory)

    assert await engine.load_model() is handle
    pipeline_factory.assert_called_once_with("translation", model="tiny-nllb", device=0)


@pytest.mark.asyncio
async def test_load_model_wraps_failures(mocker: MockerFixture) -> None:
    pipeline_factory = MagicMock(side_effect=OSError("repo not found"))
    engine = NllbEngine(NllbEngineConfig(model_name="missing/model"))
    mocker.patch.object(engine, "_import_pipeline", return_value=pipeline_factory)

    with pytest.raises(InferenceError, match="missing/model"):
        await engine.load_model()


@pytest.mark.asyncio
async def test_run_inference_passes_model_codes() -> None:
    handle = MagicMock(return_value=[{"translation_text": "Hola"}])
    engine = NllbEngine(NllbEngineConfig(max_length=64))

    result = await engine.run_inference(handle, "Hello", "eng_Latn", "spa_Latn")

    assert result == "Hola"
    handle.assert_called_once_with(
        "Hello", src_lang="eng_Latn", tgt_lang="spa_Latn", max_length=64
    )


@pytest.mark.asyncio
async def test_run_inference_skips_blank_text() -> None:
    handle = MagicMock()
    engine = NllbEngine(NllbEngineConfig())
    assert await engine.run_inference(handle, "   ", "eng_Latn", "fra_Latn") == ""
    handle.assert_not_called()


@pytest.mark.asyncio
async def test_run_inference_propagates_errors() -> None:
    def _explode(*args: Any, **kwargs: Any) -> Any:
        raise RuntimeError("CUDA out of memory")

    engine = NllbEngine(NllbEngineConfig())
    with pytest.raises(RuntimeError, match="CUDA"):
        await engine.run_inference(_explode, "Hello", "eng_Latn", "fra_Latn")


def test_missing_transformers_has_install_hint(mocker: MockerFixture) -> None:
    mocker.patch.dict("sys.modules", {"transformers": None})
    engine = NllbEngine(NllbEngineConfig())
    with pytest.raises(ImportError, match="trans-relay\\[nllb\\]"):
        engine._import_pipeline()
