# trans_relay/types.py
"""本模块定义了 Trans-Relay 系统的核心数据类型。"""

import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TranslationRequest(BaseModel):
    """一次用户操作产生的翻译请求。分派后不可变。"""

    model_config = ConfigDict(frozen=True)

    text: str
    target_language: str
    force_fallback: bool = False
    request_id: str = Field(default_factory=lambda: uuid.uuid4().hex)


class DetectionResult(BaseModel):
    """原生语言检测器的单条结果，只消费一次，不做持久化。"""

    detected_language: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0, le=1)


class TranslationPath(str, Enum):
    NATIVE = "native"
    FALLBACK = "fallback"


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    STALE = "stale"


class TranslationOutcome(BaseModel):
    """`Coordinator.translate` 的返回值，描述一次翻译尝试的最终结果。"""

    request_id: str
    path: TranslationPath
    status: OutcomeStatus
    text: Optional[str] = None
    error: Optional[str] = None
    fallback_reason: Optional[str] = None

    @model_validator(mode="after")
    def check_consistency(self) -> "TranslationOutcome":
        if self.status == OutcomeStatus.SUCCESS and self.text is None:
            raise ValueError("SUCCESS 状态的结果必须包含 text。")
        if self.status == OutcomeStatus.FAILED and self.error is None:
            raise ValueError("FAILED 状态的结果必须包含 error 信息。")
        return self
