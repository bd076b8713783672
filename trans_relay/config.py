# trans_relay/config.py

import enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trans_relay.exceptions import UnsupportedLanguageError
from trans_relay.utils import validate_target_language


class NativeEngineName(str, enum.Enum):
    NONE = "none"
    DEBUG = "debug"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: Literal["json", "console"] = "console"


class TransRelayConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TR_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    native_engine: NativeEngineName = NativeEngineName.NONE
    preload_on_startup: bool = Field(
        default=True, description="原生能力缺失时，启动后立即预热后备模型"
    )
    default_target_language: str = "es"

    engine_configs: dict[str, Any] = Field(default_factory=dict)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("default_target_language")
    @classmethod
    def validate_default_target_language(cls, v: str) -> str:
        try:
            return validate_target_language(v)
        except UnsupportedLanguageError as e:
            raise ValueError(f"默认目标语言 '{v}' 不在可选的目标语言中。") from e
