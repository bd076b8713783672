# trans_relay/protocol.py
"""
本模块定义了协调器与后备执行器之间的消息契约。

消息在边界上以纯字典（camelCase 键）的形式传递，两端不共享任何可变对象。
`requestId` 是对原始协议的可选扩展，用于识别并丢弃过期的响应。
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from trans_relay.exceptions import ProtocolError


class _WireModel(BaseModel):
    """所有协议消息的基类：不可变，线上格式使用 camelCase 别名。"""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel, extra="ignore"
    )

    request_id: Optional[str] = None

    def to_wire(self) -> dict[str, Any]:
        """序列化为线上字典。未设置 requestId 时不输出该字段。"""
        exclude = {"request_id"} if self.request_id is None else None
        return self.model_dump(by_alias=True, exclude=exclude)


# --- 请求：协调器 -> 执行器 ---


class PreloadCommand(_WireModel):
    type: Literal["PRELOAD"] = "PRELOAD"


class TranslateCommand(_WireModel):
    type: Literal["TRANSLATE"] = "TRANSLATE"
    text: str
    source_language: Optional[str] = None
    target_language: str


WorkerCommand = Annotated[
    Union[PreloadCommand, TranslateCommand], Field(discriminator="type")
]


# --- 响应：执行器 -> 协调器 ---


class LoadingModelResponse(_WireModel):
    status: Literal["loading-model"] = "loading-model"


class TranslatingResponse(_WireModel):
    status: Literal["translating"] = "translating"


class SuccessResponse(_WireModel):
    status: Literal["success"] = "success"
    translated_text: str


class ErrorResponse(_WireModel):
    status: Literal["error"] = "error"
    message: str


WorkerResponse = Annotated[
    Union[LoadingModelResponse, TranslatingResponse, SuccessResponse, ErrorResponse],
    Field(discriminator="status"),
]

TerminalResponse = Union[SuccessResponse, ErrorResponse]

_command_adapter: TypeAdapter[Any] = TypeAdapter(WorkerCommand)
_response_adapter: TypeAdapter[Any] = TypeAdapter(WorkerResponse)


def parse_command(data: Any) -> Union[PreloadCommand, TranslateCommand]:
    """将线上字典解析为命令对象，无法识别时引发 ProtocolError。"""
    try:
        return _command_adapter.validate_python(data)
    except ValidationError as e:
        raise ProtocolError(f"无效的执行器命令: {e}") from e


def parse_response(
    data: Any,
) -> Union[LoadingModelResponse, TranslatingResponse, SuccessResponse, ErrorResponse]:
    """将线上字典解析为响应对象，无法识别时引发 ProtocolError。"""
    try:
        return _response_adapter.validate_python(data)
    except ValidationError as e:
        raise ProtocolError(f"无效的执行器响应: {e}") from e


def is_terminal(response: Any) -> bool:
    return isinstance(response, (SuccessResponse, ErrorResponse))
