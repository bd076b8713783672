# trans_relay/exceptions.py
"""
本模块定义了 Trans-Relay 项目中所有自定义的、语义化的异常类型。

原生路径上的异常（检测失败、引擎失败）会被协调器捕获并转向后备路径；
后备路径上的异常则是终态，会以错误响应的形式原样呈现给调用方。
"""


class TransRelayError(Exception):
    """
    所有 Trans-Relay 自定义异常的通用基类。
    捕获此异常可以处理所有源自本项目的预期错误。
    """

    pass


class ConfigurationError(TransRelayError):
    """表示在加载、解析或验证配置时发生的错误。"""

    pass


class DetectionFailure(TransRelayError):
    """原生语言检测返回了空的、缺失的或无效的结果。可恢复：转向后备路径。"""

    pass


class EngineFailure(TransRelayError):
    """
    原生翻译器在准备阶段或流式输出阶段失败。可恢复：转向后备路径，
    并在已知时保留检测到的源语言。
    """

    def __init__(self, message: str, source_language: str | None = None):
        super().__init__(message)
        self.source_language = source_language


class UnsupportedLanguageError(TransRelayError, KeyError):
    """
    目标语言不在语言代码表中。
    继承自 KeyError 是为了保持与字典查找行为的一致性。
    """

    def __init__(self, language: str | None):
        self.language = language
        super().__init__(
            f'The target language "{language}" is not supported by the fallback model map.'
        )

    def __str__(self) -> str:
        # KeyError 默认会给消息加上引号
        return str(self.args[0])


class ExecutorUnavailableError(TransRelayError):
    """后备执行器在启动时无法构建。对后备路径而言是致命的，不会重试。"""

    pass


class InferenceError(TransRelayError):
    """后备模型的加载或推理调用失败。"""

    pass


class ProtocolError(TransRelayError, ValueError):
    """收到了无法解析为协议消息的数据。"""

    pass
