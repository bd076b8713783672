# trans_relay/target.py
"""可观察的输出端：协调器把流式片段或终态文本写到这里。"""

import enum
from typing import Callable, Optional

TargetListener = Callable[["TranslationTarget", str], None]


class TargetStatus(str, enum.Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    DOWNLOADING = "downloading"
    STREAMING = "streaming"
    INITIALIZING_FALLBACK = "initializing-fallback"
    LOADING_MODEL = "loading-model"
    TRANSLATING = "translating"
    DONE = "done"
    FAILED = "failed"


class TranslationTarget:
    """
    一段待翻译的文本及其当前显示内容。

    首次翻译时会记住原文，此后的每次翻译都基于原文，而不是上一次的译文。
    每次变更都会以事件名 ("text" / "append" / "status") 通知监听器。
    """

    ERROR_TEXT = "[Translation Error]"

    def __init__(self, text: str, listener: Optional[TargetListener] = None):
        self.text = text
        self.original_text: Optional[str] = None
        self.status = TargetStatus.IDLE
        self.error: Optional[str] = None
        self._listeners: list[TargetListener] = [listener] if listener else []

    def subscribe(self, listener: TargetListener) -> None:
        self._listeners.append(listener)

    def remember_original(self) -> str:
        if self.original_text is None:
            self.original_text = self.text
        return self.original_text

    def set_text(self, text: str, status: Optional[TargetStatus] = None) -> None:
        self.text = text
        self._notify("text")
        if status is not None:
            self.set_status(status)

    def append(self, chunk: str) -> None:
        self.text += chunk
        self._notify("append")

    def set_status(self, status: TargetStatus) -> None:
        self.status = status
        if status != TargetStatus.FAILED:
            self.error = None
        self._notify("status")

    def fail(self, message: str) -> None:
        self.error = message
        self.text = self.ERROR_TEXT
        self.status = TargetStatus.FAILED
        self._notify("text")
        self._notify("status")

    def _notify(self, event: str) -> None:
        for listener in self._listeners:
            listener(self, event)
