"""Single-slot status message exposed to the presentation layer."""
from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class FeedbackKind:
    IDLE = "idle"
    PROGRESS = "progress"
    ERROR = "error"
    VALIDATION = "validation"


FeedbackListener = Callable[[str, str], None]


class FeedbackChannel:
    """Holds only the latest message; no history is kept."""

    def __init__(self) -> None:
        self._message = ""
        self._kind = FeedbackKind.IDLE
        self._listeners: list[FeedbackListener] = []

    @property
    def message(self) -> str:
        return self._message

    @property
    def kind(self) -> str:
        return self._kind

    def subscribe(self, listener: FeedbackListener) -> None:
        self._listeners.append(listener)

    def _set(self, kind: str, message: str) -> None:
        if kind == self._kind and message == self._message:
            return
        self._kind = kind
        self._message = message
        for listener in self._listeners:
            listener(kind, message)

    def show_progress(self, message: str) -> None:
        self._set(FeedbackKind.PROGRESS, message)

    def show_error(self, message: str) -> None:
        self._set(FeedbackKind.ERROR, message)

    def show_validation(self, message: str) -> None:
        self._set(FeedbackKind.VALIDATION, message)

    def clear_error(self) -> None:
        """Drop an error or validation message; progress text is kept."""
        if self._kind in (FeedbackKind.ERROR, FeedbackKind.VALIDATION):
            self._set(FeedbackKind.IDLE, "")
