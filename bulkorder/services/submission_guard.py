"""Single-flight gate around cart submission."""
from __future__ import annotations

import logging
from typing import Callable

from bulkorder.core.exceptions import SubmissionStateError
from bulkorder.domain.submission import SubmissionState, SubmissionStatus, is_transition_allowed

logger = logging.getLogger(__name__)

TriggerListener = Callable[[bool], None]


class SubmissionGuard:
    """
    Owns the SubmissionState of one form.

    try_acquire() admits an attempt only from idle; everything else is a
    rejected no-op. A failure passes through failed(reason) and lands back in
    idle. Success is terminal and keeps the trigger disabled.
    """

    def __init__(self) -> None:
        self._state = SubmissionState()
        self._last_failure: str | None = None
        self._listeners: list[TriggerListener] = []

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def last_failure(self) -> str | None:
        return self._last_failure

    @property
    def is_engaged(self) -> bool:
        return self._state.is_submitting

    @property
    def submit_enabled(self) -> bool:
        return self._state.is_idle

    def subscribe(self, listener: TriggerListener) -> None:
        self._listeners.append(listener)

    def _transition(self, target: str, reason: str | None = None) -> None:
        current = self._state.status
        if not is_transition_allowed(current, target):
            raise SubmissionStateError(current, target)

        was_enabled = self.submit_enabled
        self._state = SubmissionState(status=target, reason=reason)
        logger.debug("Submission state %s -> %s", current, target)

        if was_enabled != self.submit_enabled:
            for listener in self._listeners:
                listener(self.submit_enabled)

    def try_acquire(self) -> bool:
        if not self._state.is_idle:
            logger.debug("Submit rejected while %s", self._state.status)
            return False
        self._transition(SubmissionStatus.SUBMITTING)
        return True

    def mark_succeeded(self) -> None:
        self._transition(SubmissionStatus.SUCCEEDED)

    def mark_failed(self, reason: str) -> None:
        self._last_failure = reason
        self._transition(SubmissionStatus.FAILED, reason)
        self._transition(SubmissionStatus.IDLE)
