"""Submission status transition rules (single source of truth)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


class SubmissionStatus:
    """Lifecycle of one bulk submission attempt."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


ALLOWED_TRANSITIONS: Mapping[str, frozenset[str]] = {
    SubmissionStatus.IDLE: frozenset({SubmissionStatus.SUBMITTING}),
    SubmissionStatus.SUBMITTING: frozenset(
        {
            SubmissionStatus.SUCCEEDED,
            SubmissionStatus.FAILED,
        }
    ),
    # failed is transient: the guard re-arms straight away
    SubmissionStatus.FAILED: frozenset({SubmissionStatus.IDLE}),
    SubmissionStatus.SUCCEEDED: frozenset(),
}

TERMINAL_STATUSES = frozenset({SubmissionStatus.SUCCEEDED})


@dataclass(frozen=True, slots=True)
class SubmissionState:
    status: str = SubmissionStatus.IDLE
    reason: str | None = None

    @property
    def is_idle(self) -> bool:
        return self.status == SubmissionStatus.IDLE

    @property
    def is_submitting(self) -> bool:
        return self.status == SubmissionStatus.SUBMITTING


def is_transition_allowed(current: str, target: str) -> bool:
    if current in TERMINAL_STATUSES:
        return False
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())
