from __future__ import annotations

import pytest

from bulkorder.core.exceptions import SubmissionStateError
from bulkorder.domain.submission import SubmissionStatus, is_transition_allowed
from bulkorder.services.submission_guard import SubmissionGuard


def test_transition_table() -> None:
    assert is_transition_allowed(SubmissionStatus.IDLE, SubmissionStatus.SUBMITTING)
    assert is_transition_allowed(SubmissionStatus.SUBMITTING, SubmissionStatus.SUCCEEDED)
    assert is_transition_allowed(SubmissionStatus.SUBMITTING, SubmissionStatus.FAILED)
    assert is_transition_allowed(SubmissionStatus.FAILED, SubmissionStatus.IDLE)

    assert not is_transition_allowed(SubmissionStatus.IDLE, SubmissionStatus.SUCCEEDED)
    assert not is_transition_allowed(SubmissionStatus.SUCCEEDED, SubmissionStatus.IDLE)
    assert not is_transition_allowed(SubmissionStatus.SUCCEEDED, SubmissionStatus.SUBMITTING)


def test_second_acquire_is_rejected_while_submitting() -> None:
    guard = SubmissionGuard()

    assert guard.try_acquire()
    assert guard.is_engaged
    assert not guard.try_acquire()
    assert not guard.submit_enabled


def test_failure_rearms_guard() -> None:
    guard = SubmissionGuard()
    guard.try_acquire()

    guard.mark_failed("HTTP 500")

    assert guard.state.status == SubmissionStatus.IDLE
    assert guard.last_failure == "HTTP 500"
    assert guard.submit_enabled
    assert guard.try_acquire()


def test_success_is_terminal() -> None:
    guard = SubmissionGuard()
    guard.try_acquire()

    guard.mark_succeeded()

    assert guard.state.status == SubmissionStatus.SUCCEEDED
    assert not guard.submit_enabled
    assert not guard.try_acquire()


def test_illegal_transition_raises() -> None:
    guard = SubmissionGuard()

    with pytest.raises(SubmissionStateError):
        guard.mark_succeeded()


def test_listeners_follow_trigger_state() -> None:
    guard = SubmissionGuard()
    seen: list[bool] = []
    guard.subscribe(seen.append)

    guard.try_acquire()
    guard.mark_failed("boom")
    guard.try_acquire()
    guard.mark_succeeded()

    assert seen == [False, True, False]
