"""Domain package."""

from .items import CartReference, Item, LineItem
from .submission import ALLOWED_TRANSITIONS, SubmissionState, SubmissionStatus, is_transition_allowed

__all__ = [
    # Entities
    "Item",
    "LineItem",
    "CartReference",
    # Submission state machine
    "SubmissionState",
    "SubmissionStatus",
    "ALLOWED_TRANSITIONS",
    "is_transition_allowed",
]
