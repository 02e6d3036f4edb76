"""Services implementing the bulk order engine."""

from .bulk_order_form import BulkOrderForm
from .cart_resolver import CartResolver
from .cart_submitter import CartSubmitter, SubmitOutcome, SubmitResult
from .feedback import FeedbackChannel, FeedbackKind
from .line_items import build_line_items, line_items_payload
from .quantity_store import ItemQuantityStore, parse_quantity
from .submission_guard import SubmissionGuard

__all__ = [
    "BulkOrderForm",
    "CartResolver",
    "CartSubmitter",
    "FeedbackChannel",
    "FeedbackKind",
    "ItemQuantityStore",
    "SubmissionGuard",
    "SubmitOutcome",
    "SubmitResult",
    "build_line_items",
    "line_items_payload",
    "parse_quantity",
]
