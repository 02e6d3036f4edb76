"""Authoritative per-item quantity state for one bulk order form."""
from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from bulkorder.core.exceptions import ValidationException
from bulkorder.domain.items import Item
from bulkorder.services.feedback import FeedbackChannel

logger = logging.getLogger(__name__)

# at most nine digits
_INT_PATTERN = re.compile(r"[+-]?\d{1,9}")


def parse_quantity(raw_value: Any) -> int | None:
    """Parse an edit into a non-negative int, or None if it must be ignored.

    Strings must be integer literals ("3", " 12 ", "+4"). Numbers are accepted
    only when integral, so 2.0 becomes 2 while 2.5 is rejected.
    """
    if isinstance(raw_value, bool) or raw_value is None:
        return None

    if isinstance(raw_value, int):
        value = raw_value
    elif isinstance(raw_value, float):
        if not raw_value.is_integer():
            return None
        value = int(raw_value)
    elif isinstance(raw_value, str):
        text = raw_value.strip()
        if not _INT_PATTERN.fullmatch(text):
            return None
        try:
            value = int(text)
        except ValueError:
            return None
    else:
        return None

    if value < 0:
        return None
    return value


class ItemQuantityStore:
    """Items keyed by id in catalog order; quantities change only via set_quantity."""

    def __init__(self, items: Iterable[Item], feedback: FeedbackChannel | None = None):
        self._items: dict[Any, Item] = {}
        for item in items:
            if item.id in self._items:
                raise ValidationException(f"Duplicate catalog item id: {item.id!r}")
            initial = parse_quantity(item.quantity)
            item.quantity = initial if initial is not None else 0
            self._items[item.id] = item
        self._feedback = feedback

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    @property
    def items(self) -> tuple[Item, ...]:
        return tuple(self._items.values())

    def get_quantity(self, item_id: Any) -> int | None:
        item = self._items.get(item_id)
        return item.quantity if item else None

    def set_quantity(self, item_id: Any, raw_value: Any) -> None:
        item = self._items.get(item_id)
        if item is None:
            logger.debug("Ignoring quantity edit for unknown item %r", item_id)
            return

        quantity = parse_quantity(raw_value)
        if quantity is None:
            logger.debug("Ignoring malformed quantity %r for item %r", raw_value, item_id)
            return

        item.quantity = quantity
        if self._feedback is not None:
            self._feedback.clear_error()

    def step_quantity(self, item_id: Any, delta: int) -> None:
        """Resolve an increment/decrement control to an absolute target."""
        current = self.get_quantity(item_id)
        if current is None:
            logger.debug("Ignoring quantity step for unknown item %r", item_id)
            return
        if isinstance(delta, bool) or not isinstance(delta, int):
            logger.debug("Ignoring non-integer quantity step %r for item %r", delta, item_id)
            return
        self.set_quantity(item_id, max(current + delta, 0))
