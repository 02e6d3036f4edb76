"""Derive the cart submission payload from the current item set."""
from __future__ import annotations

from typing import Any, Iterable, Sequence

from bulkorder.domain.items import Item, LineItem


def build_line_items(items: Iterable[Item]) -> list[LineItem]:
    """Return the items with quantity > 0, in their original order."""
    return [LineItem(item_id=item.id, quantity=int(item.quantity)) for item in items if item.quantity > 0]


def line_items_payload(line_items: Sequence[LineItem]) -> dict[str, Any]:
    return {"lineItems": [line_item.to_payload() for line_item in line_items]}
