"""Catalog item and submission payload types."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Item:
    """Single orderable catalog entry held for the lifetime of a form."""

    id: Any
    display_name: str
    image_reference: str | None
    formatted_price: str
    quantity: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "image_reference": self.image_reference,
            "formatted_price": self.formatted_price,
            "quantity": int(self.quantity),
        }


@dataclass(frozen=True, slots=True)
class LineItem:
    """Submission-ready pair; quantity is always >= 1."""

    item_id: Any
    quantity: int

    def to_payload(self) -> dict[str, Any]:
        return {"productId": self.item_id, "quantity": int(self.quantity)}


@dataclass(frozen=True, slots=True)
class CartReference:
    cart_id: str
