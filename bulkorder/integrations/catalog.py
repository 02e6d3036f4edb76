"""Catalog source adapter: turns catalog JSON into form items."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from bulkorder.core.exceptions import ValidationException
from bulkorder.domain.items import Item

logger = logging.getLogger(__name__)


def _pick_first(entry: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = entry.get(key)
        if value is not None and value != "":
            return value
    return None


def format_price(value: Any, currency: str = "USD") -> str:
    if isinstance(value, str):
        return value.strip()
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return ""
    if currency == "USD":
        return f"${amount:,.2f}"
    return f"{amount:,.2f} {currency}"


def parse_catalog(entries: Iterable[Mapping[str, Any]], currency: str = "USD") -> list[Item]:
    items: list[Item] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise ValidationException(f"Catalog entry #{index} is not an object")
        item_id = entry.get("id")
        if item_id is None or item_id == "":
            raise ValidationException(f"Catalog entry #{index} has no id")

        price = _pick_first(entry, ("formattedPrice", "formatted_price", "price"))
        items.append(
            Item(
                id=item_id,
                display_name=str(_pick_first(entry, ("displayName", "display_name", "name")) or ""),
                image_reference=_pick_first(entry, ("imageReference", "image_reference", "image")),
                formatted_price=format_price(price, currency) if price is not None else "",
            )
        )
    return items


def load_catalog(path: str | Path, currency: str = "USD") -> list[Item]:
    """Read a JSON catalog file (a list, or an object with an "items" list)."""
    catalog_path = Path(path)
    with open(catalog_path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, Mapping):
        data = data.get("items", [])
    if not isinstance(data, list):
        raise ValidationException(f"Catalog {catalog_path} must contain a list of items")

    items = parse_catalog(data, currency)
    logger.info("Loaded %s catalog items from %s", len(items), catalog_path)
    return items
