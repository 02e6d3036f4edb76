"""Look up the caller's active cart, if any."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from bulkorder.core.exceptions import CartServiceException, ResolutionException
from bulkorder.domain.items import CartReference

logger = logging.getLogger(__name__)

_CART_ID_KEYS = ("cartId", "cart_id", "id")


class ActiveCartSource(Protocol):
    async def list_active_carts(self) -> list[Mapping[str, Any]]: ...


def cart_id_from_summary(summary: Mapping[str, Any]) -> str | None:
    for key in _CART_ID_KEYS:
        value = summary.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


class CartResolver:
    """Single read per call; results are never cached between submissions."""

    def __init__(self, client: ActiveCartSource):
        self.client = client

    async def resolve_active_cart(self) -> CartReference | None:
        try:
            carts = await self.client.list_active_carts()
        except CartServiceException as exc:
            raise ResolutionException(exc.message, service_message=exc.service_message) from exc

        if not carts:
            return None

        if len(carts) > 1:
            logger.warning("Cart service reported %s active carts; using the first one", len(carts))

        cart_id = cart_id_from_summary(carts[0])
        if cart_id is None:
            raise ResolutionException("Active cart summary has no cart identifier")
        return CartReference(cart_id=cart_id)
