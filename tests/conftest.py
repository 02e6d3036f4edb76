"""Shared pytest fixtures for the bulk order engine."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest

from bulkorder.core.config import CartServiceConfig, Settings
from bulkorder.core.exceptions import CartServiceException
from bulkorder.domain.items import Item
from bulkorder.services.bulk_order_form import BulkOrderForm


@dataclass
class FakeCartService:
    """In-memory stand-in for the cart storage service client."""

    active_carts: list[dict[str, Any]] = field(default_factory=list)
    resolve_error: CartServiceException | None = None
    write_error: CartServiceException | None = None
    created_cart_id: str = "new-cart"
    gate: asyncio.Event | None = None
    calls: list[tuple[Any, ...]] = field(default_factory=list)
    closed: bool = False

    async def list_active_carts(self) -> list[dict[str, Any]]:
        self.calls.append(("list",))
        if self.gate is not None:
            await self.gate.wait()
        if self.resolve_error is not None:
            raise self.resolve_error
        return list(self.active_carts)

    async def create_cart(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create", payload))
        if self.write_error is not None:
            raise self.write_error
        return {"cartId": self.created_cart_id}

    async def append_items(self, cart_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("append", cart_id, payload))
        if self.write_error is not None:
            raise self.write_error
        return {"cartId": cart_id}

    async def close(self) -> None:
        self.closed = True

    @property
    def dispatches(self) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] in ("create", "append")]


@pytest.fixture()
def settings() -> Settings:
    return Settings(cart_service=CartServiceConfig(base_url="http://cart.test"))


@pytest.fixture()
def catalog() -> list[Item]:
    return [
        Item(id=1, display_name="A", image_reference="a.png", formatted_price="$5"),
        Item(id=2, display_name="B", image_reference="b.png", formatted_price="$10"),
    ]


@pytest.fixture()
def cart_service() -> FakeCartService:
    return FakeCartService()


@pytest.fixture()
def navigations() -> list[str]:
    return []


@pytest.fixture()
def form(catalog, cart_service, settings, navigations) -> BulkOrderForm:
    return BulkOrderForm(catalog, cart_service, settings, navigate=navigations.append)


@pytest.fixture()
async def start_server():
    """Start in-process aiohttp apps without the pytest-aiohttp dependency."""
    servers: list[object] = []

    async def _start(app):
        from aiohttp.test_utils import TestServer

        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return server

    try:
        yield _start
    finally:
        for server in servers:
            await server.close()
