"""
HTTP client for the remote cart storage service.

Three calls are used by the bulk order form:
- GET  active carts for the current session
- POST create a cart with line items
- POST append line items to an existing cart

Session credentials (cookies/headers) are attached to every request.
Any non-2xx status or transport error raises CartServiceException.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

import aiohttp

from bulkorder.core.config import CartServiceConfig
from bulkorder.core.exceptions import CartServiceException

logger = logging.getLogger(__name__)

_ERROR_FIELDS = ("message", "error", "detail")


def extract_error_message(body: Any) -> str | None:
    """Pull a human-readable error out of a service response body."""
    if isinstance(body, Mapping):
        for key in _ERROR_FIELDS:
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            if isinstance(value, Mapping):
                nested = extract_error_message(value)
                if nested:
                    return nested
    return None


class CartServiceClient:
    """
    Async client for the cart storage service.

    Example:
    ```python
    async with CartServiceClient(config, cookies={"session": token}) as client:
        carts = await client.list_active_carts()
        if carts:
            await client.append_items(carts[0]["cartId"], payload)
        else:
            await client.create_cart(payload)
    ```
    """

    def __init__(
        self,
        config: CartServiceConfig,
        *,
        cookies: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        self.config = config
        self._cookies = dict(cookies or {})
        self._headers = {"Accept": "application/json", **dict(headers or {})}
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> CartServiceClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
            # unsafe jar: internal cart services are often addressed by IP
            self._session = aiohttp.ClientSession(
                cookie_jar=aiohttp.CookieJar(unsafe=True),
                cookies=self._cookies,
                headers=self._headers,
                timeout=timeout,
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        url = self._url(path)
        session = await self._get_session()
        try:
            async with session.request(method, url, json=payload) as response:
                body = await self._read_body(response)
                if not 200 <= response.status < 300:
                    service_message = extract_error_message(body)
                    logger.warning(
                        "Cart service %s %s failed: HTTP %s (%s)",
                        method,
                        url,
                        response.status,
                        service_message or "no message",
                    )
                    raise CartServiceException(
                        f"Cart service returned HTTP {response.status}",
                        status=response.status,
                        service_message=service_message,
                    )
                return body
        except asyncio.TimeoutError as exc:
            logger.warning("Cart service %s %s timed out", method, url)
            raise CartServiceException("Cart service request timed out") from exc
        except aiohttp.ClientError as exc:
            logger.warning("Cart service %s %s transport error: %s", method, url, exc)
            raise CartServiceException(f"Cart service unavailable: {exc}") from exc

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        text = await response.text()
        if not text.strip():
            return None
        try:
            return await response.json(content_type=None)
        except ValueError:
            return {"message": text.strip()} if response.status >= 400 else None

    async def list_active_carts(self) -> list[dict[str, Any]]:
        """Return cart summaries in service order; empty list means no active cart."""
        body = await self._request("GET", self.config.active_carts_path)
        if body is None:
            return []
        if isinstance(body, Mapping):
            body = body.get("carts", [])
        if not isinstance(body, list):
            raise CartServiceException("Unexpected active carts response shape")
        return [entry for entry in body if isinstance(entry, Mapping)]

    async def create_cart(self, payload: dict[str, Any]) -> Any:
        return await self._request("POST", self.config.create_cart_path, payload)

    async def append_items(self, cart_id: str, payload: dict[str, Any]) -> Any:
        path = self.config.append_items_path.format(cart_id=cart_id)
        return await self._request("POST", path, payload)
