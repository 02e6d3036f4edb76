"""Environment-driven configuration objects for the bulk order form."""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from bulkorder.core.exceptions import ConfigurationException

DEFAULT_VALIDATION_MESSAGE = "select a quantity for at least one item"
DEFAULT_PROGRESS_MESSAGE = "Adding items to your cart..."
DEFAULT_FAILURE_MESSAGE = "Something went wrong while updating your cart. Please try again."


def _get_env(key: str, default: str | None = None) -> str | None:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _get_float(key: str, default: float) -> float:
    raw = _get_env(key)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationException(f"{key} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationException(f"{key} must be > 0")
    return value


def _get_int(key: str, default: int) -> int:
    raw = _get_env(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationException(f"{key} must be an integer, got {raw!r}") from exc


@dataclass(slots=True)
class MessagesConfig:
    validation: str = DEFAULT_VALIDATION_MESSAGE
    progress: str = DEFAULT_PROGRESS_MESSAGE
    generic_failure: str = DEFAULT_FAILURE_MESSAGE


@dataclass(slots=True)
class CartServiceConfig:
    base_url: str
    active_carts_path: str = "/carts/active"
    create_cart_path: str = "/carts"
    append_items_path: str = "/carts/{cart_id}/items"
    request_timeout: float = 30.0


@dataclass(slots=True)
class Settings:
    cart_service: CartServiceConfig
    cart_view_url: str = "/cart"
    catalog_path: str | None = None
    currency: str = "USD"
    session_cookie: str = "session"
    max_forms: int = 1000
    form_ttl: float = 3600.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    messages: MessagesConfig = field(default_factory=MessagesConfig)


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    base_url = _get_env("BULK_ORDER_CART_SERVICE_URL")
    if not base_url:
        raise ConfigurationException("BULK_ORDER_CART_SERVICE_URL environment variable is not set")

    append_path = _get_env("BULK_ORDER_APPEND_ITEMS_PATH", "/carts/{cart_id}/items")
    if "{cart_id}" not in append_path:
        raise ConfigurationException("BULK_ORDER_APPEND_ITEMS_PATH must contain '{cart_id}'")

    cart_service = CartServiceConfig(
        base_url=base_url.rstrip("/"),
        active_carts_path=_get_env("BULK_ORDER_ACTIVE_CARTS_PATH", "/carts/active"),
        create_cart_path=_get_env("BULK_ORDER_CREATE_CART_PATH", "/carts"),
        append_items_path=append_path,
        request_timeout=_get_float("BULK_ORDER_REQUEST_TIMEOUT", 30.0),
    )

    messages = MessagesConfig(
        validation=_get_env("BULK_ORDER_VALIDATION_MESSAGE", DEFAULT_VALIDATION_MESSAGE),
        progress=_get_env("BULK_ORDER_PROGRESS_MESSAGE", DEFAULT_PROGRESS_MESSAGE),
        generic_failure=_get_env("BULK_ORDER_FAILURE_MESSAGE", DEFAULT_FAILURE_MESSAGE),
    )

    max_forms = _get_int("BULK_ORDER_MAX_FORMS", 1000)
    if max_forms < 1:
        raise ConfigurationException("BULK_ORDER_MAX_FORMS must be >= 1")

    return Settings(
        cart_service=cart_service,
        cart_view_url=_get_env("BULK_ORDER_CART_VIEW_URL", "/cart"),
        catalog_path=_get_env("BULK_ORDER_CATALOG_PATH"),
        currency=_get_env("BULK_ORDER_CURRENCY", "USD"),
        session_cookie=_get_env("BULK_ORDER_SESSION_COOKIE", "session"),
        max_forms=max_forms,
        form_ttl=_get_float("BULK_ORDER_FORM_TTL", 3600.0),
        log_level=_get_env("BULK_ORDER_LOG_LEVEL", "INFO"),
        host=_get_env("HOST", "0.0.0.0"),
        port=_get_int("PORT", 8000),
        messages=messages,
    )
