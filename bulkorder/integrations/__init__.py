"""Integrations package - adapters for the cart service and catalog source."""

from bulkorder.integrations.cart_service import CartServiceClient, extract_error_message
from bulkorder.integrations.catalog import load_catalog, parse_catalog

__all__ = [
    "CartServiceClient",
    "extract_error_message",
    "load_catalog",
    "parse_catalog",
]
