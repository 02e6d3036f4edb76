"""HTTP surface for the bulk order form."""

from bulkorder.api.api_server import create_api_app

__all__ = ["create_api_app"]
