"""
FastAPI server for the bulk order form.

Serves the form state and the quantity/submit events over JSON; the page
itself (templating, styling) is rendered elsewhere.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from bulkorder.api.forms import FormRegistry
from bulkorder.api.rate_limit import build_limiter
from bulkorder.api.routes_form import router as form_router
from bulkorder.api.routes_form import set_form_registry
from bulkorder.core.config import Settings, load_settings
from bulkorder.core.exceptions import ConfigurationException
from bulkorder.core.log import setup_logging
from bulkorder.domain.items import Item
from bulkorder.integrations.catalog import load_catalog

logger = logging.getLogger(__name__)


def create_api_app(
    settings: Settings,
    catalog: list[Item],
    registry: FormRegistry | None = None,
) -> FastAPI:
    """
    Create FastAPI application for the bulk order form.

    Args:
        settings: Loaded settings
        catalog: Orderable items; every session gets its own copy
        registry: Optional pre-built registry (tests inject one with fake clients)
    """
    registry = registry or FormRegistry(settings, catalog)
    set_form_registry(registry)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Bulk order API starting with %s catalog items", len(registry.catalog))
        yield
        logger.info("Bulk order API shutting down...")
        await registry.close()

    app = FastAPI(
        title="Bulk Order API",
        description="Set quantities for many items and add them to the cart at once",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.limiter = build_limiter()
    app.state.session_cookie = settings.session_cookie
    app.state.registry = registry
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.include_router(form_router, prefix="/api")

    return app


def run() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)

    if not settings.catalog_path:
        raise ConfigurationException("BULK_ORDER_CATALOG_PATH environment variable is not set")
    catalog = load_catalog(settings.catalog_path, settings.currency)

    app = create_api_app(settings, catalog)
    logger.info("Starting bulk order API on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
