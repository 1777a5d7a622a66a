"""Shared dependency factory for Lambda handlers.

Dependencies are created once per Lambda container and reused across
invocations, so the catalog snapshot survives between warm requests.
"""

import logging
import os

from fastapi import FastAPI

from pickup_order_service.config import ServiceConfig
from pickup_order_service.handlers.api_handler import create_app
from pickup_order_service.handlers.event_handler import CatalogEventHandler
from pickup_order_service.observability import configure_logging, setup_observability
from pickup_order_service.service_factory import create_order_service, load_synonym_table
from pickup_order_service.services.order_service import OrderService

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_config: ServiceConfig | None = None
_order_service: OrderService | None = None
_event_handler: CatalogEventHandler | None = None
_fastapi_app: FastAPI | None = None


def get_config() -> ServiceConfig:
    """Create or retrieve cached service configuration."""
    global _config

    if _config is None:
        _config = ServiceConfig.from_env()

    return _config


def get_order_service() -> OrderService:
    """Create or retrieve cached order service.

    The API and the scheduled warm-up share this instance and therefore the
    same catalog cache.

    Returns:
        Configured OrderService instance
    """
    global _order_service

    if _order_service is not None:
        return _order_service

    config = get_config()
    _order_service = create_order_service(config, load_synonym_table(config))

    logger.info("Order service initialized")
    return _order_service


def get_event_handler() -> CatalogEventHandler:
    """Create or retrieve cached catalog event handler."""
    global _event_handler

    if _event_handler is not None:
        return _event_handler

    _event_handler = CatalogEventHandler(catalog_cache=get_order_service().catalog_cache)

    logger.info("Event handler initialized")
    return _event_handler


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    _fastapi_app = create_app(order_service=get_order_service(), config=get_config())
    setup_observability(_fastapi_app)

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with logging.

    Should be called once during Lambda cold start.
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Lambda environment initialized")
