"""Main application entry point for the pickup order service.

This module wires configuration, the Square collaborators and the resolution
services into the FastAPI application for running locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from pickup_order_service.config import ServiceConfig
from pickup_order_service.handlers.api_handler import create_app
from pickup_order_service.observability import configure_logging, setup_observability
from pickup_order_service.service_factory import create_order_service, load_synonym_table

logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing pickup order service...")

    config = ServiceConfig.from_env()
    if not config.is_configured:
        logger.warning("SQUARE_ACCESS_TOKEN or SQUARE_LOCATION_ID not set, order endpoints will fail")

    synonyms = load_synonym_table(config)
    order_service = create_order_service(config, synonyms)

    app = create_app(order_service=order_service, config=config)
    setup_observability(app)

    logger.info(
        f"Pickup order service initialized - Square {config.square_environment}, "
        f"catalog TTL {config.catalog_ttl_seconds}s, strict={config.strict_order_resolution}"
    )

    return app


# Create the FastAPI application instance (only when not in test mode)
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8001"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
