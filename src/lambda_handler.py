"""AWS Lambda handler for both API Gateway and EventBridge events.

This module provides a single Lambda entry point that handles:
1. API Gateway requests (via Mangum ASGI adapter for FastAPI)
2. EventBridge scheduled events that keep the catalog cache warm

The handler automatically detects the event type and routes accordingly.
"""

import asyncio
import logging
import os
from typing import Any

from mangum import Mangum

from lambda_dependencies import get_event_handler, get_fastapi_app, initialize_lambda_environment
from pickup_order_service.handlers.event_handler import is_scheduled_warmup_event

# Initialize Lambda environment during cold start (skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    initialize_lambda_environment()

logger = logging.getLogger(__name__)

# Create FastAPI app and Mangum adapter (cached for warm starts, skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    app = get_fastapi_app()
    mangum_handler = Mangum(app, lifespan="off")
else:
    app = None  # type: ignore
    mangum_handler = None  # type: ignore

# One loop per container, shared by Mangum requests and warm-up ticks
_event_loop: asyncio.AbstractEventLoop | None = None


def get_event_loop() -> asyncio.AbstractEventLoop:
    """Return the container's event loop, installing it as the current loop.

    Mangum runs every request on ``asyncio.get_event_loop()``, so the warm-up
    must run on the same loop and must never close or unset it.
    """
    global _event_loop
    if _event_loop is None or _event_loop.is_closed():
        _event_loop = asyncio.new_event_loop()
    asyncio.set_event_loop(_event_loop)
    return _event_loop


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Multi-purpose Lambda handler for API Gateway and EventBridge events.

    Routes incoming events to the appropriate handler:
    - Scheduled EventBridge events -> CatalogEventHandler
    - API Gateway requests -> FastAPI via Mangum

    Args:
        event: The Lambda event payload (EventBridge or API Gateway)
        context: The Lambda context object

    Returns:
        Response dict with statusCode and body
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    try:
        get_event_loop()

        if is_scheduled_warmup_event(event):
            return handle_scheduled_event(event)

        logger.info("Processing API Gateway request via Mangum")
        result: dict[str, Any] = mangum_handler(event, context)
        return result

    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "body": f"Internal server error: {str(e)}",
        }


def handle_scheduled_event(event: dict[str, Any]) -> dict[str, Any]:
    """Warm the catalog cache on an EventBridge schedule tick.

    Args:
        event: The EventBridge event payload

    Returns:
        Response dict with statusCode and body
    """
    event_handler = get_event_handler()
    result: dict[str, Any] = get_event_loop().run_until_complete(
        event_handler.handle_scheduled_event(event)
    )
    return result
