"""EventBridge handler for scheduled catalog warm-up events."""

import logging
from typing import Any

from pickup_order_service.errors import CatalogUnavailableError
from pickup_order_service.services.catalog_cache import CatalogCache

logger = logging.getLogger(__name__)

SCHEDULED_EVENT_SOURCE = "aws.events"
SCHEDULED_EVENT_DETAIL_TYPE = "Scheduled Event"


def is_scheduled_warmup_event(event: dict[str, Any]) -> bool:
    """Whether the event is an EventBridge schedule tick.

    Args:
        event: The Lambda event payload

    Returns:
        True for scheduled events from aws.events, False otherwise
    """
    return (
        event.get("source") == SCHEDULED_EVENT_SOURCE
        and event.get("detail-type") == SCHEDULED_EVENT_DETAIL_TYPE
    )


class CatalogEventHandler:
    """Keeps the catalog cache of a warm Lambda container populated.

    A scheduled rule invokes the function periodically; each tick refreshes
    the snapshot if it has gone stale so callers rarely wait on Square.
    """

    def __init__(self, catalog_cache: CatalogCache) -> None:
        self.catalog_cache = catalog_cache

    async def warm_catalog(self) -> bool:
        """Refresh the catalog snapshot if it is stale.

        Returns:
            True if a usable snapshot is loaded afterwards, False if the refresh failed
        """
        try:
            snapshot = await self.catalog_cache.get()
        except CatalogUnavailableError as e:
            logger.error(f"Scheduled catalog warm-up failed: {e}")
            return False

        logger.info(f"Catalog warm with {len(snapshot.variations)} variations")
        return True

    async def handle_scheduled_event(self, event: dict[str, Any]) -> dict[str, Any]:
        """Handle one scheduled event.

        Args:
            event: The EventBridge event payload

        Returns:
            Response dict with statusCode and body
        """
        logger.info(f"Processing scheduled event {event.get('id', '')}")

        if await self.warm_catalog():
            return {"statusCode": 200, "body": "Catalog warm"}
        return {"statusCode": 503, "body": "Catalog unavailable"}
