"""Unit tests for the scheduled catalog warm-up handler."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from pickup_order_service.errors import CatalogUnavailableError
from pickup_order_service.handlers.event_handler import CatalogEventHandler, is_scheduled_warmup_event
from pickup_order_service.models.catalog_models import CatalogSnapshot
from pickup_order_service.services.catalog_cache import CatalogCache


@pytest.mark.unit
class TestIsScheduledWarmupEvent:
    """Tests for is_scheduled_warmup_event function."""

    def test_returns_true_for_scheduled_event(self, mock_scheduled_event: dict[str, Any]) -> None:
        """Test that EventBridge schedule ticks are recognized."""
        assert is_scheduled_warmup_event(mock_scheduled_event) is True

    def test_returns_false_for_other_eventbridge_events(self) -> None:
        """Test that custom EventBridge events are not warm-ups."""
        event = {"source": "com.example.menu", "detail-type": "MenuChanged", "detail": {}}

        assert is_scheduled_warmup_event(event) is False

    def test_returns_false_for_api_gateway_event(self) -> None:
        """Test that HTTP events are not warm-ups."""
        event = {
            "version": "2.0",
            "requestContext": {"http": {"method": "GET", "path": "/health"}},
            "rawPath": "/health",
        }

        assert is_scheduled_warmup_event(event) is False


@pytest.mark.unit
class TestCatalogEventHandler:
    """Test suite for CatalogEventHandler."""

    @pytest.fixture
    def mock_cache(self, sample_snapshot: CatalogSnapshot) -> MagicMock:
        cache = MagicMock(spec=CatalogCache)
        cache.get = AsyncMock(return_value=sample_snapshot)
        return cache

    @pytest.mark.asyncio
    async def test_warm_catalog_success(self, mock_cache: MagicMock) -> None:
        """Test that a successful refresh reports a warm catalog."""
        handler = CatalogEventHandler(catalog_cache=mock_cache)

        assert await handler.warm_catalog() is True
        mock_cache.get.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_warm_catalog_failure(self, mock_cache: MagicMock) -> None:
        """Test that refresh failures are reported rather than raised."""
        mock_cache.get = AsyncMock(side_effect=CatalogUnavailableError("down"))
        handler = CatalogEventHandler(catalog_cache=mock_cache)

        assert await handler.warm_catalog() is False

    @pytest.mark.asyncio
    async def test_handle_scheduled_event(
        self, mock_cache: MagicMock, mock_scheduled_event: dict[str, Any]
    ) -> None:
        """Test the response for a successful tick."""
        handler = CatalogEventHandler(catalog_cache=mock_cache)

        result = await handler.handle_scheduled_event(mock_scheduled_event)

        assert result == {"statusCode": 200, "body": "Catalog warm"}

    @pytest.mark.asyncio
    async def test_handle_scheduled_event_unavailable(
        self, mock_cache: MagicMock, mock_scheduled_event: dict[str, Any]
    ) -> None:
        """Test the response when Square cannot be reached."""
        mock_cache.get = AsyncMock(side_effect=CatalogUnavailableError("down"))
        handler = CatalogEventHandler(catalog_cache=mock_cache)

        result = await handler.handle_scheduled_event(mock_scheduled_event)

        assert result == {"statusCode": 503, "body": "Catalog unavailable"}
