"""Shared pytest fixtures and configuration for all tests."""

import os
from typing import Any

import pytest

# Entry-point modules skip app creation in test mode
os.environ.setdefault("ENVIRONMENT", "test")

from pickup_order_service.models.catalog_models import CatalogSnapshot  # noqa: E402
from pickup_order_service.services.catalog_snapshot import build_catalog_snapshot  # noqa: E402
from tests.catalog_factories import make_item, make_modifier_list, make_variation  # noqa: E402


@pytest.fixture
def square_catalog_objects() -> list[dict[str, Any]]:
    """Fixture providing a small Square catalog: burgers, sodas, fries."""
    return [
        make_item(
            "item_burger",
            "Burger",
            [
                make_variation("var_burger_regular", "item_burger", "Regular", 899, ordinal=0),
                make_variation("var_burger_large", "item_burger", "Large", 1099, ordinal=1),
            ],
            modifier_list_ids=["ml_toppings"],
        ),
        make_item(
            "item_soda",
            "Soda",
            [
                make_variation("var_soda_small", "item_soda", "Small", 199, ordinal=0),
                make_variation("var_soda_large", "item_soda", "Large", 299, ordinal=1),
            ],
        ),
        make_item(
            "item_fries",
            "Fries",
            [make_variation("var_fries_regular", "item_fries", "Regular", 349)],
            modifier_list_ids=["ml_sauces"],
        ),
        make_modifier_list(
            "ml_toppings",
            "Toppings",
            [("mod_cheese", "Cheese"), ("mod_bacon", "Extra Bacon"), ("mod_onions", "Onions")],
        ),
        make_modifier_list("ml_sauces", "Sauces", [("mod_ketchup", "Ketchup")]),
    ]


@pytest.fixture
def sample_snapshot(square_catalog_objects: list[dict[str, Any]]) -> CatalogSnapshot:
    """Fixture providing a snapshot built from the sample catalog."""
    return build_catalog_snapshot(square_catalog_objects, built_at=100.0)


@pytest.fixture
def fountain_snapshot() -> CatalogSnapshot:
    """Fixture providing a catalog where drinks are flavors of a fountain item."""
    return build_catalog_snapshot(
        [
            make_item(
                "item_fountain",
                "Fountain Drink",
                [
                    make_variation("var_fountain_coke", "item_fountain", "Coke", 249),
                    make_variation("var_fountain_sprite", "item_fountain", "Sprite", 249),
                ],
            )
        ]
    )


@pytest.fixture
def mock_scheduled_event() -> dict:
    """Fixture providing a sample EventBridge scheduled event."""
    return {
        "version": "0",
        "id": "event_123",
        "detail-type": "Scheduled Event",
        "source": "aws.events",
        "account": "123456789012",
        "time": "2024-01-15T10:30:00Z",
        "region": "us-east-1",
        "resources": ["arn:aws:events:us-east-1:123456789012:rule/catalog-warmup"],
        "detail": {},
    }
