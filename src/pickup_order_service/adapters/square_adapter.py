"""Square Orders API adapter.

Creates unpaid pickup orders so the POS and kitchen display see them.
"""

import logging
import uuid
from collections.abc import Sequence
from typing import Any

import httpx

from pickup_order_service.adapters.base_adapter import OrderBackendAdapter
from pickup_order_service.models.order_models import ResolvedLine

logger = logging.getLogger(__name__)


class SquareOrderAdapter(OrderBackendAdapter):
    """Adapter for the Square Orders API."""

    def __init__(
        self,
        base_url: str,
        access_token: str,
        location_id: str,
        api_version: str = "2024-09-19",
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize Square adapter.

        Args:
            base_url: Square API base URL (sandbox or production)
            access_token: Square access token
            location_id: Location that receives the orders
            api_version: Value for the Square-Version header
            timeout_seconds: Request timeout
        """
        super().__init__("square")
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.location_id = location_id
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds

    def format_order(
        self,
        lines: Sequence[ResolvedLine],
        customer_name: str,
        customer_phone: str | None = None,
        order_note: str | None = None,
        pickup_at: str | None = None,
    ) -> dict[str, Any]:
        """Build a Square CreateOrder request with a PICKUP fulfillment.

        Line quantities are strings and every modifier is attached once, as
        the Orders API expects.
        """
        line_items = []
        for line in lines:
            line_item: dict[str, Any] = {
                "catalog_object_id": line.variation_id,
                "quantity": str(line.quantity),
            }
            if line.modifier_ids:
                line_item["modifiers"] = [
                    {"catalog_object_id": modifier_id, "quantity": "1"}
                    for modifier_id in line.modifier_ids
                ]
            if line.note:
                line_item["note"] = line.note
            line_items.append(line_item)

        recipient: dict[str, Any] = {"display_name": customer_name}
        if customer_phone:
            recipient["phone_number"] = customer_phone

        pickup_details: dict[str, Any] = {
            "schedule_type": "SCHEDULED" if pickup_at else "ASAP",
            "recipient": recipient,
        }
        if pickup_at:
            pickup_details["pickup_at"] = pickup_at
        if order_note:
            pickup_details["note"] = order_note

        order: dict[str, Any] = {
            "location_id": self.location_id,
            "line_items": line_items,
            "fulfillments": [
                {"type": "PICKUP", "state": "PROPOSED", "pickup_details": pickup_details}
            ],
        }
        if order_note:
            order["note"] = order_note
        if customer_phone:
            order["reference_id"] = customer_phone

        return {"idempotency_key": str(uuid.uuid4()), "order": order}

    async def submit_order(self, payload: dict[str, Any]) -> str | None:
        """POST the order to Square.

        Args:
            payload: CreateOrder request from format_order

        Returns:
            str: Square order id, or None on failure
        """
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Square-Version": self.api_version,
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    f"{self.base_url}/v2/orders", json=payload, headers=headers
                )

                if response.status_code != 200:
                    logger.error(f"Square order creation failed: {response.status_code} {response.text}")
                    return None

                order_id = (response.json().get("order") or {}).get("id")
                if not order_id:
                    logger.error("Square order response did not include an order id")
                    return None

                logger.info(f"Created Square order {order_id} with {len(payload['order']['line_items'])} lines")
                return str(order_id)

        except (httpx.RequestError, ValueError) as e:
            logger.error(f"Square submit_order failed: {e}")
            return None
