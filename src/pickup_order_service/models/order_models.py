"""Order request, resolution and response models.

Request models are deliberately tolerant: voice agents and kiosk clients send
loosely shaped JSON, and a malformed field must degrade to "unresolved" rather
than fail validation for the whole order.
"""

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from pickup_order_service.models.catalog_models import MenuEntry

logger = logging.getLogger(__name__)


class OrderLineRequest(BaseModel):
    """One requested line as received at the service boundary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = Field(None, description="Spoken or typed item name")
    variation_id: str | None = Field(None, description="Explicit catalog variation id")
    variation: str | None = Field(None, description="Variation hint, e.g. 'large'")
    quantity: Any = Field(None, description="Requested quantity, coerced later")
    modifiers: list[str] = Field(default_factory=list, description="Free-text modifier phrases")
    note: str | None = Field(None, description="Free-text line note")

    @model_validator(mode="before")
    @classmethod
    def coerce_shape(cls, data: Any) -> Any:
        """Accept a bare string as a name and the legacy ``label`` key."""
        if isinstance(data, str):
            return {"name": data}
        if not isinstance(data, dict):
            return {}
        if not data.get("name") and data.get("label"):
            data = {**data, "name": data["label"]}
        return data

    @field_validator("name", "variation_id", "variation", "note", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        if v is None or isinstance(v, (dict, list)):
            return None
        return str(v)

    @field_validator("modifiers", mode="before")
    @classmethod
    def coerce_modifiers(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if not isinstance(v, (list, tuple)):
            return []
        return [str(m) for m in v if m is not None and not isinstance(m, (dict, list))]


class OrderRequest(BaseModel):
    """Order resolution request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    lines: list[OrderLineRequest] = Field(default_factory=list)
    customer_name: str | None = Field(None, description="Name used in the confirmation")
    customer_phone: str | None = Field(None, description="Pickup contact phone")
    notes: str | None = Field(None, description="Order-level note")
    scheduled_pickup_time: str | None = Field(None, description="RFC 3339 pickup time")

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_payload(cls, data: Any) -> Any:
        """Map the ``items_json`` / ``pickup_at`` payload used by voice agents."""
        if not isinstance(data, dict):
            return {}
        data = dict(data)

        if "lines" not in data and "items_json" in data:
            items = data.pop("items_json")
            if isinstance(items, str):
                try:
                    items = json.loads(items)
                except ValueError:
                    logger.warning("Discarding unparseable items_json payload")
                    items = []
            data["lines"] = items

        if not isinstance(data.get("lines", []), list):
            data["lines"] = []

        pickup_at = data.pop("pickup_at", None)
        if pickup_at and not (data.get("scheduledPickupTime") or data.get("scheduled_pickup_time")):
            data["scheduled_pickup_time"] = pickup_at

        return data

    @field_validator(
        "customer_name", "customer_phone", "notes", "scheduled_pickup_time", mode="before"
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        if v is None or isinstance(v, (dict, list)):
            return None
        text = str(v).strip()
        return text or None


class RequestedLine(BaseModel):
    """Caller input for one line, immutable once received."""

    model_config = ConfigDict(frozen=True)

    raw_name: str = ""
    raw_variation_hint: str | None = None
    explicit_variation_id: str | None = None
    raw_modifier_phrases: tuple[str, ...] = ()
    raw_note: str | None = None
    quantity: Any = None

    @property
    def display_name(self) -> str:
        """What to report when this line cannot be resolved."""
        return self.raw_name or self.explicit_variation_id or ""

    @classmethod
    def from_request(cls, line: OrderLineRequest) -> "RequestedLine":
        return cls(
            raw_name=line.name or "",
            raw_variation_hint=line.variation,
            explicit_variation_id=line.variation_id,
            raw_modifier_phrases=tuple(line.modifiers),
            raw_note=line.note,
            quantity=line.quantity,
        )


class LineItem(BaseModel):
    """Catalog-valid line item ready for the order backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    variation_id: str
    quantity: str
    modifier_ids: list[str] | None = None
    note: str | None = None


class ResolvedLine(BaseModel):
    """A line resolved against one catalog snapshot.

    Only ever built from a variation that exists in that snapshot.
    """

    model_config = ConfigDict(frozen=True)

    variation_id: str
    item_id: str
    item_name: str
    variation_name: str
    quantity: int = Field(..., gt=0)
    modifier_ids: tuple[str, ...] = ()
    included_names: tuple[str, ...] = ()
    excluded_names: tuple[str, ...] = ()
    demoted_phrases: tuple[str, ...] = ()
    note: str | None = None

    def to_line_item(self) -> LineItem:
        return LineItem(
            variation_id=self.variation_id,
            quantity=str(self.quantity),
            modifier_ids=list(self.modifier_ids) or None,
            note=self.note,
        )


class OrderResponse(BaseModel):
    """Successful resolution result."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    line_items: list[LineItem]
    spoken_confirmation: str


class CreateOrderResponse(OrderResponse):
    """Resolution result plus the id assigned by the order backend."""

    order_id: str


class MenuResponse(BaseModel):
    """Menu listing derived from the current catalog snapshot."""

    items: list[MenuEntry]
