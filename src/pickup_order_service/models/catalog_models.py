"""Catalog data models.

These models represent the normalized view of the Square catalog that order
resolution works against. Everything inside a CatalogSnapshot is immutable so
a snapshot can be shared freely between concurrent requests.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from pickup_order_service.normalization import normalize

DEFAULT_VARIATION_NAME = "Regular"


class CatalogItem(BaseModel):
    """Catalog item (e.g. "Burger")."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Catalog-assigned item identifier")
    name: str = Field(..., description="Display name, also the item-name match key")
    variation_ids: tuple[str, ...] = Field(
        default=(), description="Variation ids in catalog-declared order"
    )
    modifier_list_ids: tuple[str, ...] = Field(
        default=(), description="Modifier lists enabled for this item"
    )


class Variation(BaseModel):
    """A concrete, independently priced orderable form of an item."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Catalog-assigned variation identifier")
    item_id: str = Field(..., description="Owning item")
    item_name: str = Field(..., description="Owning item's name")
    variation_name: str = Field(default=DEFAULT_VARIATION_NAME, description="Variation name")
    price_cents: int = Field(..., description="Price in minor currency units")
    currency: str = Field(default="USD", description="ISO currency code")
    ordinal: int | None = Field(None, description="Catalog ordinal within the item")

    @property
    def label(self) -> str:
        """Primary exact-match key, e.g. "Soda - Large"."""
        return f"{self.item_name} - {self.variation_name}"

    @property
    def price(self) -> str:
        """Price in major units formatted with two decimals."""
        return f"{self.price_cents / 100:.2f}"


class Modifier(BaseModel):
    """Optional add-on belonging to exactly one modifier list."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    modifier_list_id: str
    price_cents: int | None = None


class ModifierList(BaseModel):
    """Named group of modifiers that can be bound to items."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    modifiers: tuple[Modifier, ...] = ()


class MenuEntry(BaseModel):
    """One sellable variation as listed by the menu endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    item_id: str = Field(..., alias="itemId")
    name: str
    variation_id: str = Field(..., alias="variationId")
    price_cents: int = Field(..., alias="priceCents")
    price: str
    label: str


@dataclass(frozen=True, eq=False)
class CatalogSnapshot:
    """Immutable point-in-time materialization of the catalog.

    Attributes:
        items: Items by id
        variations: Sellable variations by id, iterated in label order
        modifier_lists: Modifier lists by id
        item_modifiers: Per item, normalized phrase -> modifier id
        modifier_names: Modifier id -> canonical name
        built_at: Clock reading taken when the snapshot was stored
    """

    items: Mapping[str, CatalogItem] = field(default_factory=dict)
    variations: Mapping[str, Variation] = field(default_factory=dict)
    modifier_lists: Mapping[str, ModifierList] = field(default_factory=dict)
    item_modifiers: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    modifier_names: Mapping[str, str] = field(default_factory=dict)
    built_at: float = 0.0

    def __post_init__(self) -> None:
        ordered = sorted(self.variations.values(), key=lambda v: (v.label.lower(), v.id))
        bindings = {k: MappingProxyType(dict(v)) for k, v in self.item_modifiers.items()}

        object.__setattr__(self, "items", MappingProxyType(dict(self.items)))
        object.__setattr__(self, "variations", MappingProxyType({v.id: v for v in ordered}))
        object.__setattr__(self, "modifier_lists", MappingProxyType(dict(self.modifier_lists)))
        object.__setattr__(self, "item_modifiers", MappingProxyType(bindings))
        object.__setattr__(self, "modifier_names", MappingProxyType(dict(self.modifier_names)))

        by_label: dict[str, Variation] = {}
        by_item: dict[str, list[Variation]] = {}
        for variation in ordered:
            by_label.setdefault(normalize(variation.label), variation)
            by_item.setdefault(variation.item_id, []).append(variation)

        by_item_name: dict[str, list[str]] = {}
        for item in self.items.values():
            if item.id in by_item:
                by_item_name.setdefault(normalize(item.name), []).append(item.id)

        object.__setattr__(self, "_by_label", by_label)
        object.__setattr__(
            self,
            "_by_item",
            {
                item_id: tuple(sorted(variations, key=self._declared_order_key))
                for item_id, variations in by_item.items()
            },
        )
        object.__setattr__(self, "_by_item_name", by_item_name)

    def _declared_order_key(self, variation: Variation) -> tuple[int, int, str]:
        # Catalog-declared position first, then ordinal, then label as a stable fallback.
        item = self.items.get(variation.item_id)
        declared = item.variation_ids if item else ()
        position = declared.index(variation.id) if variation.id in declared else len(declared)
        ordinal = variation.ordinal if variation.ordinal is not None else 2**31
        return (position, ordinal, variation.label.lower())

    @property
    def is_empty(self) -> bool:
        return not self.variations

    def variation_by_label(self, label: str) -> Variation | None:
        """Exact, case-insensitive label lookup."""
        return self._by_label.get(normalize(label))  # type: ignore[attr-defined]

    def variations_for_item(self, item_id: str) -> tuple[Variation, ...]:
        """Sellable variations of an item in catalog-declared order."""
        return self._by_item.get(item_id, ())  # type: ignore[attr-defined]

    def first_variation_for_item_name(self, name: str) -> Variation | None:
        """First declared variation of the first item whose name equals ``name``."""
        for item_id in self._by_item_name.get(normalize(name), ()):  # type: ignore[attr-defined]
            variations = self.variations_for_item(item_id)
            if variations:
                return variations[0]
        return None

    def modifier_binding(self, item_id: str) -> Mapping[str, str]:
        """Normalized phrase -> modifier id for the lists bound to ``item_id``."""
        return self.item_modifiers.get(item_id, MappingProxyType({}))

    def menu_entries(self) -> list[MenuEntry]:
        """Sellable variations flattened for menu listings, sorted by label."""
        return [
            MenuEntry(
                item_id=v.item_id,
                name=v.item_name,
                variation_id=v.id,
                price_cents=v.price_cents,
                price=v.price,
                label=v.label,
            )
            for v in self.variations.values()
        ]
