"""Builds immutable catalog snapshots from raw Square catalog objects.

Every catalog object is individually optional: objects that are deleted,
malformed, or not sellable (no owning item name, no price) are skipped and
never fail the build.
"""

import logging
from collections.abc import Iterable
from typing import Any

from pickup_order_service.models.catalog_models import (
    DEFAULT_VARIATION_NAME,
    CatalogItem,
    CatalogSnapshot,
    Modifier,
    ModifierList,
    Variation,
)
from pickup_order_service.normalization import binding_base_word, normalize

logger = logging.getLogger(__name__)

ITEM = "ITEM"
ITEM_VARIATION = "ITEM_VARIATION"
MODIFIER_LIST = "MODIFIER_LIST"
MODIFIER = "MODIFIER"


def _is_live(obj: Any) -> bool:
    return (
        isinstance(obj, dict)
        and isinstance(obj.get("id"), str)
        and bool(obj["id"])
        and not obj.get("is_deleted", False)
    )


def _data(obj: dict[str, Any], key: str) -> dict[str, Any]:
    data = obj.get(key)
    return data if isinstance(data, dict) else {}


def _money_cents(money: Any) -> int | None:
    """Extract an integer minor-unit amount from a Square Money object."""
    if not isinstance(money, dict):
        return None
    amount = money.get("amount")
    if isinstance(amount, bool):
        return None
    try:
        return int(amount)
    except (TypeError, ValueError):
        return None


def _currency(money: Any) -> str:
    if isinstance(money, dict) and isinstance(money.get("currency"), str):
        return money["currency"]
    return "USD"


def _nested(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    nested = data.get(key)
    if not isinstance(nested, list):
        return []
    return [obj for obj in nested if _is_live(obj)]


def build_catalog_snapshot(
    objects: Iterable[dict[str, Any]], built_at: float = 0.0
) -> CatalogSnapshot:
    """Normalize raw catalog objects into a CatalogSnapshot.

    Construction order matters: items and modifier lists are indexed first,
    then modifiers (which reference list ids), then variations (which need
    their owning item's name and modifier-list associations).

    Args:
        objects: Raw catalog objects collected across all pages
        built_at: Clock reading to stamp on the snapshot

    Returns:
        CatalogSnapshot with item, variation and modifier-binding indices
    """
    raw_items: dict[str, dict[str, Any]] = {}
    list_names: dict[str, str] = {}
    raw_variations: dict[str, dict[str, Any]] = {}
    raw_modifiers: dict[str, dict[str, Any]] = {}
    nested_variations: list[dict[str, Any]] = []
    nested_modifiers: list[dict[str, Any]] = []
    nested_list_ids: dict[str, str] = {}

    # Pass 1: items and modifier lists.
    for obj in objects:
        if not _is_live(obj):
            continue
        kind = obj.get("type")
        if kind == ITEM:
            data = _data(obj, "item_data")
            raw_items[obj["id"]] = data
            nested_variations.extend(_nested(data, "variations"))
        elif kind == MODIFIER_LIST:
            data = _data(obj, "modifier_list_data")
            list_names[obj["id"]] = str(data.get("name") or "")
            for nested in _nested(data, "modifiers"):
                nested_list_ids[nested["id"]] = obj["id"]
                nested_modifiers.append(nested)
        elif kind == ITEM_VARIATION:
            raw_variations[obj["id"]] = obj
        elif kind == MODIFIER:
            raw_modifiers[obj["id"]] = obj

    # Top-level objects take precedence over copies nested in their parent.
    for nested in nested_variations:
        raw_variations.setdefault(nested["id"], nested)
    for nested in nested_modifiers:
        raw_modifiers.setdefault(nested["id"], nested)

    # Pass 2: modifiers, attached to lists that were indexed above.
    modifiers_by_list: dict[str, list[Modifier]] = {list_id: [] for list_id in list_names}
    modifier_names: dict[str, str] = {}
    for modifier_id, obj in raw_modifiers.items():
        data = _data(obj, "modifier_data")
        list_id = data.get("modifier_list_id") or nested_list_ids.get(modifier_id)
        if not isinstance(list_id, str) or list_id not in modifiers_by_list:
            logger.debug(f"Skipping modifier {modifier_id}: unknown list {list_id}")
            continue
        modifier = Modifier(
            id=modifier_id,
            name=str(data.get("name") or ""),
            modifier_list_id=list_id,
            price_cents=_money_cents(data.get("price_money")),
        )
        modifiers_by_list[list_id].append(modifier)
        modifier_names[modifier_id] = modifier.name

    modifier_lists = {
        list_id: ModifierList(id=list_id, name=name, modifiers=tuple(modifiers_by_list[list_id]))
        for list_id, name in list_names.items()
    }

    items: dict[str, CatalogItem] = {}
    for item_id, data in raw_items.items():
        declared = tuple(v["id"] for v in _nested(data, "variations"))
        bound_lists = []
        for info in data.get("modifier_list_info") or []:
            if not isinstance(info, dict) or info.get("enabled") is False:
                continue
            list_id = info.get("modifier_list_id")
            if isinstance(list_id, str) and list_id in modifier_lists and list_id not in bound_lists:
                bound_lists.append(list_id)
        items[item_id] = CatalogItem(
            id=item_id,
            name=str(data.get("name") or ""),
            variation_ids=declared,
            modifier_list_ids=tuple(bound_lists),
        )

    # Pass 3: sellable variations and the per-item modifier bindings.
    variations: dict[str, Variation] = {}
    item_modifiers: dict[str, dict[str, str]] = {}
    dropped = 0
    for variation_id, obj in raw_variations.items():
        data = _data(obj, "item_variation_data")
        item_id = data.get("item_id")
        item = items.get(item_id) if isinstance(item_id, str) else None
        cents = _money_cents(data.get("price_money"))
        if item is None or not item.name or cents is None:
            dropped += 1
            logger.debug(f"Dropping unsellable variation {variation_id}")
            continue

        ordinal = data.get("ordinal")
        variations[variation_id] = Variation(
            id=variation_id,
            item_id=item.id,
            item_name=item.name,
            variation_name=str(data.get("name") or DEFAULT_VARIATION_NAME),
            price_cents=cents,
            currency=_currency(data.get("price_money")),
            ordinal=ordinal if isinstance(ordinal, int) and not isinstance(ordinal, bool) else None,
        )

        if item.id not in item_modifiers:
            binding = _bind_modifiers(item, modifier_lists)
            if binding:
                item_modifiers[item.id] = binding

    logger.info(
        f"Built catalog snapshot: {len(items)} items, {len(variations)} variations, "
        f"{len(modifier_names)} modifiers ({dropped} variations dropped)"
    )

    return CatalogSnapshot(
        items=items,
        variations=variations,
        modifier_lists=modifier_lists,
        item_modifiers=item_modifiers,
        modifier_names=modifier_names,
        built_at=built_at,
    )


def _bind_modifiers(item: CatalogItem, modifier_lists: dict[str, ModifierList]) -> dict[str, str]:
    """Map normalized modifier names and base words to ids for one item.

    Full names win over base words, and the first list declared on the item
    wins when two modifiers share a key.
    """
    full: dict[str, str] = {}
    base: dict[str, str] = {}
    for list_id in item.modifier_list_ids:
        for modifier in modifier_lists[list_id].modifiers:
            name = normalize(modifier.name)
            if not name:
                continue
            full.setdefault(name, modifier.id)
            base.setdefault(binding_base_word(name), modifier.id)
    return {**base, **full}
