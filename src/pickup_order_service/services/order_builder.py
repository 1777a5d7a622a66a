"""Assembles catalog-valid order lines from requested lines."""

import logging
from collections.abc import Sequence
from typing import Any

from pickup_order_service.errors import EmptyOrderError, UnresolvedItemsError
from pickup_order_service.models.catalog_models import CatalogSnapshot
from pickup_order_service.models.order_models import RequestedLine, ResolvedLine
from pickup_order_service.observability.metrics import (
    record_modifiers_demoted,
    record_order_lines,
    record_order_rejected,
)
from pickup_order_service.services.modifier_resolver import ModifierResolver
from pickup_order_service.services.name_resolver import NameResolver

logger = logging.getLogger(__name__)

NOTE_SEPARATOR = "; "


def coerce_quantity(raw: Any) -> int:
    """Coerce requested quantity to a positive integer, defaulting to 1."""
    if isinstance(raw, bool) or raw is None:
        return 1
    try:
        value = int(float(raw)) if isinstance(raw, str) else int(raw)
    except (TypeError, ValueError, OverflowError):
        return 1
    return value if value > 0 else 1


class OrderBuilder:
    """Drives name and modifier resolution for each requested line.

    By default lines that match nothing are dropped and the rest of the order
    proceeds. With ``strict=True`` any dropped line rejects the whole order.
    """

    def __init__(
        self,
        name_resolver: NameResolver,
        modifier_resolver: ModifierResolver,
        strict: bool = False,
    ) -> None:
        """Initialize the OrderBuilder.

        Args:
            name_resolver: Resolves item references to variations
            modifier_resolver: Resolves modifier phrases for a resolved item
            strict: Reject orders containing any unresolved line
        """
        self.name_resolver = name_resolver
        self.modifier_resolver = modifier_resolver
        self.strict = strict

    def build_line(self, requested: RequestedLine, snapshot: CatalogSnapshot) -> ResolvedLine | None:
        """Resolve one requested line.

        Args:
            requested: Caller input for the line
            snapshot: Snapshot shared by every line of the order

        Returns:
            ResolvedLine, or None when the line is dropped
        """
        quantity = coerce_quantity(requested.quantity)

        resolution = self.name_resolver.resolve(
            requested.raw_name,
            snapshot,
            variation_hint=requested.raw_variation_hint,
            explicit_variation_id=requested.explicit_variation_id,
        )
        if resolution is None:
            return None

        variation = resolution.variation
        phrases = [*resolution.implied_modifiers, *requested.raw_modifier_phrases]
        modifiers = self.modifier_resolver.resolve(variation.item_id, phrases, snapshot)
        record_modifiers_demoted(len(modifiers.demoted_phrases))

        note_parts = []
        if requested.raw_note and requested.raw_note.strip():
            note_parts.append(requested.raw_note.strip())
        note_parts.extend(modifiers.note_fragments)

        return ResolvedLine(
            variation_id=variation.id,
            item_id=variation.item_id,
            item_name=variation.item_name,
            variation_name=variation.variation_name,
            quantity=quantity,
            modifier_ids=tuple(modifiers.modifier_ids),
            included_names=tuple(modifiers.included_names),
            excluded_names=tuple(modifiers.excluded_names),
            demoted_phrases=tuple(modifiers.demoted_phrases),
            note=NOTE_SEPARATOR.join(note_parts) or None,
        )

    def build_order(
        self, requested_lines: Sequence[RequestedLine], snapshot: CatalogSnapshot
    ) -> list[ResolvedLine]:
        """Resolve every line of an order against one snapshot.

        Raises:
            EmptyOrderError: If no line resolved
            UnresolvedItemsError: In strict mode, if any line was dropped
        """
        resolved: list[ResolvedLine] = []
        unresolved: list[str] = []

        for requested in requested_lines:
            line = self.build_line(requested, snapshot)
            if line is None:
                unresolved.append(requested.display_name)
            else:
                resolved.append(line)

        record_order_lines(len(resolved), len(unresolved))

        if not resolved:
            record_order_rejected("empty_order")
            logger.warning(f"No requested lines matched the catalog ({len(unresolved)} requested)")
            raise EmptyOrderError()

        if unresolved:
            if self.strict:
                record_order_rejected("unresolved_items")
                logger.warning(f"Rejecting order with unresolved items: {unresolved}")
                raise UnresolvedItemsError(unresolved)
            logger.info(f"Dropped {len(unresolved)} unresolved lines: {unresolved}")

        return resolved
