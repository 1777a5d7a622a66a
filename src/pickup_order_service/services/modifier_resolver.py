"""Resolves free-text modifier phrases against one item's allowed modifiers."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from pickup_order_service.models.catalog_models import CatalogSnapshot
from pickup_order_service.normalization import base_word, negation_target, normalize

logger = logging.getLogger(__name__)


@dataclass
class ModifierResolution:
    """Outcome of resolving a line's modifier phrases.

    Attributes:
        modifier_ids: Catalog modifiers to attach, in phrase order, each at most once
        note_fragments: Original phrases that became free text
        included_names: Canonical names of attached modifiers
        excluded_names: Targets of negated phrases ("no onions" -> "onions")
        demoted_phrases: Unmatched, non-negated phrases kept as free text
    """

    modifier_ids: list[str] = field(default_factory=list)
    note_fragments: list[str] = field(default_factory=list)
    included_names: list[str] = field(default_factory=list)
    excluded_names: list[str] = field(default_factory=list)
    demoted_phrases: list[str] = field(default_factory=list)


class ModifierResolver:
    """Maps modifier phrases to catalog modifiers or line notes.

    Lookups are scoped to the item's bound modifier lists, so a modifier that
    exists only for another item is never attached, and phrases naming an
    already attached modifier ("cheeseburger" plus "extra cheese") attach it
    once. Negations have no "remove modifier" counterpart in the catalog and
    are recorded as notes only. Unknown phrases are demoted to notes, never
    treated as errors.
    """

    def resolve(
        self, item_id: str, phrases: Iterable[str], snapshot: CatalogSnapshot
    ) -> ModifierResolution:
        binding = snapshot.modifier_binding(item_id)
        result = ModifierResolution()

        for raw in phrases:
            phrase = normalize(raw)
            if not phrase:
                continue
            original = str(raw).strip()

            target = negation_target(phrase)
            if target is not None:
                result.excluded_names.append(target)
                result.note_fragments.append(original)
                continue

            modifier_id = binding.get(phrase) or binding.get(base_word(phrase))
            if modifier_id is None:
                logger.debug(f"Modifier '{original}' not available for item {item_id}, adding as note")
                result.note_fragments.append(original)
                result.demoted_phrases.append(original)
                continue

            if modifier_id in result.modifier_ids:
                logger.debug(f"Modifier '{original}' already attached to item {item_id}")
                continue

            result.modifier_ids.append(modifier_id)
            result.included_names.append(snapshot.modifier_names.get(modifier_id, phrase))

        return result
