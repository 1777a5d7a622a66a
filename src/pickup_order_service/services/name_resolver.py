"""Resolves free-text item references to exactly one catalog variation.

Resolution is an ordered chain of pure matching strategies, from most to
least specific, so explicit labels always win over fuzzy containment. Each
strategy takes the normalized query and a snapshot and returns a variation or
None.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from pickup_order_service.models.catalog_models import CatalogSnapshot, Variation
from pickup_order_service.normalization import normalize
from pickup_order_service.services.synonyms import SynonymTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameQuery:
    """Normalized resolution input after synonym expansion."""

    name: str
    variation_hint: str = ""
    hint_keyword: str = ""


@dataclass(frozen=True)
class NameResolution:
    """A successful resolution.

    Attributes:
        variation: The chosen catalog variation
        implied_modifiers: Modifier phrases implied by a matched synonym
        strategy: Name of the strategy that matched
    """

    variation: Variation
    implied_modifiers: tuple[str, ...] = ()
    strategy: str = ""


Strategy = Callable[[NameQuery, CatalogSnapshot], Variation | None]


def match_hinted_label(query: NameQuery, snapshot: CatalogSnapshot) -> Variation | None:
    """Exact label "{name} - {hint}" when the caller named a variation."""
    if not query.variation_hint:
        return None
    return snapshot.variation_by_label(f"{query.name} - {query.variation_hint}")


def match_exact_label(query: NameQuery, snapshot: CatalogSnapshot) -> Variation | None:
    return snapshot.variation_by_label(query.name)


def match_item_name(query: NameQuery, snapshot: CatalogSnapshot) -> Variation | None:
    """Exact item name; the first catalog-declared variation wins."""
    return snapshot.first_variation_for_item_name(query.name)


def match_hint_keyword(query: NameQuery, snapshot: CatalogSnapshot) -> Variation | None:
    """Synonym hint contained in a label or item name ("coke" -> "Soda - Coke")."""
    if not query.hint_keyword:
        return None
    for variation in snapshot.variations.values():
        if query.hint_keyword in normalize(variation.label) or query.hint_keyword in normalize(
            variation.item_name
        ):
            return variation
    return None


def match_regular_label(query: NameQuery, snapshot: CatalogSnapshot) -> Variation | None:
    return snapshot.variation_by_label(f"{query.name} - regular")


def match_label_prefix(query: NameQuery, snapshot: CatalogSnapshot) -> Variation | None:
    prefix = f"{query.name} -"
    for variation in snapshot.variations.values():
        if normalize(variation.label).startswith(prefix):
            return variation
    return None


def match_label_substring(query: NameQuery, snapshot: CatalogSnapshot) -> Variation | None:
    for variation in snapshot.variations.values():
        if query.name in normalize(variation.label):
            return variation
    return None


RESOLUTION_CHAIN: tuple[tuple[str, Strategy], ...] = (
    ("hinted_label", match_hinted_label),
    ("exact_label", match_exact_label),
    ("item_name", match_item_name),
    ("hint_keyword", match_hint_keyword),
    ("regular_label", match_regular_label),
    ("label_prefix", match_label_prefix),
    ("label_substring", match_label_substring),
)


class NameResolver:
    """Maps an item reference to a single variation of a snapshot."""

    def __init__(self, synonyms: SynonymTable | None = None) -> None:
        self.synonyms = synonyms if synonyms is not None else SynonymTable.default()

    def resolve(
        self,
        raw_name: str,
        snapshot: CatalogSnapshot,
        variation_hint: str | None = None,
        explicit_variation_id: str | None = None,
    ) -> NameResolution | None:
        """Resolve a requested name against a snapshot.

        Args:
            raw_name: Free-text item or label reference
            snapshot: Catalog snapshot to resolve against
            variation_hint: Optional variation qualifier, e.g. "large"
            explicit_variation_id: Catalog variation id; never fuzzy-matched

        Returns:
            NameResolution, or None when nothing in the catalog matches
        """
        if explicit_variation_id:
            variation = snapshot.variations.get(explicit_variation_id)
            if variation is None:
                logger.info(f"Explicit variation id {explicit_variation_id} is not in the catalog")
                return None
            return NameResolution(variation=variation, strategy="explicit_id")

        name = normalize(raw_name)
        if not name:
            return None

        implied: tuple[str, ...] = ()
        hint_keyword = ""
        rule = self.synonyms.lookup(name)
        if rule is not None:
            name = normalize(rule.canonical_item_name)
            implied = rule.implied_modifiers
            hint_keyword = normalize(rule.hint_keyword)

        query = NameQuery(
            name=name, variation_hint=normalize(variation_hint), hint_keyword=hint_keyword
        )
        for strategy_name, strategy in RESOLUTION_CHAIN:
            variation = strategy(query, snapshot)
            if variation is not None:
                logger.debug(f"Resolved '{raw_name}' to {variation.label} via {strategy_name}")
                return NameResolution(
                    variation=variation, implied_modifiers=implied, strategy=strategy_name
                )

        logger.info(f"No catalog variation matches '{raw_name}'")
        return None
