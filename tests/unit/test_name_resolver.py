"""Unit tests for NameResolver and its matching strategies."""

import pytest

from pickup_order_service.models.catalog_models import CatalogSnapshot
from pickup_order_service.models.synonym_models import SynonymRule
from pickup_order_service.services.catalog_snapshot import build_catalog_snapshot
from pickup_order_service.services.name_resolver import (
    RESOLUTION_CHAIN,
    NameQuery,
    NameResolver,
    match_exact_label,
    match_hint_keyword,
    match_hinted_label,
    match_label_prefix,
    match_label_substring,
)
from pickup_order_service.services.synonyms import SynonymTable
from tests.catalog_factories import make_item, make_variation


@pytest.mark.unit
class TestNameResolver:
    """Test suite for NameResolver.resolve."""

    @pytest.fixture
    def resolver(self) -> NameResolver:
        """Create a resolver with the built-in synonym rules."""
        return NameResolver()

    def test_variation_hint_selects_exact_label(
        self, resolver: NameResolver, sample_snapshot: CatalogSnapshot
    ) -> None:
        """Test that name plus hint resolves to the hinted label."""
        resolution = resolver.resolve("Soda", sample_snapshot, variation_hint="Large")

        assert resolution is not None
        assert resolution.variation.id == "var_soda_large"
        assert resolution.strategy == "hinted_label"

    def test_exact_label_is_case_and_whitespace_insensitive(
        self, resolver: NameResolver, sample_snapshot: CatalogSnapshot
    ) -> None:
        """Test exact label matching after normalization."""
        resolution = resolver.resolve("  soda   -  LARGE ", sample_snapshot)

        assert resolution is not None
        assert resolution.variation.id == "var_soda_large"
        assert resolution.strategy == "exact_label"

    def test_item_name_picks_first_declared_variation(
        self, resolver: NameResolver, sample_snapshot: CatalogSnapshot
    ) -> None:
        """Test that a bare item name resolves to its first declared variation."""
        resolution = resolver.resolve("Soda", sample_snapshot)

        assert resolution is not None
        assert resolution.variation.id == "var_soda_small"
        assert resolution.strategy == "item_name"

    def test_unknown_hint_falls_back_to_item_name(
        self, resolver: NameResolver, sample_snapshot: CatalogSnapshot
    ) -> None:
        """Test that a hint matching no label does not block resolution."""
        resolution = resolver.resolve("Burger", sample_snapshot, variation_hint="Jumbo")

        assert resolution is not None
        assert resolution.variation.id == "var_burger_regular"

    def test_explicit_variation_id_wins(
        self, resolver: NameResolver, sample_snapshot: CatalogSnapshot
    ) -> None:
        """Test that an explicit variation id is used directly."""
        resolution = resolver.resolve(
            "Burger", sample_snapshot, explicit_variation_id="var_soda_large"
        )

        assert resolution is not None
        assert resolution.variation.id == "var_soda_large"
        assert resolution.strategy == "explicit_id"

    def test_unknown_explicit_variation_id_is_not_fuzzy_matched(
        self, resolver: NameResolver, sample_snapshot: CatalogSnapshot
    ) -> None:
        """Test that a missing explicit id returns None even with a valid name."""
        resolution = resolver.resolve("Soda", sample_snapshot, explicit_variation_id="var_gone")

        assert resolution is None

    def test_synonym_substitutes_canonical_name_and_implies_modifiers(
        self, resolver: NameResolver, sample_snapshot: CatalogSnapshot
    ) -> None:
        """Test that 'cheeseburger' resolves to Burger with 'add cheese' implied."""
        resolution = resolver.resolve("Cheeseburger", sample_snapshot)

        assert resolution is not None
        assert resolution.variation.id == "var_burger_regular"
        assert resolution.implied_modifiers == ("add cheese",)

    def test_synonym_with_hint_keyword(
        self, resolver: NameResolver, fountain_snapshot: CatalogSnapshot
    ) -> None:
        """Test that 'coke' uses its hint keyword when no Soda item exists."""
        resolution = resolver.resolve("coke", fountain_snapshot)

        assert resolution is not None
        assert resolution.variation.id == "var_fountain_coke"
        assert resolution.strategy == "hint_keyword"

    def test_regular_label_fallback(self, resolver: NameResolver) -> None:
        """Test '{name} - Regular' when no item carries the exact name."""
        snapshot = build_catalog_snapshot(
            [
                make_item(
                    "item_1",
                    "Kids Meal",
                    [
                        make_variation("var_1", "item_1", "Burger - Large", 700),
                        make_variation("var_2", "item_1", "Burger - Regular", 600),
                    ],
                ),
            ]
        )

        resolution = resolver.resolve("kids meal - burger", snapshot)

        assert resolution is not None
        assert resolution.variation.id == "var_2"
        assert resolution.strategy == "regular_label"

    def test_substring_fallback(self, resolver: NameResolver, sample_snapshot: CatalogSnapshot) -> None:
        """Test that a partial reference resolves by label containment."""
        resolution = resolver.resolve("fri", sample_snapshot)

        assert resolution is not None
        assert resolution.variation.id == "var_fries_regular"
        assert resolution.strategy == "label_substring"

    def test_no_match_returns_none(self, resolver: NameResolver, sample_snapshot: CatalogSnapshot) -> None:
        """Test that an unknown name is not found."""
        assert resolver.resolve("Pizza", sample_snapshot) is None

    def test_blank_name_returns_none(self, resolver: NameResolver, sample_snapshot: CatalogSnapshot) -> None:
        """Test that an empty or whitespace name is not found."""
        assert resolver.resolve("   ", sample_snapshot) is None
        assert resolver.resolve("", sample_snapshot) is None

    def test_resolution_is_idempotent(
        self, resolver: NameResolver, sample_snapshot: CatalogSnapshot
    ) -> None:
        """Test that the same input always produces the same variation."""
        inputs = ["soda", "burger", "large", "cheeseburger", "fr"]

        first = [resolver.resolve(name, sample_snapshot) for name in inputs]
        second = [resolver.resolve(name, sample_snapshot) for name in inputs]

        assert [r.variation.id if r else None for r in first] == [
            r.variation.id if r else None for r in second
        ]

    def test_custom_synonym_table(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test that synonym rules are data, not code."""
        resolver = NameResolver(
            synonyms=SynonymTable([SynonymRule(pattern="chips", canonical_item_name="Fries")])
        )

        resolution = resolver.resolve("Chips", sample_snapshot)

        assert resolution is not None
        assert resolution.variation.id == "var_fries_regular"

    def test_every_result_exists_in_snapshot(
        self, resolver: NameResolver, sample_snapshot: CatalogSnapshot
    ) -> None:
        """Test that resolution never invents a variation."""
        for name in ["soda", "burger - large", "hamburger", "pop", "s", "r"]:
            resolution = resolver.resolve(name, sample_snapshot)
            if resolution is not None:
                assert resolution.variation.id in sample_snapshot.variations


@pytest.mark.unit
class TestMatchingStrategies:
    """Test suite for the individual matching strategies."""

    def test_chain_order(self) -> None:
        """Test that strategies run from most to least specific."""
        assert [name for name, _ in RESOLUTION_CHAIN] == [
            "hinted_label",
            "exact_label",
            "item_name",
            "hint_keyword",
            "regular_label",
            "label_prefix",
            "label_substring",
        ]

    def test_hinted_label_requires_hint(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test that the hinted strategy is skipped without a hint."""
        assert match_hinted_label(NameQuery(name="soda"), sample_snapshot) is None

    def test_exact_label_does_not_match_partial(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test exact label rejects partial labels."""
        assert match_exact_label(NameQuery(name="soda - lar"), sample_snapshot) is None

    def test_hint_keyword_requires_keyword(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test that the hint strategy is skipped without a keyword."""
        assert match_hint_keyword(NameQuery(name="soda"), sample_snapshot) is None

    def test_label_prefix_scans_in_label_order(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test that prefix scans return the first label alphabetically."""
        variation = match_label_prefix(NameQuery(name="soda"), sample_snapshot)

        assert variation is not None
        assert variation.label == "Soda - Large"

    def test_label_substring_scans_in_label_order(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test that substring scans return the first label alphabetically."""
        variation = match_label_substring(NameQuery(name="large"), sample_snapshot)

        assert variation is not None
        assert variation.label == "Burger - Large"
