"""Unit tests for building catalog snapshots."""

from typing import Any

import pytest

from pickup_order_service.models.catalog_models import CatalogSnapshot
from pickup_order_service.services.catalog_snapshot import build_catalog_snapshot
from tests.catalog_factories import make_item, make_modifier_list, make_variation


@pytest.mark.unit
class TestBuildCatalogSnapshot:
    """Test suite for build_catalog_snapshot."""

    def test_builds_variations_with_labels_and_prices(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test that every sellable variation gets a label and price."""
        variation = sample_snapshot.variations["var_soda_large"]

        assert variation.label == "Soda - Large"
        assert variation.item_id == "item_soda"
        assert variation.price_cents == 299
        assert variation.price == "2.99"

    def test_variations_iterate_in_label_order(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test that variations are ordered by label for deterministic scans."""
        labels = [v.label for v in sample_snapshot.variations.values()]

        assert labels == sorted(labels, key=str.lower)

    def test_binds_modifiers_by_full_name_and_base_word(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test that modifier bindings include both the name and its base word."""
        binding = sample_snapshot.modifier_binding("item_burger")

        assert binding["cheese"] == "mod_cheese"
        assert binding["extra bacon"] == "mod_bacon"
        assert binding["bacon"] == "mod_bacon"
        assert "ketchup" not in binding

    def test_item_without_modifier_lists_has_empty_binding(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test that items with no lists bind nothing."""
        assert dict(sample_snapshot.modifier_binding("item_soda")) == {}

    def test_skips_deleted_objects(self) -> None:
        """Test that objects flagged is_deleted are ignored."""
        item = make_item(
            "item_1", "Tea", [make_variation("var_1", "item_1", "Hot", 150)]
        )
        deleted = make_variation("var_2", "item_1", "Iced", 175)
        deleted["is_deleted"] = True

        snapshot = build_catalog_snapshot([item, deleted])

        assert list(snapshot.variations) == ["var_1"]

    def test_drops_variation_without_price(self) -> None:
        """Test that a variation with no price is not sellable."""
        variation = make_variation("var_1", "item_1", "Hot", 150)
        del variation["item_variation_data"]["price_money"]
        item = make_item("item_1", "Tea", [variation])

        snapshot = build_catalog_snapshot([item])

        assert snapshot.is_empty

    def test_drops_variation_with_unknown_item(self) -> None:
        """Test that an orphan variation is dropped silently."""
        snapshot = build_catalog_snapshot([make_variation("var_1", "item_missing", "Hot", 150)])

        assert snapshot.is_empty

    def test_skips_malformed_objects(self) -> None:
        """Test that malformed objects never fail the build."""
        objects: list[Any] = [
            None,
            "not-an-object",
            {"type": "ITEM"},
            {"type": "ITEM", "id": 42, "item_data": {"name": "Bad"}},
            {"type": "ITEM_VARIATION", "id": "var_x", "item_variation_data": "oops"},
            make_item("item_1", "Tea", [make_variation("var_1", "item_1", "Hot", 150)]),
        ]

        snapshot = build_catalog_snapshot(objects)

        assert list(snapshot.variations) == ["var_1"]

    def test_top_level_variation_is_deduplicated_with_nested_copy(self) -> None:
        """Test that a variation listed both nested and top-level appears once."""
        variation = make_variation("var_1", "item_1", "Hot", 150)
        snapshot = build_catalog_snapshot(
            [make_item("item_1", "Tea", [variation]), dict(variation)]
        )

        assert len(snapshot.variations) == 1

    def test_variation_without_name_defaults_to_regular(self) -> None:
        """Test that unnamed variations are labelled Regular."""
        variation = make_variation("var_1", "item_1", "", 150)
        snapshot = build_catalog_snapshot([make_item("item_1", "Tea", [variation])])

        assert snapshot.variations["var_1"].label == "Tea - Regular"

    def test_disabled_modifier_list_is_not_bound(self) -> None:
        """Test that modifier_list_info with enabled false binds nothing."""
        item = make_item(
            "item_1", "Tea", [make_variation("var_1", "item_1", "Hot", 150)], ["ml_1"]
        )
        item["item_data"]["modifier_list_info"][0]["enabled"] = False

        snapshot = build_catalog_snapshot([item, make_modifier_list("ml_1", "Extras", [("mod_1", "Honey")])])

        assert dict(snapshot.modifier_binding("item_1")) == {}

    def test_top_level_modifier_attaches_to_its_list(self) -> None:
        """Test that modifiers listed outside their list are still attached."""
        item = make_item(
            "item_1", "Tea", [make_variation("var_1", "item_1", "Hot", 150)], ["ml_1"]
        )
        modifier_list = make_modifier_list("ml_1", "Extras", [])
        modifier = {
            "type": "MODIFIER",
            "id": "mod_1",
            "modifier_data": {"name": "Honey", "modifier_list_id": "ml_1"},
        }

        snapshot = build_catalog_snapshot([modifier, item, modifier_list])

        assert snapshot.modifier_binding("item_1")["honey"] == "mod_1"
        assert snapshot.modifier_names["mod_1"] == "Honey"

    def test_first_declared_list_wins_on_shared_name(self) -> None:
        """Test that the first bound list wins when two modifiers share a name."""
        item = make_item(
            "item_1",
            "Tea",
            [make_variation("var_1", "item_1", "Hot", 150)],
            ["ml_1", "ml_2"],
        )

        snapshot = build_catalog_snapshot(
            [
                item,
                make_modifier_list("ml_1", "Sweeteners", [("mod_a", "Honey")]),
                make_modifier_list("ml_2", "Premium", [("mod_b", "Honey")]),
            ]
        )

        assert snapshot.modifier_binding("item_1")["honey"] == "mod_a"

    def test_does_not_mutate_input(self, square_catalog_objects: list[dict[str, Any]]) -> None:
        """Test that building never writes into the raw objects."""
        nested = square_catalog_objects[3]["modifier_list_data"]["modifiers"][0]
        before = dict(nested["modifier_data"])

        build_catalog_snapshot(square_catalog_objects)

        assert nested["modifier_data"] == before

    def test_menu_entries_sorted_by_label(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test menu listing contents and order."""
        entries = sample_snapshot.menu_entries()

        assert [e.label for e in entries] == [
            "Burger - Large",
            "Burger - Regular",
            "Fries - Regular",
            "Soda - Large",
            "Soda - Small",
        ]
        assert entries[0].model_dump(by_alias=True) == {
            "itemId": "item_burger",
            "name": "Burger",
            "variationId": "var_burger_large",
            "priceCents": 1099,
            "price": "10.99",
            "label": "Burger - Large",
        }

    def test_snapshot_is_read_only(self, sample_snapshot: CatalogSnapshot) -> None:
        """Test that snapshot containers cannot be mutated."""
        with pytest.raises(TypeError):
            sample_snapshot.variations["var_new"] = sample_snapshot.variations["var_soda_large"]  # type: ignore[index]


@pytest.mark.unit
class TestVariationOrdering:
    """Test suite for per-item variation ordering."""

    def test_uses_catalog_declared_order(self) -> None:
        """Test that declared order wins over label order."""
        item = make_item(
            "item_1",
            "Coffee",
            [
                make_variation("var_small", "item_1", "Small", 200),
                make_variation("var_large", "item_1", "Large", 300),
            ],
        )

        snapshot = build_catalog_snapshot([item])

        assert [v.id for v in snapshot.variations_for_item("item_1")] == ["var_small", "var_large"]

    def test_undeclared_variations_fall_back_to_ordinal(self) -> None:
        """Test that top-level-only variations sort by ordinal after declared ones."""
        item = make_item("item_1", "Coffee", [])
        snapshot = build_catalog_snapshot(
            [
                item,
                make_variation("var_b", "item_1", "B", 200, ordinal=2),
                make_variation("var_a", "item_1", "A", 200, ordinal=5),
                make_variation("var_c", "item_1", "C", 200, ordinal=1),
            ]
        )

        assert [v.id for v in snapshot.variations_for_item("item_1")] == ["var_c", "var_b", "var_a"]
