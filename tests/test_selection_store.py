"""
Tests for the selection state model.
"""

from __future__ import annotations

import pytest

from quotewizard.domain.entities.product import Product
from quotewizard.domain.entities.step_definition import SelectionMode, StepDefinition
from quotewizard.domain.entities.totals import ChannelLineItem, LineItem
from quotewizard.domain.services.selection_store import SelectionStore


def test_single_toggle_twice_deselects(scenario_products):
    """Selecting the same id twice on a single step leaves the step empty."""
    store = SelectionStore(scenario_products)

    assert store.toggle_selection("vehicle", "v1", SelectionMode.single) is True
    assert store.get_selected_ids("vehicle") == ["v1"]

    assert store.toggle_selection("vehicle", "v1", SelectionMode.single) is True
    assert store.get_selected_ids("vehicle") == []
    assert store.serialize() == SelectionStore(scenario_products).serialize()


def test_single_toggle_replaces_previous_choice():
    store = SelectionStore([Product(id="a", step_id="s"), Product(id="b", step_id="s")])
    store.toggle_selection("s", "a", "single")
    store.toggle_selection("s", "b", "single")

    assert store.get_selected_ids("s") == ["b"]


def test_multi_toggle_is_symmetric(scenario_products):
    """Toggling the same id twice restores any starting set."""
    store = SelectionStore(scenario_products)
    store.toggle_selection("parts", "p1", SelectionMode.multi)
    before = store.get_selected_ids("parts")

    store.toggle_selection("parts", "p2", SelectionMode.multi)
    assert store.get_selected_ids("parts") == ["p1", "p2"]
    store.toggle_selection("parts", "p2", SelectionMode.multi)

    assert store.get_selected_ids("parts") == before


def test_toggle_unknown_or_foreign_product_is_noop(scenario_products):
    store = SelectionStore(scenario_products)

    assert store.toggle_selection("parts", "missing", SelectionMode.multi) is False
    # p1 belongs to "parts", so it cannot be recorded under "vehicle"
    assert store.toggle_selection("vehicle", "p1", SelectionMode.single) is False
    assert store.step_selections() == {}


def test_set_selection_filters_unknown_ids(scenario_products):
    store = SelectionStore(scenario_products)

    assert store.set_selection("parts", ["p1", "nope", "p2", "p1"]) is True
    assert store.get_selected_ids("parts") == ["p1", "p2"]


def test_set_selection_with_only_unknown_ids_keeps_step(scenario_products):
    store = SelectionStore(scenario_products)
    store.set_selection("vehicle", "v1")

    assert store.set_selection("vehicle", "nope") is False
    assert store.get_selected_ids("vehicle") == ["v1"]


def test_set_selection_none_or_empty_clears(scenario_products):
    store = SelectionStore(scenario_products)
    store.set_selection("parts", ["p1", "p2"])

    assert store.set_selection("parts", None) is True
    assert store.get_selected_ids("parts") == []

    store.set_selection("parts", ["p1"])
    assert store.set_selection("parts", []) is True
    assert store.get_selected_ids("parts") == []


def test_set_selection_single_mode_keeps_first_id(scenario_products):
    store = SelectionStore(scenario_products)
    store.set_selection("parts", ["p2", "p1"], SelectionMode.single)

    assert store.get_selected_ids("parts") == ["p2"]


def test_accessors_return_copies(scenario_products):
    store = SelectionStore(scenario_products)
    store.set_selection("parts", ["p1"])
    store.set_field_value("form", "email", "a@b.co")

    store.get_selected_ids("parts").append("p2")
    store.step_selections()["parts"].clear()
    store.get_field_values("form")["email"] = "changed"
    store.serialize().step_selections["parts"].append("p2")

    assert store.get_selected_ids("parts") == ["p1"]
    assert store.get_field_values("form") == {"email": "a@b.co"}


def test_products_do_not_expose_mutable_variants():
    variants = {"autospec": "11"}
    store = SelectionStore([Product(id="a", step_id="s", variant_ids=variants)])
    store.set_selection("s", "a")
    variants["linex"] = "21"

    with pytest.raises(TypeError):
        store.get_product("a").variant_ids["linex"] = "99"

    assert store.get_line_items_for_channel("linex") == []
    assert store.get_line_items_for_channel("autospec") == [ChannelLineItem("11")]


def test_clear_selections_from_index():
    steps = [StepDefinition(id=s) for s in ("a", "b", "c", "d")]
    store = SelectionStore([Product(id=f"{s}1", step_id=s) for s in ("a", "b", "c", "d")])
    for s in ("a", "b", "c", "d"):
        store.set_selection(s, f"{s}1")
    store.set_field_value("c", "notes", "hello")

    assert store.clear_selections_from(2, steps) is True

    assert store.step_selections() == {"a": ["a1"], "b": ["b1"]}
    assert store.get_field_values("c") == {}
    assert store.clear_selections_from(2, steps) is False


def test_field_values_last_write_wins():
    store = SelectionStore()
    store.set_field_value("form", "email", "one@example.com")
    store.set_field_value("form", "email", "two@example.com")

    assert store.get_field_values("form") == {"email": "two@example.com"}
    assert store.set_field_value("form", "email", "two@example.com") is False


def test_is_step_complete_by_mode(scenario_products):
    store = SelectionStore(scenario_products)
    single_required = StepDefinition(id="vehicle", selection_mode=SelectionMode.single, required=True)
    multi_required = StepDefinition(id="parts", selection_mode=SelectionMode.multi, required=True)
    multi_optional = StepDefinition(id="parts", selection_mode=SelectionMode.multi, required=False)
    info = StepDefinition(id="info", selection_mode=SelectionMode.none, required=True)
    form = StepDefinition(id="form", selection_mode=SelectionMode.form, required=True)

    assert store.is_step_complete(single_required) is False
    assert store.is_step_complete(multi_required) is False
    assert store.is_step_complete(multi_optional) is True
    assert store.is_step_complete(info) is True
    assert store.is_step_complete(form) is True
    assert store.is_step_complete(None) is False

    store.set_selection("vehicle", "v1")
    store.set_selection("parts", ["p1", "p2"])
    assert store.is_step_complete(single_required) is True
    assert store.is_step_complete(multi_required) is True


def test_totals_scenario(scenario_products):
    """Vehicle v1 plus parts p1 and p2 totals 80, missing weights count as zero."""
    store = SelectionStore(scenario_products)
    store.set_selection("vehicle", "v1")
    store.toggle_selection("parts", "p1", SelectionMode.multi)
    store.toggle_selection("parts", "p2", SelectionMode.multi)

    totals = store.get_totals()

    assert totals.total_price == 80
    assert totals.total_weight == 0
    assert totals.line_items == (
        LineItem(step_id="vehicle", product_id="v1"),
        LineItem(step_id="parts", product_id="p1"),
        LineItem(step_id="parts", product_id="p2"),
    )
    assert store.get_totals() == totals

    # Unknown vehicle id is ignored and does not touch parts
    assert store.set_selection("vehicle", "nope") is False
    assert store.get_selected_ids("vehicle") == ["v1"]
    assert store.get_selected_ids("parts") == ["p1", "p2"]


def test_totals_follow_enriched_prices(scenario_products):
    store = SelectionStore(scenario_products)
    store.set_selection("parts", ["p1", "p2"])

    store.set_products([Product(id="p2", step_id="parts", price=35, weight=1200)])

    totals = store.get_totals()
    assert totals.total_price == 85
    assert totals.total_weight == 1200
    # Merge keeps fields the update did not carry
    assert store.get_product("p1").compatible_with == frozenset({"v1"})


def test_set_products_keeps_absent_ids(scenario_products):
    store = SelectionStore(scenario_products)
    store.set_products([Product(id="p3", step_id="parts", price=10)])

    assert {p.id for p in store.products()} == {"v1", "p1", "p2", "p3"}


def test_line_items_for_channel_skip_missing_variants():
    store = SelectionStore(
        [
            Product(id="a", step_id="s", variant_ids={"autospec": "11", "linex": "21"}),
            Product(id="b", step_id="s", variant_ids={"autospec": "12"}),
        ]
    )
    store.set_selection("s", ["a", "b"])

    assert store.get_line_items_for_channel("autospec") == [ChannelLineItem("11"), ChannelLineItem("12")]
    assert store.get_line_items_for_channel("linex") == [ChannelLineItem("21")]
    assert store.get_line_items_for_channel("elsewhere") == []


def test_serialize_restore_keeps_known_products(scenario_products):
    store = SelectionStore(scenario_products)
    store.set_selection("vehicle", "v1")
    store.set_selection("parts", ["p1", "p2"])
    store.set_field_value("form", "email", "sam@example.com")
    store.set_vehicle_make("Toyota")
    snapshot = store.serialize(channel="linex")

    # p2 was removed from the catalog between sessions
    fresh = SelectionStore([p for p in scenario_products if p.id != "p2"])
    assert fresh.restore(snapshot) is True

    assert fresh.get_selected_ids("vehicle") == ["v1"]
    assert fresh.get_selected_ids("parts") == ["p1"]
    assert fresh.get_field_values("form") == {"email": "sam@example.com"}
    assert fresh.vehicle_selection.make == "Toyota"


def test_restore_accepts_persisted_dict(scenario_products):
    store = SelectionStore(scenario_products)
    restored = store.restore(
        {
            "version": "1.1.0",
            "stepSelections": {"vehicle": ["v1"], "parts": ["ghost"]},
            "fieldValues": {"form": {"firstName": "Sam"}},
        }
    )

    assert restored is True
    assert store.step_selections() == {"vehicle": ["v1"]}
    assert store.get_field_values("form") == {"firstName": "Sam"}


def test_restore_rejects_foreign_or_malformed_snapshots(scenario_products):
    fresh_state = SelectionStore(scenario_products).serialize()

    for snapshot in (
        {"version": "bogus", "stepSelections": {"vehicle": ["v1"]}},
        {"stepSelections": {"vehicle": ["v1"]}},
        {"version": "1.1.0", "stepSelections": {"vehicle": "v1"}},
        {"version": "1.1.0", "stepSelections": {"vehicle": ["v1"]}, "fieldValues": ["bad"]},
        "not a snapshot",
        None,
    ):
        store = SelectionStore(scenario_products)
        assert store.restore(snapshot) is False
        assert store.serialize() == fresh_state


def test_clear_all_resets_everything(scenario_products):
    store = SelectionStore(scenario_products)
    store.set_selection("vehicle", "v1")
    store.set_field_value("form", "email", "x@y.zz")
    store.set_vehicle_make("Ford")

    store.clear_all()

    assert store.serialize() == SelectionStore(scenario_products).serialize()


def test_vehicle_fields_cascade():
    store = SelectionStore()
    store.set_vehicle_make("Toyota")
    store.set_vehicle_model("Hilux")
    store.set_vehicle_year("2021")

    store.set_vehicle_model("LandCruiser")
    assert store.vehicle_selection.year == ""
    assert store.vehicle_selection.make == "Toyota"

    store.set_vehicle_make("Ford")
    assert (store.vehicle_selection.model, store.vehicle_selection.year) == ("", "")
