"""Tests for selection sets, share links and presets."""

from build_planner.services.selection import SelectionSet, load_preset, selection_from_query

from .conftest import SCENARIO_PRESETS

PRESETS = {p.key: p for p in SCENARIO_PRESETS}


class TestSelectionSet:
    def test_add_is_idempotent(self):
        selection = SelectionSet()
        assert selection.add("ecu-tune") is True
        assert selection.add("ecu-tune") is False
        assert len(selection) == 1

    def test_remove_absent_is_noop(self):
        selection = SelectionSet(["ecu-tune"])
        assert selection.remove("coilovers") is False
        assert selection.remove("ecu-tune") is True
        assert len(selection) == 0

    def test_toggle(self):
        selection = SelectionSet()
        assert selection.toggle("coilovers") is True
        assert "coilovers" in selection
        assert selection.toggle("coilovers") is False
        assert "coilovers" not in selection

    def test_blank_keys_ignored(self):
        selection = SelectionSet(["", "  ", "ecu-tune "])
        assert selection.to_list() == ["ecu-tune"]

    def test_non_string_keys_ignored(self):
        selection = SelectionSet(["ecu-tune", None, 42, ["coilovers"]])
        assert selection.to_list() == ["ecu-tune"]
        assert selection.add(None) is False
        assert selection.remove(None) is False
        assert selection.toggle(7) is False
        assert None not in selection
        assert ["ecu-tune"] not in selection

    def test_replace_swaps_everything(self):
        selection = SelectionSet(["a", "b"])
        selection.replace(["c"])
        assert selection.to_list() == ["c"]

    def test_equality_ignores_order(self):
        assert SelectionSet(["a", "b"]) == SelectionSet(["b", "a"])
        assert SelectionSet(["a"]) != SelectionSet(["a", "b"])

    def test_copy_is_independent(self):
        original = SelectionSet(["a"])
        clone = original.copy()
        clone.add("b")
        assert original.to_list() == ["a"]

    def test_iteration_tolerates_mutation(self):
        selection = SelectionSet(["a", "b", "c"])
        for key in selection:
            selection.remove(key)
        assert len(selection) == 0


class TestShareParam:
    def test_to_param_keeps_insertion_order(self):
        assert SelectionSet(["coilovers", "ecu-tune", "headers"]).to_param() == "coilovers,ecu-tune,headers"

    def test_from_param_strips_and_dedupes(self):
        selection = SelectionSet.from_param(" ecu-tune, coilovers,,ecu-tune ")
        assert selection.to_list() == ["ecu-tune", "coilovers"]

    def test_from_empty_param(self):
        assert len(SelectionSet.from_param("")) == 0
        assert len(SelectionSet.from_param(None)) == 0

    def test_round_trip(self):
        selection = SelectionSet(["b", "a", "c"])
        assert SelectionSet.from_param(selection.to_param()).to_list() == ["b", "a", "c"]


class TestPresets:
    def test_load_known_preset(self):
        assert load_preset(PRESETS, "boosted").to_list() == ["supercharger", "fuel-system-upgrade"]

    def test_empty_preset(self):
        assert len(load_preset(PRESETS, "none")) == 0

    def test_unknown_preset_is_none(self):
        assert load_preset(PRESETS, "missing") is None

    def test_query_upgrades_win_over_package(self):
        selection = selection_from_query(PRESETS, upgrades="coilovers", package="boosted")
        assert selection.to_list() == ["coilovers"]

    def test_query_package(self):
        selection = selection_from_query(PRESETS, package="boosted")
        assert selection.to_list() == ["supercharger", "fuel-system-upgrade"]

    def test_query_unknown_package_is_empty(self):
        assert len(selection_from_query(PRESETS, package="mystery")) == 0

    def test_query_nothing_is_empty(self):
        assert len(selection_from_query(PRESETS)) == 0
