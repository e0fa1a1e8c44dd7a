"""Tests for the arena-indexed relationship graph."""

from build_planner.core.enums import EdgeKind
from build_planner.models.registry import Component
from build_planner.models.upgrade import CatalogEdges, Edge
from build_planner.services.relationship_graph import RelationshipGraph

from .conftest import (
    SCENARIO_COMPONENTS,
    SCENARIO_SYSTEMS,
    SCENARIO_UPGRADES,
    make_upgrade,
)


class TestEdgesFrom:
    def test_groups_targets_by_kind(self, scenario_graph):
        edges = scenario_graph.edges_from("supercharger")
        assert [c.key for c in edges.improves] == ["engine.power-output"]
        assert [c.key for c in edges.stresses] == ["engine.pistons", "fuel.fuel-pump"]
        assert edges.requires == ("fuel-system-upgrade",)
        assert edges.recommends == ("ecu-tune",)
        assert edges.total_impacts == 3

    def test_upgrade_without_edges_is_empty(self, scenario_graph):
        edges = scenario_graph.edges_from("coilovers")
        assert edges.total_impacts == 0
        assert edges.requires == ()
        assert edges.recommends == ()

    def test_unknown_key_is_empty_not_error(self, scenario_graph):
        edges = scenario_graph.edges_from("does-not-exist")
        assert edges.total_impacts == 0
        assert edges.requires == ()

    def test_components_accessor_ignores_upgrade_kinds(self, scenario_graph):
        edges = scenario_graph.edges_from("supercharger")
        assert edges.components(EdgeKind.REQUIRES) == ()
        assert edges.components(EdgeKind.STRESSES) == edges.stresses


class TestConstruction:
    def test_duplicate_triples_collapse(self, graph_factory):
        graph = graph_factory(
            [make_upgrade("ecu-tune")],
            {"ecu-tune": {"improves": ["engine.power-output", "engine.power-output"]}},
        )
        assert len(graph.edges_from("ecu-tune").improves) == 1
        assert graph.edge_count == 1

    def test_same_pair_different_kinds_kept(self, graph_factory):
        graph = graph_factory(
            [make_upgrade("ecu-tune")],
            {
                "ecu-tune": {
                    "improves": ["engine.power-output"],
                    "stresses": ["engine.power-output"],
                }
            },
        )
        edges = graph.edges_from("ecu-tune")
        assert len(edges.improves) == 1
        assert len(edges.stresses) == 1

    def test_dangling_component_dropped_and_recorded(self, graph_factory):
        graph = graph_factory(
            [make_upgrade("ecu-tune")],
            {"ecu-tune": {"improves": ["engine.power-output", "engine.flux-capacitor"]}},
        )
        assert [c.key for c in graph.edges_from("ecu-tune").improves] == ["engine.power-output"]
        assert [e.target for e in graph.dangling_edges] == ["engine.flux-capacitor"]

    def test_dangling_edge_is_logged_as_gap(self, graph_factory, caplog):
        graph_factory([make_upgrade("ecu-tune")], {"ecu-tune": {"improves": ["engine.missing"]}})
        gaps = [r.getMessage() for r in caplog.records if "DATA_GAP" in r.getMessage()]
        assert gaps == ["DATA_GAP edge_target key=engine.missing source=ecu-tune kind=improves"]

    def test_dangling_upgrade_target_dropped(self, graph_factory):
        graph = graph_factory(
            [make_upgrade("headers")],
            {"headers": {"requires": ["ecu-tune"]}},
        )
        assert graph.edges_from("headers").requires == ()
        assert len(graph.dangling_edges) == 1

    def test_unknown_source_dropped(self, graph_factory):
        graph = graph_factory([], {"ghost": {"improves": ["engine.pistons"]}})
        assert graph.dangling_edges[0].source == "ghost"
        assert graph.edge_count == 0

    def test_component_with_unknown_system_is_orphaned(self):
        components = SCENARIO_COMPONENTS + [
            Component(key="hydraulics.pump", name="Pump", system_key="hydraulics")
        ]
        graph = RelationshipGraph(SCENARIO_SYSTEMS, components, [], CatalogEdges())
        assert graph.get_component("hydraulics.pump") is None
        assert [c.key for c in graph.orphan_components] == ["hydraulics.pump"]

    def test_edges_are_routed_by_kind_not_list(self):
        # A requires edge filed under the component list still lands correctly
        edges = CatalogEdges(
            upgrade_component_edges=[
                Edge(source="supercharger", target="fuel-system-upgrade", kind=EdgeKind.REQUIRES)
            ]
        )
        graph = RelationshipGraph(SCENARIO_SYSTEMS, SCENARIO_COMPONENTS, SCENARIO_UPGRADES, edges)
        assert graph.edges_from("supercharger").requires == ("fuel-system-upgrade",)

    def test_edge_accepts_from_to_aliases(self):
        edge = Edge.model_validate({"from": "a", "to": "b", "kind": "requires"})
        assert edge.source == "a"
        assert edge.target == "b"
        assert edge.model_dump(by_alias=True)["from"] == "a"


class TestRequiresCycles:
    def test_acyclic_catalog_reports_none(self, scenario_graph):
        assert scenario_graph.requires_cycles == []

    def test_two_node_cycle_detected_and_edges_kept(self, graph_factory):
        graph = graph_factory(
            [make_upgrade("a-part"), make_upgrade("b-part")],
            {"a-part": {"requires": ["b-part"]}, "b-part": {"requires": ["a-part"]}},
        )
        assert graph.requires_cycles == [["a-part", "b-part", "a-part"]]
        assert graph.edges_from("a-part").requires == ("b-part",)

    def test_self_requirement_is_a_cycle(self, graph_factory):
        graph = graph_factory([make_upgrade("a-part")], {"a-part": {"requires": ["a-part"]}})
        assert graph.requires_cycles == [["a-part", "a-part"]]

    def test_detection_can_be_disabled(self, graph_factory):
        graph = graph_factory(
            [make_upgrade("a-part"), make_upgrade("b-part")],
            {"a-part": {"requires": ["b-part"]}, "b-part": {"requires": ["a-part"]}},
            detect_requires_cycles=False,
        )
        assert graph.requires_cycles == []

    def test_recommends_cycles_are_fine(self, graph_factory):
        graph = graph_factory(
            [make_upgrade("a-part"), make_upgrade("b-part")],
            {"a-part": {"recommends": ["b-part"]}, "b-part": {"recommends": ["a-part"]}},
        )
        assert graph.requires_cycles == []


class TestLookups:
    def test_optional_lookups(self, scenario_graph):
        assert scenario_graph.get_upgrade("ecu-tune").hp_gain == 25
        assert scenario_graph.get_upgrade("nope") is None
        assert scenario_graph.get_component("brakes.rotors").system_key == "brakes"
        assert scenario_graph.get_component("brakes.drums") is None
        assert scenario_graph.get_system("engine").name == "Engine"
        assert scenario_graph.get_system("warp-drive") is None

    def test_upgrade_name_falls_back_to_key(self, scenario_graph):
        assert scenario_graph.upgrade_name("unknown-key") == "unknown-key"

    def test_resolve_selection_dedupes_and_drops_unknown(self, scenario_graph):
        resolved = scenario_graph.resolve_selection(
            ["ecu-tune", "ghost", "coilovers", "ecu-tune"]
        )
        assert resolved == ["ecu-tune", "coilovers"]

    def test_upgrades_targeting(self, scenario_graph):
        assert scenario_graph.upgrades_targeting("fuel.fuel-pump", (EdgeKind.IMPROVES,)) == [
            "fuel-system-upgrade"
        ]
        assert scenario_graph.upgrades_targeting("nowhere.thing", (EdgeKind.IMPROVES,)) == []
