"""Shared fixtures: a small hand-built catalog and the shipped dataset."""

from typing import Callable

import pytest

from build_planner.config import DEFAULT_DATA_DIR
from build_planner.core.enums import EdgeKind
from build_planner.models.registry import Component, System
from build_planner.models.upgrade import CatalogEdges, ConflictRule, Edge, Preset, Upgrade
from build_planner.services.categories import categorize_upgrade
from build_planner.services.engine import BuildEngine
from build_planner.services.relationship_graph import RelationshipGraph

SCENARIO_SYSTEMS = [
    System(key="engine", name="Engine", display_color="#e74c3c"),
    System(key="fuel", name="Fuel Delivery"),
    System(key="suspension", name="Suspension"),
    System(key="brakes", name="Brakes"),
    System(key="alignment", name="Alignment"),
]

SCENARIO_COMPONENTS = [
    Component(key="engine.pistons", name="Pistons", system_key="engine"),
    Component(key="engine.power-output", name="Power Output", system_key="engine"),
    Component(key="fuel.fuel-pump", name="Fuel Pump", system_key="fuel"),
    Component(key="suspension.damping", name="Damping", system_key="suspension"),
    Component(key="brakes.rotors", name="Rotors", system_key="brakes"),
    Component(key="alignment.toe-setting", name="Toe Setting", system_key="alignment"),
]


def make_upgrade(key: str, cost_low=0.0, cost_high=0.0, hp_gain=0.0, torque_gain=0.0, name=None):
    return Upgrade(
        key=key,
        name=name or key.replace("-", " ").title(),
        category=categorize_upgrade(key),
        cost_low=cost_low,
        cost_high=cost_high,
        hp_gain=hp_gain,
        torque_gain=torque_gain,
    )


def make_edges(adjacency: dict[str, dict[str, list[str]]]) -> CatalogEdges:
    component_edges, upgrade_edges = [], []
    for source, block in adjacency.items():
        for kind_name, targets in block.items():
            kind = EdgeKind(kind_name)
            bucket = component_edges if kind.targets_component else upgrade_edges
            bucket.extend(Edge(source=source, target=t, kind=kind) for t in targets)
    return CatalogEdges(upgrade_component_edges=component_edges, upgrade_upgrade_edges=upgrade_edges)


SCENARIO_UPGRADES = [
    make_upgrade("coilovers", 1500, 3000),
    make_upgrade("big-brake-kit", 2500, 5000),
    make_upgrade("ecu-tune", 500, 1000, hp_gain=25, torque_gain=20),
    make_upgrade("supercharger", 8000, 12000, hp_gain=100, torque_gain=90),
    make_upgrade("fuel-system-upgrade", 1000, 2500),
    make_upgrade("lowering-springs", 400, 800),
    make_upgrade("adjustable-control-arms", 800, 1800),
]

SCENARIO_EDGES = {
    "big-brake-kit": {"improves": ["brakes.rotors"], "requires": []},
    "ecu-tune": {"improves": ["engine.power-output"], "requires": []},
    "supercharger": {
        "improves": ["engine.power-output"],
        "stresses": ["engine.pistons", "fuel.fuel-pump"],
        "requires": ["fuel-system-upgrade"],
        "recommends": ["ecu-tune"],
    },
    "fuel-system-upgrade": {"improves": ["fuel.fuel-pump"]},
    "lowering-springs": {
        "modifies": ["suspension.damping"],
        "invalidates": ["alignment.toe-setting"],
    },
    "adjustable-control-arms": {
        "invalidates": ["alignment.toe-setting"],
        "recommends": ["coilovers"],
    },
}

SCENARIO_PRESETS = [
    Preset(key="none", name="Stock"),
    Preset(key="boosted", name="Boosted", upgrades=("supercharger", "fuel-system-upgrade")),
]

SCENARIO_RULES = [
    ConflictRule(
        upgrades=("coilovers", "lowering-springs"),
        message="Lowering springs are redundant with coilovers.",
    ),
]


@pytest.fixture
def graph_factory() -> Callable[..., RelationshipGraph]:
    """Build a graph from upgrades and an adjacency dict over the scenario registry."""

    def factory(upgrades, adjacency, components=None, detect_requires_cycles=True):
        return RelationshipGraph(
            SCENARIO_SYSTEMS,
            components if components is not None else SCENARIO_COMPONENTS,
            upgrades,
            make_edges(adjacency),
            detect_requires_cycles=detect_requires_cycles,
        )

    return factory


@pytest.fixture
def scenario_graph(graph_factory) -> RelationshipGraph:
    return graph_factory(SCENARIO_UPGRADES, SCENARIO_EDGES)


@pytest.fixture
def scenario_engine(scenario_graph) -> BuildEngine:
    return BuildEngine(scenario_graph, SCENARIO_PRESETS, SCENARIO_RULES)


@pytest.fixture(scope="session")
def shipped_engine() -> BuildEngine:
    return BuildEngine.from_data_dir(DEFAULT_DATA_DIR)
