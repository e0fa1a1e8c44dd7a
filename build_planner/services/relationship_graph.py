"""Typed, read-only relationship graph over upgrades and components.

Systems, components and upgrades are stored in arenas (plain lists) and
addressed internally by integer handles. Edges are kept as per-upgrade
adjacency lists of handles, so traversal never string-matches keys.
String keys only appear at the public boundary, where an unknown key
resolves to ``None`` (or an empty ``EdgeSet``) instead of raising.

The graph is built once from loader output and never mutated afterwards.
"""

import logging
from typing import Iterable, Iterator, Optional, Sequence

from build_planner.core.enums import (
    COMPONENT_EDGE_KINDS,
    UPGRADE_EDGE_KINDS,
    EdgeKind,
)
from build_planner.core.logging import log_data_gap
from build_planner.models.registry import Component, System
from build_planner.models.upgrade import CatalogEdges, Edge, EdgeSet, Upgrade

logger = logging.getLogger(__name__)

EMPTY_EDGES = EdgeSet()

# DFS colouring for requires-cycle detection
_WHITE, _GREY, _BLACK = 0, 1, 2


class RelationshipGraph:
    """Arena-indexed graph with O(1) lookup of an upgrade's outgoing edges."""

    def __init__(
        self,
        systems: Sequence[System],
        components: Sequence[Component],
        upgrades: Sequence[Upgrade],
        edges: CatalogEdges,
        detect_requires_cycles: bool = True,
    ):
        self._systems: list[System] = []
        self._system_index: dict[str, int] = {}
        for system in systems:
            if system.key in self._system_index:
                log_data_gap("duplicate_system", system.key)
                continue
            self._system_index[system.key] = len(self._systems)
            self._systems.append(system)

        # Components must hang off a known system
        self._components: list[Component] = []
        self._component_index: dict[str, int] = {}
        self.orphan_components: list[Component] = []
        for component in components:
            if component.key in self._component_index:
                log_data_gap("duplicate_component", component.key)
                continue
            if component.system_key not in self._system_index:
                log_data_gap("component_system", component.key, system=component.system_key)
                self.orphan_components.append(component)
                continue
            self._component_index[component.key] = len(self._components)
            self._components.append(component)

        self._upgrades: list[Upgrade] = []
        self._upgrade_index: dict[str, int] = {}
        for upgrade in upgrades:
            if upgrade.key in self._upgrade_index:
                log_data_gap("duplicate_upgrade", upgrade.key)
                continue
            self._upgrade_index[upgrade.key] = len(self._upgrades)
            self._upgrades.append(upgrade)

        # Adjacency: upgrade handle -> kind -> target handles (component or upgrade arena)
        self._adjacency: list[dict[EdgeKind, list[int]]] = [
            {kind: [] for kind in EdgeKind} for _ in self._upgrades
        ]
        self.dangling_edges: list[Edge] = []
        self._edge_count = 0
        self._index_edges(edges.upgrade_component_edges)
        self._index_edges(edges.upgrade_upgrade_edges)

        self._edge_sets: list[EdgeSet] = [
            self._build_edge_set(handle) for handle in range(len(self._upgrades))
        ]

        self.requires_cycles: list[list[str]] = []
        if detect_requires_cycles:
            self.requires_cycles = self._find_requires_cycles()
            for cycle in self.requires_cycles:
                log_data_gap("requires_cycle", cycle[0], path=" -> ".join(cycle))

        logger.debug(
            f"Relationship graph built: {len(self._upgrades)} upgrades, "
            f"{len(self._components)} components, {self._edge_count} edges, "
            f"{len(self.dangling_edges)} dangling"
        )

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    def _index_edges(self, edges: Iterable[Edge]) -> None:
        for edge in edges:
            source = self._upgrade_index.get(edge.source)
            if source is None:
                log_data_gap("edge_source", edge.source, to=edge.target, kind=edge.kind.value)
                self.dangling_edges.append(edge)
                continue

            arena = self._component_index if edge.kind.targets_component else self._upgrade_index
            target = arena.get(edge.target)
            if target is None:
                log_data_gap("edge_target", edge.target, source=edge.source, kind=edge.kind.value)
                self.dangling_edges.append(edge)
                continue

            targets = self._adjacency[source][edge.kind]
            if target in targets:
                continue
            targets.append(target)
            self._edge_count += 1

    def _build_edge_set(self, handle: int) -> EdgeSet:
        adjacency = self._adjacency[handle]
        fields: dict[str, tuple] = {}
        for kind in COMPONENT_EDGE_KINDS:
            fields[kind.value] = tuple(self._components[i] for i in adjacency[kind])
        for kind in UPGRADE_EDGE_KINDS:
            fields[kind.value] = tuple(self._upgrades[i].key for i in adjacency[kind])
        return EdgeSet(**fields)

    def _find_requires_cycles(self) -> list[list[str]]:
        """Return each requires cycle found by DFS as a closed key path."""
        colour = [_WHITE] * len(self._upgrades)
        cycles: list[list[str]] = []

        for root in range(len(self._upgrades)):
            if colour[root] != _WHITE:
                continue
            path: list[int] = [root]
            stack: list[Iterator[int]] = [iter(self._adjacency[root][EdgeKind.REQUIRES])]
            colour[root] = _GREY
            while stack:
                nxt = next(stack[-1], None)
                if nxt is None:
                    colour[path.pop()] = _BLACK
                    stack.pop()
                    continue
                if colour[nxt] == _GREY:
                    loop = path[path.index(nxt):] + [nxt]
                    cycles.append([self._upgrades[i].key for i in loop])
                elif colour[nxt] == _WHITE:
                    colour[nxt] = _GREY
                    path.append(nxt)
                    stack.append(iter(self._adjacency[nxt][EdgeKind.REQUIRES]))

        return cycles

    # =========================================================================
    # LOOKUP
    # =========================================================================

    @property
    def systems(self) -> tuple[System, ...]:
        return tuple(self._systems)

    @property
    def components(self) -> tuple[Component, ...]:
        return tuple(self._components)

    @property
    def upgrades(self) -> tuple[Upgrade, ...]:
        return tuple(self._upgrades)

    @property
    def edge_count(self) -> int:
        return self._edge_count

    def has_upgrade(self, key: str) -> bool:
        return key in self._upgrade_index

    def get_upgrade(self, key: str) -> Optional[Upgrade]:
        handle = self._upgrade_index.get(key)
        return self._upgrades[handle] if handle is not None else None

    def get_component(self, key: str) -> Optional[Component]:
        handle = self._component_index.get(key)
        return self._components[handle] if handle is not None else None

    def get_system(self, key: str) -> Optional[System]:
        handle = self._system_index.get(key)
        return self._systems[handle] if handle is not None else None

    def upgrade_name(self, key: str) -> str:
        """Display name for a key, falling back to the key itself."""
        upgrade = self.get_upgrade(key)
        return upgrade.name if upgrade else key

    def edges_from(self, key: str) -> EdgeSet:
        """All outgoing edges of an upgrade; empty for unknown keys."""
        handle = self._upgrade_index.get(key)
        if handle is None:
            return EMPTY_EDGES
        return self._edge_sets[handle]

    def upgrades_targeting(self, component_key: str, kinds: Sequence[EdgeKind]) -> list[str]:
        """Upgrade keys with an edge of one of ``kinds`` onto a component."""
        target = self._component_index.get(component_key)
        if target is None:
            return []
        return [
            self._upgrades[handle].key
            for handle, adjacency in enumerate(self._adjacency)
            if any(target in adjacency[kind] for kind in kinds)
        ]

    def resolve_selection(self, selection: Iterable[str]) -> list[str]:
        """Known, de-duplicated selection keys in first-seen order.

        Unknown keys are dropped; they are expected from stale share links.
        """
        resolved: list[str] = []
        seen: set[str] = set()
        for key in selection:
            if key in seen:
                continue
            seen.add(key)
            if key not in self._upgrade_index:
                logger.debug(f"Ignoring unknown upgrade in selection: {key}")
                continue
            resolved.append(key)
        return resolved
