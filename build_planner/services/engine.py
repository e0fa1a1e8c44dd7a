"""Build engine: the surface the presentation layer talks to.

Holds the loaded graph, presets and conflict rules, and exposes every
read-only operation over a caller-supplied selection. The engine never
keeps a reference to a selection between calls.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Sequence

from build_planner.config import get_settings
from build_planner.core.enums import UpgradeCategory, UpgradeState
from build_planner.models.build import (
    BuildAnalysis,
    CompatibilityReport,
    CostOutputResult,
    LinkedUpgrade,
    UpgradeDetail,
    UpgradeSummary,
    VehicleStats,
)
from build_planner.models.upgrade import CategoryInfo, ConflictRule, Preset, Upgrade
from build_planner.services import build_analyzer, compatibility, cost_estimator
from build_planner.services.catalog_loader import load_catalog
from build_planner.services.categories import CATEGORY_INFO
from build_planner.services.relationship_graph import RelationshipGraph
from build_planner.services.selection import SelectionSet, load_preset, selection_from_query

logger = logging.getLogger(__name__)


class BuildEngine:
    def __init__(
        self,
        graph: RelationshipGraph,
        presets: Sequence[Preset] = (),
        conflict_rules: Sequence[ConflictRule] = (),
    ):
        self.graph = graph
        self.conflict_rules: tuple[ConflictRule, ...] = tuple(conflict_rules)
        self._presets: dict[str, Preset] = {p.key: p for p in presets}

    @classmethod
    def from_data_dir(
        cls,
        data_dir: Optional[Path | str] = None,
        detect_requires_cycles: bool = True,
    ) -> "BuildEngine":
        """Load the catalog from disk and build the graph."""
        catalog = load_catalog(data_dir)
        graph = RelationshipGraph(
            catalog.systems,
            catalog.components,
            catalog.upgrades,
            catalog.edges,
            detect_requires_cycles=detect_requires_cycles,
        )
        return cls(graph, catalog.presets, catalog.conflict_rules)

    # -------------------------------------------------------------------------
    # Build analysis
    # -------------------------------------------------------------------------

    def get_upgrade_state(self, key: str, selection: Iterable[str]) -> UpgradeState:
        return compatibility.get_upgrade_state(self.graph, key, selection)

    def get_upgrade_states(
        self,
        selection: Iterable[str],
        keys: Optional[Iterable[str]] = None,
    ) -> dict[str, UpgradeState]:
        """States for ``keys`` (default: the whole catalog)."""
        selected = self.graph.resolve_selection(selection)
        if keys is None:
            keys = [u.key for u in self.graph.upgrades]
        return {key: self.get_upgrade_state(key, selected) for key in keys}

    def analyze_build(
        self,
        selection: Iterable[str],
        vehicle: Optional[VehicleStats] = None,
    ) -> BuildAnalysis:
        return build_analyzer.analyze_build(self.graph, selection, self.conflict_rules, vehicle)

    def check_compatibility(self, selection: Iterable[str]) -> CompatibilityReport:
        return compatibility.check_compatibility(self.graph, selection, self.conflict_rules)

    def estimate_cost_and_output(
        self,
        selection: Iterable[str],
        vehicle: Optional[VehicleStats] = None,
    ) -> CostOutputResult:
        return cost_estimator.estimate_cost_and_output(self.graph, selection, vehicle)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def categories(self) -> list[CategoryInfo]:
        return list(CATEGORY_INFO.values())

    def _summarize(self, upgrade: Upgrade, state: Optional[UpgradeState] = None) -> UpgradeSummary:
        edges = self.graph.edges_from(upgrade.key)
        return UpgradeSummary(
            key=upgrade.key,
            name=upgrade.name,
            category=upgrade.category,
            cost_low=upgrade.cost_low,
            cost_high=upgrade.cost_high,
            hp_gain=upgrade.hp_gain,
            torque_gain=upgrade.torque_gain,
            requires=list(edges.requires),
            recommends=list(edges.recommends),
            has_requirements=bool(edges.requires),
            has_recommendations=bool(edges.recommends),
            total_impacts=edges.total_impacts,
            state=state,
        )

    def list_upgrades(
        self,
        category: Optional[UpgradeCategory] = None,
        search: Optional[str] = None,
        selection: Optional[Iterable[str]] = None,
    ) -> list[UpgradeSummary]:
        """Catalog rows sorted by name, optionally filtered.

        When a selection is given each row carries its state against it.
        """
        needle = (search or "").strip().lower()
        selected = self.graph.resolve_selection(selection) if selection is not None else None

        rows: list[UpgradeSummary] = []
        for upgrade in sorted(self.graph.upgrades, key=lambda u: u.name.lower()):
            if category is not None and upgrade.category != category:
                continue
            if needle and needle not in upgrade.name.lower() and needle not in upgrade.key:
                continue
            state = self.get_upgrade_state(upgrade.key, selected) if selected is not None else None
            rows.append(self._summarize(upgrade, state))
        return rows

    def group_by_category(
        self,
        selection: Optional[Iterable[str]] = None,
    ) -> dict[UpgradeCategory, list[UpgradeSummary]]:
        """Listing rows grouped in category display order; empty groups omitted."""
        grouped: dict[UpgradeCategory, list[UpgradeSummary]] = {}
        rows = self.list_upgrades(selection=selection)
        for category in CATEGORY_INFO:
            members = [row for row in rows if row.category == category]
            if members:
                grouped[category] = members
        return grouped

    def describe_upgrade(
        self,
        key: str,
        selection: Iterable[str] = (),
    ) -> Optional[UpgradeDetail]:
        """Detail panel data for one upgrade, or None if the key is unknown."""
        upgrade = self.graph.get_upgrade(key)
        if upgrade is None:
            return None

        selected = self.graph.resolve_selection(selection)
        selected_set = set(selected)
        state = self.get_upgrade_state(key, selected)
        edges = self.graph.edges_from(key)

        def link(target: str) -> LinkedUpgrade:
            return LinkedUpgrade(
                key=target,
                name=self.graph.upgrade_name(target),
                selected=target in selected_set,
            )

        return UpgradeDetail(
            upgrade=self._summarize(upgrade, state),
            state=state,
            system_impacts=build_analyzer.group_impacts_by_system(self.graph, edges),
            requires=[link(k) for k in edges.requires],
            recommends=[link(k) for k in edges.recommends],
            would_unlock=[k for k in edges.recommends if k not in selected_set],
        )

    # -------------------------------------------------------------------------
    # Presets and share links
    # -------------------------------------------------------------------------

    @property
    def presets(self) -> list[Preset]:
        return list(self._presets.values())

    def get_preset(self, key: str) -> Optional[Preset]:
        return self._presets.get(key)

    def load_preset(self, key: str) -> Optional[SelectionSet]:
        return load_preset(self._presets, key)

    def selection_from_query(
        self,
        upgrades: Optional[str] = None,
        package: Optional[str] = None,
    ) -> SelectionSet:
        return selection_from_query(self._presets, upgrades=upgrades, package=package)


@lru_cache
def get_engine() -> BuildEngine:
    """Process-wide engine built from settings; the catalog is read once."""
    settings = get_settings()
    return BuildEngine.from_data_dir(
        settings.data_dir,
        detect_requires_cycles=settings.detect_requires_cycles,
    )
