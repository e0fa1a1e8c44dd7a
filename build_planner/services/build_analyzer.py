"""Build aggregation: merge the outgoing edges of every selected upgrade.

``analyze_build`` is a pure, total function of (selection, graph). It is
re-run in full on every selection change; there is no incremental state.
"""

import logging
from typing import Iterable, Optional, Sequence

from build_planner.core.enums import (
    COMPONENT_EDGE_KINDS,
    COMPONENT_KEY_SEPARATOR,
    RECOMMENDATION_LIMIT,
    BuildHealth,
    EdgeKind,
    Severity,
)
from build_planner.models.build import (
    BuildAnalysis,
    CompatibilityReport,
    ImpactEntry,
    Recommendation,
    SystemImpact,
    VehicleStats,
)
from build_planner.models.upgrade import ConflictRule, EdgeSet
from build_planner.services.compatibility import check_compatibility
from build_planner.services.cost_estimator import estimate_cost_and_output
from build_planner.services.relationship_graph import RelationshipGraph

logger = logging.getLogger(__name__)


def system_key_of(component_key: str) -> str:
    """System prefix of a component key ("brakes.rotors" -> "brakes")."""
    return component_key.split(COMPONENT_KEY_SEPARATOR, 1)[0]


def collect_recommendations(
    graph: RelationshipGraph,
    selected: Sequence[str],
    limit: int = RECOMMENDATION_LIMIT,
) -> list[Recommendation]:
    """Unselected ``recommends`` targets, first recommender wins, capped."""
    selected_set = set(selected)
    seen: set[str] = set()
    recommendations: list[Recommendation] = []

    for key in selected:
        for target in graph.edges_from(key).recommends:
            if target in selected_set or target in seen:
                continue
            seen.add(target)
            recommendations.append(
                Recommendation(
                    source=key,
                    recommends=target,
                    source_name=graph.upgrade_name(key),
                    recommends_name=graph.upgrade_name(target),
                )
            )
            if len(recommendations) >= limit:
                return recommendations

    return recommendations


def build_health(
    report: CompatibilityReport,
    recommendations: Sequence[Recommendation],
) -> BuildHealth:
    """Single status badge for the build."""
    if report.missing_requirements or any(
        c.severity == Severity.CRITICAL for c in report.conflicts
    ):
        return BuildHealth.CRITICAL
    if recommendations or any(c.severity == Severity.WARNING for c in report.conflicts):
        return BuildHealth.WARNING
    return BuildHealth.HEALTHY


def group_impacts_by_system(graph: RelationshipGraph, edges: EdgeSet) -> list[SystemImpact]:
    """Component impacts of one upgrade grouped by system, first-seen order."""
    groups: dict[str, SystemImpact] = {}

    for kind in COMPONENT_EDGE_KINDS:
        for component in edges.components(kind):
            group = groups.get(component.system_key)
            if group is None:
                system = graph.get_system(component.system_key)
                group = SystemImpact(
                    system=component.system_key,
                    system_name=system.name if system else component.system_key,
                    display_color=system.display_color if system else "#666666",
                )
                groups[component.system_key] = group
            group.impacts.append(
                ImpactEntry(kind=kind, component=component.key, component_name=component.name)
            )

    return list(groups.values())


def analyze_build(
    graph: RelationshipGraph,
    selection: Iterable[str],
    rules: Sequence[ConflictRule] = (),
    vehicle: Optional[VehicleStats] = None,
) -> BuildAnalysis:
    """Aggregate impacts, systems, requirements, recommendations and conflicts.

    The empty selection yields empty impacts, zero systems and a healthy
    build. Unknown keys are ignored.
    """
    selected = graph.resolve_selection(selection)

    impacts: dict[EdgeKind, list[str]] = {kind: [] for kind in COMPONENT_EDGE_KINDS}
    seen: dict[EdgeKind, set[str]] = {kind: set() for kind in COMPONENT_EDGE_KINDS}
    systems: set[str] = set()

    for key in selected:
        edges = graph.edges_from(key)
        for kind in COMPONENT_EDGE_KINDS:
            for component in edges.components(kind):
                systems.add(system_key_of(component.key))
                if component.key in seen[kind]:
                    continue
                seen[kind].add(component.key)
                impacts[kind].append(component.key)

    recommendations = collect_recommendations(graph, selected)
    report = check_compatibility(graph, selected, rules)

    return BuildAnalysis(
        selected=selected,
        impacts_by_kind=impacts,
        systems_affected=len(systems),
        missing_requirements=report.missing_requirements,
        recommendations=recommendations,
        conflicts=report.conflicts,
        improves_count=len(impacts[EdgeKind.IMPROVES]),
        stresses_count=len(impacts[EdgeKind.STRESSES]) + len(impacts[EdgeKind.INVALIDATES]),
        health=build_health(report, recommendations),
        estimate=estimate_cost_and_output(graph, selected, vehicle),
    )
