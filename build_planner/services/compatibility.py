"""Compatibility checking for a selection of upgrades.

Two independent passes:

1. Requirements: every ``requires`` target of a selected upgrade must also
   be selected. One entry per (selected upgrade, missing target) pair.
2. Conflicts: a set-overlap heuristic over ``invalidates`` and ``stresses``
   targets, followed by any named rules from the conflict table.

Severities for overlap conflicts:
    critical  two or more selected upgrades invalidate the same component
    warning   two or more selected upgrades stress a component that no
              selected upgrade improves or modifies
    info      a single selected upgrade stresses an unaddressed component
"""

import logging
from typing import Iterable, Sequence

from build_planner.core.enums import EdgeKind, Severity, UpgradeState
from build_planner.models.build import CompatibilityReport, Conflict, MissingRequirement
from build_planner.models.upgrade import ConflictRule
from build_planner.services.relationship_graph import RelationshipGraph

logger = logging.getLogger(__name__)

_ADDRESSING_KINDS = (EdgeKind.IMPROVES, EdgeKind.MODIFIES)


def join_names(names: Sequence[str]) -> str:
    """'A', 'A and B', 'A, B and C'."""
    if len(names) <= 1:
        return "".join(names)
    return f"{', '.join(names[:-1])} and {names[-1]}"


# =============================================================================
# REQUIREMENTS
# =============================================================================


def find_missing_requirements(
    graph: RelationshipGraph,
    selected: Sequence[str],
) -> list[MissingRequirement]:
    """Unmet ``requires`` edges, not de-duplicated across selected upgrades."""
    selected_set = set(selected)
    missing: list[MissingRequirement] = []
    for key in selected:
        for required in graph.edges_from(key).requires:
            if required in selected_set:
                continue
            missing.append(
                MissingRequirement(
                    upgrade=key,
                    missing=required,
                    upgrade_name=graph.upgrade_name(key),
                    missing_name=graph.upgrade_name(required),
                )
            )
    return missing


# =============================================================================
# CONFLICTS
# =============================================================================


def _overlap_conflicts(graph: RelationshipGraph, selected: Sequence[str]) -> list[Conflict]:
    invalidated_by: dict[str, list[str]] = {}
    stressed_by: dict[str, list[str]] = {}
    addressed: set[str] = set()

    for key in selected:
        edges = graph.edges_from(key)
        for component in edges.invalidates:
            invalidated_by.setdefault(component.key, []).append(key)
        for component in edges.stresses:
            stressed_by.setdefault(component.key, []).append(key)
        for kind in _ADDRESSING_KINDS:
            addressed.update(component.key for component in edges.components(kind))

    conflicts: list[Conflict] = []

    for component_key, sources in invalidated_by.items():
        if len(sources) < 2:
            continue
        component = graph.get_component(component_key)
        label = component.name if component else component_key
        names = [graph.upgrade_name(k) for k in sources]
        quantifier = "both" if len(names) == 2 else "all"
        conflicts.append(
            Conflict(
                message=f"{join_names(names)} {quantifier} invalidate {label}; only one can own it.",
                severity=Severity.CRITICAL,
                component=component_key,
                upgrades=list(sources),
                rule=EdgeKind.INVALIDATES.value,
            )
        )

    selected_set = set(selected)
    for component_key, sources in stressed_by.items():
        if component_key in addressed:
            continue
        component = graph.get_component(component_key)
        label = component.name if component else component_key
        names = [graph.upgrade_name(k) for k in sources]
        suggestions = [
            k
            for k in graph.upgrades_targeting(component_key, (EdgeKind.IMPROVES,))
            if k not in selected_set
        ]
        if len(sources) >= 2:
            severity = Severity.WARNING
            message = f"{label} is stressed by {join_names(names)} with nothing in the build supporting it."
        else:
            severity = Severity.INFO
            message = f"{names[0]} adds stress to {label}."
        if suggestions:
            message += f" Consider {join_names([graph.upgrade_name(k) for k in suggestions])}."
        conflicts.append(
            Conflict(
                message=message,
                severity=severity,
                component=component_key,
                upgrades=list(sources),
                rule=EdgeKind.STRESSES.value,
                suggestions=suggestions,
            )
        )

    return conflicts


def _named_conflicts(rules: Sequence[ConflictRule], selected: Sequence[str]) -> list[Conflict]:
    selected_set = set(selected)
    return [
        Conflict(
            message=rule.message,
            severity=rule.severity,
            upgrades=list(rule.upgrades),
            rule="named",
        )
        for rule in rules
        if all(key in selected_set for key in rule.upgrades)
    ]


def find_conflicts(
    graph: RelationshipGraph,
    selected: Sequence[str],
    rules: Sequence[ConflictRule] = (),
) -> list[Conflict]:
    """Overlap conflicts then named ones, stably ordered by severity."""
    conflicts = _overlap_conflicts(graph, selected) + _named_conflicts(rules, selected)
    return sorted(conflicts, key=lambda c: c.severity.rank)


# =============================================================================
# PUBLIC API
# =============================================================================


def check_compatibility(
    graph: RelationshipGraph,
    selection: Iterable[str],
    rules: Sequence[ConflictRule] = (),
) -> CompatibilityReport:
    """Missing requirements and conflicts for a selection. Never raises."""
    selected = graph.resolve_selection(selection)
    return CompatibilityReport(
        missing_requirements=find_missing_requirements(graph, selected),
        conflicts=find_conflicts(graph, selected, rules),
    )


def get_upgrade_state(
    graph: RelationshipGraph,
    key: str,
    selection: Iterable[str],
) -> UpgradeState:
    """Selectability of one candidate: selected > locked > recommended > available."""
    selected = set(graph.resolve_selection(selection))
    if key in selected:
        return UpgradeState.SELECTED

    if any(required not in selected for required in graph.edges_from(key).requires):
        return UpgradeState.LOCKED

    if any(key in graph.edges_from(source).recommends for source in selected):
        return UpgradeState.RECOMMENDED

    return UpgradeState.AVAILABLE
