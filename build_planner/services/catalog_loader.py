"""Loaders for the hand-authored catalog data files.

Every loader is total: a missing or unreadable file yields an empty
collection (logged as an error) and a malformed row is skipped with a
DATA_GAP warning. Nothing here raises on bad data.

Files live under ``settings.data_dir``:

    systems.json          [{key, name, description, display_color}]
    components.json       [{key, name, system_key}]
    upgrades.json         [{key, name, cost_low, cost_high, hp_gain, torque_gain}]
    edges.json            {upgrade_key: {kind: [target, ...]}}
    presets.json          [{key, name, description, upgrades}]
    conflict_rules.json   [{upgrades, severity, message}]
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from build_planner.config import get_settings
from build_planner.core.enums import COMPONENT_KEY_SEPARATOR, EdgeKind
from build_planner.core.logging import log_catalog_loaded, log_data_gap, log_error
from build_planner.models.registry import Component, System
from build_planner.models.upgrade import (
    CatalogEdges,
    ConflictRule,
    Edge,
    Preset,
    Upgrade,
)
from build_planner.services.categories import categorize_upgrade, format_upgrade_name
from build_planner.utils.converters import non_negative

logger = logging.getLogger(__name__)

SYSTEMS_FILE = "systems.json"
COMPONENTS_FILE = "components.json"
UPGRADES_FILE = "upgrades.json"
EDGES_FILE = "edges.json"
PRESETS_FILE = "presets.json"
CONFLICT_RULES_FILE = "conflict_rules.json"

ModelT = TypeVar("ModelT", bound=BaseModel)


class Catalog(BaseModel):
    """Everything loaded from one data directory."""

    systems: list[System] = []
    components: list[Component] = []
    upgrades: list[Upgrade] = []
    edges: CatalogEdges = CatalogEdges()
    presets: list[Preset] = []
    conflict_rules: list[ConflictRule] = []


# =============================================================================
# FILE HELPERS
# =============================================================================


def _resolve_dir(data_dir: Optional[Path | str]) -> Path:
    if data_dir is None:
        return get_settings().data_dir
    return Path(data_dir)


def _read_json(path: Path) -> Any:
    """Read a JSON file, returning None when it is missing or unreadable."""
    if not path.exists():
        log_error("catalog file missing", path=str(path))
        return None
    try:
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        log_error("catalog file unreadable", exc=e, path=str(path))
        return None


def _read_rows(path: Path) -> list[Any]:
    data = _read_json(path)
    if data is None:
        return []
    if not isinstance(data, list):
        log_data_gap("file_shape", path.name, expected="list")
        return []
    return data


def _pick(row: dict[str, Any], snake: str, camel: str) -> Any:
    """Read a field that may be authored in snake_case or camelCase."""
    if snake in row:
        return row[snake]
    return row.get(camel)


def _parse_rows(
    rows: list[Any],
    model: type[ModelT],
    kind: str,
    source: str,
    prepare: Optional[Callable[[dict[str, Any]], Optional[dict[str, Any]]]] = None,
    key_of: Callable[[ModelT], str] = lambda item: getattr(item, "key"),
) -> list[ModelT]:
    """Validate rows into models, skipping malformed and duplicate rows."""
    items: list[ModelT] = []
    seen: set[str] = set()
    skipped = 0

    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            log_data_gap(kind, f"#{index}", reason="not an object")
            skipped += 1
            continue

        data = prepare(row) if prepare else row
        if data is None:
            log_data_gap(kind, f"#{index}", reason="incomplete row")
            skipped += 1
            continue

        try:
            item = model.model_validate(data)
        except ValidationError as e:
            log_data_gap(kind, str(row.get("key", f"#{index}")), errors=e.error_count())
            skipped += 1
            continue

        item_key = key_of(item)
        if item_key in seen:
            log_data_gap(kind, item_key, reason="duplicate")
            skipped += 1
            continue
        seen.add(item_key)
        items.append(item)

    log_catalog_loaded(source, len(items), skipped)
    return items


def _clean_key(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


# =============================================================================
# LOADERS
# =============================================================================


def load_systems(data_dir: Optional[Path | str] = None) -> list[System]:
    """Load the vehicle system taxonomy."""

    def prepare(row: dict[str, Any]) -> Optional[dict[str, Any]]:
        key = _clean_key(row.get("key"))
        if not key:
            return None
        return {
            "key": key,
            "name": row.get("name") or key.title(),
            "description": row.get("description") or "",
            "display_color": _pick(row, "display_color", "displayColor") or "#666666",
        }

    rows = _read_rows(_resolve_dir(data_dir) / SYSTEMS_FILE)
    return _parse_rows(rows, System, "system", SYSTEMS_FILE, prepare)


def load_components(data_dir: Optional[Path | str] = None) -> list[Component]:
    """Load components. A missing system_key is taken from the key prefix."""

    def prepare(row: dict[str, Any]) -> Optional[dict[str, Any]]:
        key = _clean_key(row.get("key"))
        if not key:
            return None
        system_key = _clean_key(_pick(row, "system_key", "systemKey"))
        if not system_key:
            system_key = key.split(COMPONENT_KEY_SEPARATOR, 1)[0]
        return {
            "key": key,
            "name": row.get("name") or format_upgrade_name(key.split(COMPONENT_KEY_SEPARATOR)[-1]),
            "system_key": system_key,
            "description": row.get("description") or "",
        }

    rows = _read_rows(_resolve_dir(data_dir) / COMPONENTS_FILE)
    return _parse_rows(rows, Component, "component", COMPONENTS_FILE, prepare)


def _prepare_upgrade(row: dict[str, Any]) -> Optional[dict[str, Any]]:
    key = _clean_key(row.get("key"))
    if not key:
        return None

    cost_low = non_negative(_pick(row, "cost_low", "costLow"))
    cost_high = non_negative(_pick(row, "cost_high", "costHigh"))
    if cost_high < cost_low:
        log_data_gap("upgrade_cost", key, cost_low=cost_low, cost_high=cost_high)
        cost_high = cost_low

    return {
        "key": key,
        "name": str(row.get("name") or "").strip() or format_upgrade_name(key),
        # Category always comes from the key so catalog grouping is stable
        "category": categorize_upgrade(key),
        "cost_low": cost_low,
        "cost_high": cost_high,
        "hp_gain": non_negative(_pick(row, "hp_gain", "hpGain")),
        "torque_gain": non_negative(_pick(row, "torque_gain", "torqueGain")),
        "description": row.get("description") or "",
    }


def load_upgrades(data_dir: Optional[Path | str] = None) -> list[Upgrade]:
    """Load the upgrade catalog with derived categories and display names."""
    rows = _read_rows(_resolve_dir(data_dir) / UPGRADES_FILE)
    return _parse_rows(rows, Upgrade, "upgrade", UPGRADES_FILE, _prepare_upgrade)


def load_edges(data_dir: Optional[Path | str] = None) -> CatalogEdges:
    """Flatten the per-upgrade adjacency file into typed edge lists.

    Endpoint existence is not checked here; the relationship graph drops
    and reports dangling references when it is built.
    """
    path = _resolve_dir(data_dir) / EDGES_FILE
    data = _read_json(path)
    if data is None:
        return CatalogEdges()
    if not isinstance(data, dict):
        log_data_gap("file_shape", path.name, expected="object")
        return CatalogEdges()

    component_edges: list[Edge] = []
    upgrade_edges: list[Edge] = []
    skipped = 0

    for source, block in data.items():
        if not isinstance(block, dict):
            log_data_gap("edge_block", source, reason="not an object")
            skipped += 1
            continue

        for kind_name, targets in block.items():
            kind = EdgeKind.from_string(kind_name)
            if kind is None:
                log_data_gap("edge_kind", source, kind=kind_name)
                skipped += 1
                continue
            if isinstance(targets, str):
                targets = [targets]
            if not isinstance(targets, list):
                log_data_gap("edge_targets", source, kind=kind.value)
                skipped += 1
                continue

            bucket = component_edges if kind.targets_component else upgrade_edges
            for target in targets:
                target_key = _clean_key(target)
                if not target_key:
                    log_data_gap("edge_target", source, kind=kind.value)
                    skipped += 1
                    continue
                bucket.append(Edge(source=source, target=target_key, kind=kind))

    log_catalog_loaded(EDGES_FILE, len(component_edges) + len(upgrade_edges), skipped)
    return CatalogEdges(
        upgrade_component_edges=component_edges,
        upgrade_upgrade_edges=upgrade_edges,
    )


def load_presets(data_dir: Optional[Path | str] = None) -> list[Preset]:
    """Load curated starting builds."""

    def prepare(row: dict[str, Any]) -> Optional[dict[str, Any]]:
        key = _clean_key(row.get("key"))
        if not key:
            return None
        upgrades = row.get("upgrades") or []
        if isinstance(upgrades, str):
            upgrades = upgrades.split(",")
        if not isinstance(upgrades, list):
            return None
        return {
            "key": key,
            "name": row.get("name") or key,
            "description": row.get("description") or "",
            "upgrades": [u.strip() for u in upgrades if isinstance(u, str) and u.strip()],
        }

    rows = _read_rows(_resolve_dir(data_dir) / PRESETS_FILE)
    return _parse_rows(rows, Preset, "preset", PRESETS_FILE, prepare)


def load_conflict_rules(data_dir: Optional[Path | str] = None) -> list[ConflictRule]:
    """Load named incompatibility rules. The file is optional."""
    path = _resolve_dir(data_dir) / CONFLICT_RULES_FILE
    if not path.exists():
        logger.debug(f"No conflict rule table at {path}")
        return []

    def prepare(row: dict[str, Any]) -> Optional[dict[str, Any]]:
        raw = row.get("upgrades")
        if not isinstance(raw, list):
            return None
        upgrades = [u.strip() for u in raw if isinstance(u, str) and u.strip()]
        if len(upgrades) < 2 or not row.get("message"):
            return None
        return {
            "upgrades": upgrades,
            "severity": str(row.get("severity") or "warning").strip().lower(),
            "message": row["message"],
        }

    return _parse_rows(
        _read_rows(path),
        ConflictRule,
        "conflict_rule",
        CONFLICT_RULES_FILE,
        prepare,
        key_of=lambda rule: "+".join(sorted(rule.upgrades)),
    )


def load_catalog(data_dir: Optional[Path | str] = None) -> Catalog:
    """Load every catalog file from one directory."""
    root = _resolve_dir(data_dir)
    catalog = Catalog(
        systems=load_systems(root),
        components=load_components(root),
        upgrades=load_upgrades(root),
        edges=load_edges(root),
        presets=load_presets(root),
        conflict_rules=load_conflict_rules(root),
    )
    logger.info(
        f"Catalog loaded from {root}: {len(catalog.upgrades)} upgrades, "
        f"{len(catalog.components)} components, {len(catalog.systems)} systems"
    )
    return catalog
