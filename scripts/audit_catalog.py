#!/usr/bin/env python
"""Script to audit the build catalog for data integrity gaps.

Loads the data files, builds the relationship graph, and reports dangling
edge references, components with no system, requires cycles, and preset
or conflict-rule entries naming unknown upgrades.

Exit code is 1 when any gap is found.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from build_planner.config import get_settings
from build_planner.services.engine import BuildEngine


def collect_gaps(engine: BuildEngine) -> list[str]:
    graph = engine.graph
    gaps: list[str] = []

    for edge in graph.dangling_edges:
        gaps.append(f"dangling {edge.kind.value} edge: {edge.source} -> {edge.target}")
    for component in graph.orphan_components:
        gaps.append(f"component {component.key} names unknown system {component.system_key}")
    for cycle in graph.requires_cycles:
        gaps.append(f"requires cycle: {' -> '.join(cycle)}")
    for preset in engine.presets:
        for key in preset.upgrades:
            if not graph.has_upgrade(key):
                gaps.append(f"preset {preset.key} names unknown upgrade {key}")
    for rule in engine.conflict_rules:
        for key in rule.upgrades:
            if not graph.has_upgrade(key):
                gaps.append(f"conflict rule names unknown upgrade {key}")

    return gaps


def main():
    data_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else get_settings().data_dir

    if not data_dir.is_dir():
        print(f"Error: data directory not found at {data_dir}")
        sys.exit(1)

    print(f"Auditing catalog in {data_dir}...")
    engine = BuildEngine.from_data_dir(data_dir, detect_requires_cycles=True)
    graph = engine.graph
    print(
        f"{len(graph.systems)} systems, {len(graph.components)} components, "
        f"{len(graph.upgrades)} upgrades, {graph.edge_count} edges, "
        f"{len(engine.presets)} presets, {len(engine.conflict_rules)} conflict rules"
    )

    gaps = collect_gaps(engine)
    if gaps:
        print(f"Found {len(gaps)} gap(s):")
        for gap in gaps:
            print(f"  - {gap}")
        sys.exit(1)

    print("Catalog is consistent")


if __name__ == "__main__":
    main()
