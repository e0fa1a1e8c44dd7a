"""Cost and output estimation for a selection of upgrades.

Totals are plain sums over the selection. A platform multiplier derived
from the vehicle's manufacturer scales both cost totals before the cost
per horsepower figure is computed. Every figure is finite: cost per hp is
0 when the build adds no power.
"""

from typing import Iterable, Optional, Sequence

from build_planner.core.enums import CostTier
from build_planner.models.build import CostOutputResult, VehicleStats
from build_planner.models.upgrade import Upgrade
from build_planner.services.relationship_graph import RelationshipGraph
from build_planner.utils.converters import round_half_up

# =============================================================================
# PLATFORM COST TIERS
# =============================================================================

PLATFORM_COST_MULTIPLIERS: dict[CostTier, float] = {
    CostTier.EXOTIC: 2.0,
    CostTier.PREMIUM: 1.5,
    CostTier.LUXURY: 1.3,
    CostTier.MAINSTREAM: 1.0,
}

TIER_BRANDS: dict[CostTier, tuple[str, ...]] = {
    CostTier.EXOTIC: ("Ferrari", "Lamborghini", "McLaren", "Aston Martin"),
    CostTier.PREMIUM: ("Porsche", "BMW", "Mercedes-AMG", "Audi"),
    CostTier.LUXURY: ("Lexus", "Jaguar", "Maserati", "Alfa Romeo", "Lotus"),
    CostTier.MAINSTREAM: ("Ford", "Chevrolet", "Dodge", "Nissan", "Toyota"),
}

_BRAND_TIERS: dict[str, CostTier] = {
    brand.lower(): tier for tier, brands in TIER_BRANDS.items() for brand in brands
}


def get_cost_tier(vehicle: Optional[VehicleStats]) -> CostTier:
    """Explicit tier first, then brand lookup, else mainstream."""
    if vehicle is None:
        return CostTier.MAINSTREAM
    if vehicle.platform_cost_tier is not None:
        return vehicle.platform_cost_tier
    if vehicle.brand:
        return _BRAND_TIERS.get(vehicle.brand.strip().lower(), CostTier.MAINSTREAM)
    return CostTier.MAINSTREAM


# =============================================================================
# ESTIMATION
# =============================================================================


def estimate_from_upgrades(
    upgrades: Sequence[Upgrade],
    vehicle: Optional[VehicleStats] = None,
) -> CostOutputResult:
    """Aggregate already-resolved upgrade records."""
    tier = get_cost_tier(vehicle)
    multiplier = PLATFORM_COST_MULTIPLIERS[tier]

    total_cost_low = round_half_up(sum(u.cost_low for u in upgrades) * multiplier)
    total_cost_high = round_half_up(sum(u.cost_high for u in upgrades) * multiplier)
    total_hp_gain = float(sum(u.hp_gain for u in upgrades))
    total_torque_gain = float(sum(u.torque_gain for u in upgrades))

    cost_per_hp = 0
    if total_hp_gain > 0:
        cost_per_hp = round_half_up((total_cost_low + total_cost_high) / 2 / total_hp_gain)

    base_hp = vehicle.base_hp if vehicle else 0.0
    base_torque = vehicle.base_torque if vehicle else 0.0

    return CostOutputResult(
        total_cost_low=total_cost_low,
        total_cost_high=total_cost_high,
        total_hp_gain=total_hp_gain,
        total_torque_gain=total_torque_gain,
        final_hp=base_hp + total_hp_gain,
        final_torque=base_torque + total_torque_gain,
        cost_per_hp=cost_per_hp,
        tier=tier,
        cost_multiplier=multiplier,
    )


def estimate_cost_and_output(
    graph: RelationshipGraph,
    selection: Iterable[str],
    vehicle: Optional[VehicleStats] = None,
) -> CostOutputResult:
    """Totals for a selection; unknown keys contribute nothing."""
    upgrades = [
        upgrade
        for upgrade in (graph.get_upgrade(key) for key in graph.resolve_selection(selection))
        if upgrade is not None
    ]
    return estimate_from_upgrades(upgrades, vehicle)
