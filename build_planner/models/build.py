from typing import Optional

from pydantic import BaseModel, Field, computed_field

from build_planner.core.enums import (
    BuildHealth,
    CostTier,
    EdgeKind,
    Severity,
    UpgradeCategory,
    UpgradeState,
)


class MissingRequirement(BaseModel):
    upgrade: str
    missing: str
    upgrade_name: str = ""
    missing_name: str = ""


class Conflict(BaseModel):
    message: str
    severity: Severity
    component: Optional[str] = None  # set for overlap-derived conflicts
    upgrades: list[str] = []
    rule: str = "overlap"  # "invalidates", "stresses" or "named"
    suggestions: list[str] = []  # unselected upgrades that would address it


class CompatibilityReport(BaseModel):
    missing_requirements: list[MissingRequirement] = []
    conflicts: list[Conflict] = []

    @computed_field
    @property
    def is_valid(self) -> bool:
        return not self.missing_requirements


class Recommendation(BaseModel):
    source: str = Field(serialization_alias="from")
    recommends: str
    source_name: str = ""
    recommends_name: str = ""


class ImpactEntry(BaseModel):
    kind: EdgeKind
    component: str
    component_name: str


class SystemImpact(BaseModel):
    """Impacts of one or more upgrades on a single system."""

    system: str
    system_name: str
    display_color: str = "#666666"
    impacts: list[ImpactEntry] = []


class VehicleStats(BaseModel):
    """Base vehicle figures supplied by the caller. Unknown values are 0."""

    base_hp: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    base_torque: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    brand: Optional[str] = None
    platform_cost_tier: Optional[CostTier] = None


class CostOutputResult(BaseModel):
    total_cost_low: int = 0
    total_cost_high: int = 0
    total_hp_gain: float = 0.0
    total_torque_gain: float = 0.0
    final_hp: float = 0.0
    final_torque: float = 0.0
    cost_per_hp: int = 0
    tier: CostTier = CostTier.MAINSTREAM
    cost_multiplier: float = 1.0


class BuildAnalysis(BaseModel):
    """Aggregated, recomputed-per-change summary of a selection set."""

    selected: list[str] = []
    impacts_by_kind: dict[EdgeKind, list[str]] = {}
    systems_affected: int = 0
    missing_requirements: list[MissingRequirement] = []
    recommendations: list[Recommendation] = []
    conflicts: list[Conflict] = []
    improves_count: int = 0
    stresses_count: int = 0
    health: BuildHealth = BuildHealth.HEALTHY
    estimate: CostOutputResult = CostOutputResult()

    @computed_field
    @property
    def count(self) -> int:
        return len(self.selected)


class UpgradeSummary(BaseModel):
    """One row of the upgrade catalog listing."""

    key: str
    name: str
    category: UpgradeCategory
    cost_low: float
    cost_high: float
    hp_gain: float
    torque_gain: float
    requires: list[str] = []
    recommends: list[str] = []
    has_requirements: bool = False
    has_recommendations: bool = False
    total_impacts: int = 0
    state: Optional[UpgradeState] = None


class LinkedUpgrade(BaseModel):
    key: str
    name: str
    selected: bool


class UpgradeDetail(BaseModel):
    """Everything the detail panel shows for a single upgrade."""

    upgrade: UpgradeSummary
    state: UpgradeState
    system_impacts: list[SystemImpact] = []
    requires: list[LinkedUpgrade] = []
    recommends: list[LinkedUpgrade] = []
    would_unlock: list[str] = []
