from pydantic import BaseModel, ConfigDict, Field

from build_planner.core.enums import EdgeKind, Severity, UpgradeCategory
from build_planner.models.registry import Component


class Upgrade(BaseModel):
    """A purchasable modification. Costs are editorial estimates in USD."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    category: UpgradeCategory
    cost_low: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    cost_high: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    hp_gain: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    torque_gain: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    description: str = ""


class Edge(BaseModel):
    """A typed, directed relationship from an upgrade.

    ``target`` is a component key for component kinds and an upgrade key
    for ``requires`` / ``recommends``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = Field(validation_alias="from", serialization_alias="from")
    target: str = Field(validation_alias="to", serialization_alias="to")
    kind: EdgeKind


class EdgeSet(BaseModel):
    """All outgoing edges of one upgrade, grouped by kind."""

    model_config = ConfigDict(frozen=True)

    improves: tuple[Component, ...] = ()
    modifies: tuple[Component, ...] = ()
    stresses: tuple[Component, ...] = ()
    invalidates: tuple[Component, ...] = ()
    compromises: tuple[Component, ...] = ()
    requires: tuple[str, ...] = ()
    recommends: tuple[str, ...] = ()

    def components(self, kind: EdgeKind) -> tuple[Component, ...]:
        if not kind.targets_component:
            return ()
        return getattr(self, kind.value)

    @property
    def total_impacts(self) -> int:
        return (
            len(self.improves)
            + len(self.modifies)
            + len(self.stresses)
            + len(self.invalidates)
            + len(self.compromises)
        )


class CatalogEdges(BaseModel):
    """Flat edge lists as produced by the catalog loader."""

    upgrade_component_edges: list[Edge] = []
    upgrade_upgrade_edges: list[Edge] = []


class Preset(BaseModel):
    """A curated, named starting build."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    description: str = ""
    upgrades: tuple[str, ...] = ()


class ConflictRule(BaseModel):
    """A named incompatibility: fires when every listed upgrade is selected."""

    model_config = ConfigDict(frozen=True)

    upgrades: tuple[str, ...]
    severity: Severity = Severity.WARNING
    message: str


class CategoryInfo(BaseModel):
    key: UpgradeCategory
    name: str
    short_name: str
    color: str
