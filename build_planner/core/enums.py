"""Enums for build-planning constants."""

from enum import Enum


class EdgeKind(str, Enum):
    """Relationship kinds between an upgrade and its targets.

    The first five point at vehicle components, the last two at other
    upgrades.
    """

    IMPROVES = "improves"
    MODIFIES = "modifies"
    STRESSES = "stresses"
    INVALIDATES = "invalidates"
    COMPROMISES = "compromises"
    REQUIRES = "requires"
    RECOMMENDS = "recommends"

    @property
    def targets_component(self) -> bool:
        return self in COMPONENT_EDGE_KINDS

    @classmethod
    def from_string(cls, value: str | None) -> "EdgeKind | None":
        """Convert string to enum, returning None if invalid."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


COMPONENT_EDGE_KINDS: tuple[EdgeKind, ...] = (
    EdgeKind.IMPROVES,
    EdgeKind.MODIFIES,
    EdgeKind.STRESSES,
    EdgeKind.INVALIDATES,
    EdgeKind.COMPROMISES,
)

UPGRADE_EDGE_KINDS: tuple[EdgeKind, ...] = (
    EdgeKind.REQUIRES,
    EdgeKind.RECOMMENDS,
)


class UpgradeCategory(str, Enum):
    """Upgrade grouping used by the catalog UI."""

    POWER = "power"
    FORCED_INDUCTION = "forcedInduction"
    EXHAUST = "exhaust"
    SUSPENSION = "suspension"
    BRAKES = "brakes"
    WHEELS = "wheels"
    COOLING = "cooling"
    AERO = "aero"
    DRIVETRAIN = "drivetrain"
    SAFETY = "safety"
    INTERNALS = "internals"

    @classmethod
    def from_string(cls, value: str | None) -> "UpgradeCategory | None":
        """Convert string to enum, accepting snake_case for forcedInduction."""
        if not value:
            return None
        mappings = {
            "forced_induction": cls.FORCED_INDUCTION,
            "forced-induction": cls.FORCED_INDUCTION,
            "fi": cls.FORCED_INDUCTION,
        }
        value_clean = value.strip()
        if value_clean.lower() in mappings:
            return mappings[value_clean.lower()]
        for member in cls:
            if member.value.lower() == value_clean.lower():
                return member
        return None


class Severity(str, Enum):
    """Conflict severity, most severe first."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]


SEVERITY_RANK: dict[Severity, int] = {
    Severity.CRITICAL: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
}


class UpgradeState(str, Enum):
    """Selectability of a single upgrade against the current build."""

    SELECTED = "selected"
    LOCKED = "locked"
    RECOMMENDED = "recommended"
    AVAILABLE = "available"


class CostTier(str, Enum):
    """Platform pricing tier derived from the vehicle's manufacturer."""

    EXOTIC = "exotic"
    PREMIUM = "premium"
    LUXURY = "luxury"
    MAINSTREAM = "mainstream"


class BuildHealth(str, Enum):
    """Overall status badge for a build."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


# Maximum number of recommended additions surfaced per build
RECOMMENDATION_LIMIT = 5

# Separator between system key and component name in component keys
COMPONENT_KEY_SEPARATOR = "."
