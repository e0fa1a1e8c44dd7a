"""Upgrade categorization and display naming.

This module is the single source of truth for deriving an upgrade's category
from its key. Rules are evaluated top to bottom and the first rule with a
matching substring wins, so their ORDER is part of the contract: the catalog
UI groups and filters on the result. For example ``lightweight-flywheel``
lands in WHEELS because the wheels rule ("wheel") is checked before the
drivetrain rule ("flywheel" is never reached).
"""

import re

from build_planner.core.enums import UpgradeCategory
from build_planner.models.upgrade import CategoryInfo

# =============================================================================
# CATEGORY RULES (ordered; first match wins)
# =============================================================================

CATEGORY_RULES: tuple[tuple[UpgradeCategory, tuple[str, ...]], ...] = (
    (
        UpgradeCategory.POWER,
        ("tune", "intake", "throttle", "manifold", "piggyback", "ecu"),
    ),
    (
        UpgradeCategory.FORCED_INDUCTION,
        (
            "turbo",
            "supercharger",
            "intercooler",
            "pulley",
            "charge-pipe",
            "hpfp",
            "fuel-system",
            "flex-fuel",
            "methanol",
            "heat-exchanger",
        ),
    ),
    (
        UpgradeCategory.EXHAUST,
        ("exhaust", "downpipe", "header", "muffler", "resonator", "cat-back"),
    ),
    (
        UpgradeCategory.SUSPENSION,
        (
            "coilover",
            "spring",
            "sway",
            "bushing",
            "control-arm",
            "strut",
            "chassis-bracing",
            "subframe",
            "alignment",
        ),
    ),
    (UpgradeCategory.BRAKES, ("brake", "rotor", "caliper", "bbk")),
    (UpgradeCategory.WHEELS, ("tire", "wheel", "spacer")),
    (UpgradeCategory.COOLING, ("cooler", "radiator", "fluid")),
    (
        UpgradeCategory.AERO,
        (
            "splitter",
            "wing",
            "diffuser",
            "canard",
            "aero",
            "undertray",
            "carbon-fiber-hood",
        ),
    ),
    (
        UpgradeCategory.DRIVETRAIN,
        ("clutch", "flywheel", "diff", "axle", "driveshaft", "dct", "shifter"),
    ),
    (
        UpgradeCategory.SAFETY,
        ("roll", "harness", "seat", "fire", "helmet", "cage"),
    ),
    (
        UpgradeCategory.INTERNALS,
        ("cam", "head", "forged", "stroker", "engine-", "ported"),
    ),
)

DEFAULT_CATEGORY = UpgradeCategory.POWER


def categorize_upgrade(key: str) -> UpgradeCategory:
    """Derive an upgrade's category from its key."""
    for category, needles in CATEGORY_RULES:
        if any(needle in key for needle in needles):
            return category
    return DEFAULT_CATEGORY


# =============================================================================
# CATEGORY METADATA
# =============================================================================

CATEGORY_INFO: dict[UpgradeCategory, CategoryInfo] = {
    info.key: info
    for info in (
        CategoryInfo(key=UpgradeCategory.POWER, name="Power & Engine", short_name="Power", color="#e74c3c"),
        CategoryInfo(key=UpgradeCategory.FORCED_INDUCTION, name="Forced Induction", short_name="FI", color="#9b59b6"),
        CategoryInfo(key=UpgradeCategory.EXHAUST, name="Exhaust & Sound", short_name="Exhaust", color="#8e44ad"),
        CategoryInfo(key=UpgradeCategory.SUSPENSION, name="Suspension & Chassis", short_name="Susp", color="#3498db"),
        CategoryInfo(key=UpgradeCategory.BRAKES, name="Brakes & Stopping", short_name="Brakes", color="#f39c12"),
        CategoryInfo(key=UpgradeCategory.WHEELS, name="Wheels & Tires", short_name="Wheels", color="#2ecc71"),
        CategoryInfo(key=UpgradeCategory.COOLING, name="Cooling & Reliability", short_name="Cooling", color="#1abc9c"),
        CategoryInfo(key=UpgradeCategory.AERO, name="Aerodynamics", short_name="Aero", color="#34495e"),
        CategoryInfo(key=UpgradeCategory.DRIVETRAIN, name="Drivetrain", short_name="Drive", color="#e67e22"),
        CategoryInfo(key=UpgradeCategory.SAFETY, name="Safety & Track Prep", short_name="Safety", color="#c0392b"),
        CategoryInfo(key=UpgradeCategory.INTERNALS, name="Engine Internals", short_name="Internals", color="#2c3e50"),
    )
}


# =============================================================================
# DISPLAY NAMES
# =============================================================================

# Applied in order after title-casing each word
_ACRONYM_FIXES: tuple[tuple[str, str], ...] = (
    (r"Sc ", "SC "),
    (r"Ecu ", "ECU "),
    (r"Hpfp", "HPFP"),
    (r"Dct", "DCT"),
    (r"Bbk", "BBK"),
    (r"E85", "E85"),
)


def format_upgrade_name(key: str) -> str:
    """Turn an upgrade key into a display name.

        >>> format_upgrade_name("ecu-tune")
        'ECU Tune'
        >>> format_upgrade_name("heat-exchanger-sc")
        'Heat Exchanger Sc'
    """
    name = " ".join(word[:1].upper() + word[1:] for word in key.split("-"))
    for pattern, replacement in _ACRONYM_FIXES:
        name = re.sub(pattern, replacement, name)
    return name
