"""FastAPI route definitions for the Build Planner API."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from build_planner.api.deps import get_build_engine
from build_planner.core.enums import UpgradeCategory, UpgradeState
from build_planner.models.build import (
    BuildAnalysis,
    CompatibilityReport,
    CostOutputResult,
    UpgradeDetail,
    UpgradeSummary,
    VehicleStats,
)
from build_planner.models.registry import Component
from build_planner.models.upgrade import CategoryInfo, Preset
from build_planner.services.engine import BuildEngine
from build_planner.utils.converters import split_csv

router = APIRouter()

EngineDep = Annotated[BuildEngine, Depends(get_build_engine)]


# ---------------------------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------------------------


class BuildRequest(BaseModel):
    # An explicit upgrade list wins over a preset
    upgrades: Optional[list[str]] = None
    preset: Optional[str] = None
    vehicle: Optional[VehicleStats] = None


class StatesRequest(BuildRequest):
    keys: Optional[list[str]] = None


class SystemResponse(BaseModel):
    key: str
    name: str
    description: str
    display_color: str
    components: list[Component]


class ShareResponse(BaseModel):
    upgrades: list[str]
    param: str
    analysis: BuildAnalysis


def _selection_for(req: BuildRequest, engine: BuildEngine) -> list[str]:
    if req.upgrades is not None:
        return req.upgrades
    if req.preset:
        preset = engine.get_preset(req.preset)
        if preset is None:
            raise HTTPException(status_code=404, detail=f"Unknown preset: {req.preset}")
        return list(preset.upgrades)
    return []


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@router.get("/systems", response_model=list[SystemResponse])
async def list_systems(engine: EngineDep):
    """Vehicle systems with their components."""
    components = engine.graph.components
    return [
        SystemResponse(
            key=system.key,
            name=system.name,
            description=system.description,
            display_color=system.display_color,
            components=[c for c in components if c.system_key == system.key],
        )
        for system in engine.graph.systems
    ]


@router.get("/categories", response_model=list[CategoryInfo])
async def list_categories(engine: EngineDep):
    return engine.categories()


@router.get("/upgrades", response_model=list[UpgradeSummary])
async def list_upgrades(
    engine: EngineDep,
    category: Optional[str] = None,
    search: Optional[str] = None,
    upgrades: Optional[str] = None,
):
    """Upgrade catalog, optionally filtered.

    Pass ``upgrades`` (comma-separated) to get each row's state against
    that selection.
    """
    parsed_category = None
    if category:
        parsed_category = UpgradeCategory.from_string(category)
        if parsed_category is None:
            raise HTTPException(status_code=422, detail=f"Unknown category: {category}")

    selection = split_csv(upgrades) if upgrades is not None else None
    return engine.list_upgrades(category=parsed_category, search=search, selection=selection)


@router.get("/upgrades/{key}", response_model=UpgradeDetail)
async def get_upgrade(key: str, engine: EngineDep, upgrades: Optional[str] = None):
    detail = engine.describe_upgrade(key, split_csv(upgrades))
    if detail is None:
        raise HTTPException(status_code=404, detail=f"Unknown upgrade: {key}")
    return detail


@router.get("/presets", response_model=list[Preset])
async def list_presets(engine: EngineDep):
    return engine.presets


# ---------------------------------------------------------------------------
# Build Analysis
# ---------------------------------------------------------------------------


@router.get("/build/share", response_model=ShareResponse)
async def share_build(
    engine: EngineDep,
    upgrades: Optional[str] = None,
    package: Optional[str] = None,
):
    """Decode a share link (``?upgrades=a,b`` or ``?package=trackPack``)."""
    selection = engine.selection_from_query(upgrades=upgrades, package=package)
    return ShareResponse(
        upgrades=selection.to_list(),
        param=selection.to_param(),
        analysis=engine.analyze_build(selection),
    )


@router.post("/build/analyze", response_model=BuildAnalysis)
async def analyze_build(req: BuildRequest, engine: EngineDep):
    return engine.analyze_build(_selection_for(req, engine), req.vehicle)


@router.post("/build/compatibility", response_model=CompatibilityReport)
async def check_compatibility(req: BuildRequest, engine: EngineDep):
    return engine.check_compatibility(_selection_for(req, engine))


@router.post("/build/estimate", response_model=CostOutputResult)
async def estimate_build(req: BuildRequest, engine: EngineDep):
    return engine.estimate_cost_and_output(_selection_for(req, engine), req.vehicle)


@router.post("/build/states", response_model=dict[str, UpgradeState])
async def upgrade_states(req: StatesRequest, engine: EngineDep):
    """Selectability of each upgrade (or of ``keys``) against the build."""
    return engine.get_upgrade_states(_selection_for(req, engine), req.keys)
