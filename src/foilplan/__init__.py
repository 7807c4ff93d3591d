"""Pool membrane roll-width mix optimizer and perimeter strip planner."""

from foilplan.application import (
    PricingArea,
    calculate_pricing_area,
    derive_surfaces,
    optimize_mix,
    pack_rolls,
    update_surface_width,
)
from foilplan.domain import (
    BasinSpec,
    GeometryError,
    MembraneSubtype,
    MixConfiguration,
    OptimizationPriority,
    PlannerSettings,
    RollWidth,
    StairsSpec,
    Surface,
    VesselGeometry,
    WallLayout,
)
from foilplan.infrastructure import RollAllocation

__all__ = [
    "BasinSpec",
    "GeometryError",
    "MembraneSubtype",
    "MixConfiguration",
    "OptimizationPriority",
    "PlannerSettings",
    "PricingArea",
    "RollAllocation",
    "RollWidth",
    "StairsSpec",
    "Surface",
    "VesselGeometry",
    "WallLayout",
    "calculate_pricing_area",
    "derive_surfaces",
    "optimize_mix",
    "pack_rolls",
    "update_surface_width",
]
