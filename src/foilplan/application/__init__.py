"""Application layer - use cases and orchestration."""

from .dtos import ComparisonOutput, PlanOutput
from .planning import (
    PlanVesselCommand,
    calculate_pricing_area,
    derive_surfaces,
    optimize_mix,
    pack_rolls,
    update_surface_width,
)
from .services import (
    MixOptimizer,
    PricingAggregator,
    PricingArea,
    SurfaceDetail,
    WidthComparison,
)

__all__ = [
    "ComparisonOutput",
    "MixOptimizer",
    "PlanOutput",
    "PlanVesselCommand",
    "PricingAggregator",
    "PricingArea",
    "SurfaceDetail",
    "WidthComparison",
    "calculate_pricing_area",
    "derive_surfaces",
    "optimize_mix",
    "pack_rolls",
    "update_surface_width",
]
