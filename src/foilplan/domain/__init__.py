"""Domain layer: vessel geometry, surfaces, strip plans and planning services."""

from .services import (
    PerimeterPartitioner,
    StripEvaluation,
    StripWidthSelector,
    SurfaceModel,
)
from .settings import PlannerSettings
from .value_objects import (
    BasinSpec,
    FoilAssignment,
    GeometryError,
    JointKind,
    MembraneSubtype,
    MixConfiguration,
    MixedWidth,
    OptimizationPriority,
    RollWidth,
    SingleWidth,
    StairsSpec,
    StripAssignment,
    StripPlan,
    StripRef,
    StripRole,
    Surface,
    VesselGeometry,
    WallLayout,
    WallPartition,
    WallSegment,
    WallStrip,
)

__all__ = [
    "BasinSpec",
    "FoilAssignment",
    "GeometryError",
    "JointKind",
    "MembraneSubtype",
    "MixConfiguration",
    "MixedWidth",
    "OptimizationPriority",
    "PerimeterPartitioner",
    "PlannerSettings",
    "RollWidth",
    "SingleWidth",
    "StairsSpec",
    "StripAssignment",
    "StripEvaluation",
    "StripPlan",
    "StripRef",
    "StripRole",
    "StripWidthSelector",
    "Surface",
    "SurfaceModel",
    "VesselGeometry",
    "WallLayout",
    "WallPartition",
    "WallSegment",
    "WallStrip",
]
