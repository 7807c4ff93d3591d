"""Value objects for the membrane planning domain.

This module provides immutable data types used throughout the planner.
All classes are re-exported from sub-modules for convenience.
"""

from __future__ import annotations

# Enumerations
from ._membrane import (
    FoilAssignment,
    JointKind,
    MembraneSubtype,
    OptimizationPriority,
    RollWidth,
    WallLayout,
)

# Vessel geometry
from ._geometry import (
    BasinSpec,
    GeometryError,
    StairsSpec,
    VesselGeometry,
    WallSegment,
)

# Surfaces and width assignments
from ._surfaces import (
    MixedWidth,
    SingleWidth,
    StripAssignment,
    Surface,
)

# Plans and configurations
from ._plans import (
    MixConfiguration,
    StripPlan,
    StripRef,
    StripRole,
    WallPartition,
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
    "RollWidth",
    "SingleWidth",
    "StairsSpec",
    "StripAssignment",
    "StripPlan",
    "StripRef",
    "StripRole",
    "Surface",
    "VesselGeometry",
    "WallLayout",
    "WallPartition",
    "WallSegment",
    "WallStrip",
]
