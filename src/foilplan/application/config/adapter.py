"""Adapter to convert PlanConfiguration to domain objects.

This module turns the Pydantic-validated input file into the frozen domain
types the planner works with: VesselGeometry, PlannerSettings and the
membrane policy triple.
"""

from foilplan.application.config.schema import (
    BasinSchema,
    PlanConfiguration,
    StairsSchema,
)
from foilplan.domain import (
    BasinSpec,
    MembraneSubtype,
    OptimizationPriority,
    PlannerSettings,
    StairsSpec,
    VesselGeometry,
    WallLayout,
)


def _stairs_to_spec(stairs: StairsSchema) -> StairsSpec:
    return StairsSpec(
        width=stairs.width,
        step_height=stairs.step_height,
        step_depth=stairs.step_depth,
        step_count=stairs.step_count,
    )


def _basin_to_spec(basin: BasinSchema) -> BasinSpec:
    return BasinSpec(
        length=basin.length,
        width=basin.width,
        depth=basin.depth,
        has_partition_wall=basin.has_partition_wall,
        partition_offset=basin.partition_offset,
    )


def config_to_geometry(config: PlanConfiguration) -> VesselGeometry:
    """Convert the vessel section of a configuration to VesselGeometry.

    Raises:
        GeometryError: If the dimensions fail domain validation.
    """
    vessel = config.vessel
    return VesselGeometry(
        length=vessel.length,
        width=vessel.width,
        depth=vessel.depth,
        stairs=_stairs_to_spec(vessel.stairs) if vessel.stairs is not None else None,
        basin=_basin_to_spec(vessel.basin) if vessel.basin is not None else None,
        vertices=(
            tuple((float(x), float(y)) for x, y in vessel.vertices)
            if vessel.vertices is not None
            else None
        ),
    )


def config_to_settings(config: PlanConfiguration) -> PlannerSettings:
    """Build PlannerSettings, applying any planner overrides.

    Raises:
        ValueError: If the overrides are inconsistent with each other.
    """
    if config.planner is None:
        return PlannerSettings()
    return PlannerSettings(**config.planner.model_dump())


def config_to_membrane(
    config: PlanConfiguration,
) -> tuple[MembraneSubtype, OptimizationPriority, WallLayout]:
    """Membrane subtype, optimization priority and wall layout."""
    membrane = config.membrane
    return membrane.subtype, membrane.priority, membrane.wall_layout
