"""Pydantic configuration schema models for vessel planning files.

This module defines the configuration schema for JSON-based planning input
files. It uses Pydantic v2 for validation and serialization.

The membrane enums are reused from the domain layer to ensure consistency
and avoid duplication.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from foilplan.domain.value_objects import (
    MembraneSubtype,
    OptimizationPriority,
    WallLayout,
)

# Supported schema versions for configuration files
# Version 1.0: Initial schema with rectangular vessels, stairs and basin
# Version 1.1: Added polygonal perimeters and planner overrides
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0", "1.1"})


class StairsSchema(BaseModel):
    """Configuration for pool stairs.

    Attributes:
        width: Stair width in metres; omitted means the full shorter side.
        step_height: Rise of one step in metres.
        step_depth: Tread depth of one step in metres.
        step_count: Number of steps.
    """

    model_config = ConfigDict(extra="forbid")

    width: float | None = Field(default=None, gt=0, le=20.0, description="Stair width")
    step_height: float = Field(default=0.20, ge=0, le=1.0, description="Step rise")
    step_depth: float = Field(default=0.30, ge=0, le=2.0, description="Step tread depth")
    step_count: int = Field(default=4, ge=0, le=20, description="Number of steps")


class BasinSchema(BaseModel):
    """Configuration for a secondary (shallow) basin.

    Attributes:
        length: Basin length along the pool wall in metres.
        width: Basin width in metres.
        depth: Basin water depth in metres.
        has_partition_wall: Whether a partition wall separates the basin.
        partition_offset: Extra partition height above the basin floor.
    """

    model_config = ConfigDict(extra="forbid")

    length: float = Field(default=1.5, ge=0, le=50.0, description="Basin length")
    width: float = Field(default=2.0, ge=0, le=50.0, description="Basin width")
    depth: float = Field(default=0.4, ge=0, le=3.0, description="Basin depth")
    has_partition_wall: bool = Field(default=True, description="Basin has a partition wall")
    partition_offset: float = Field(
        default=0.0, ge=0, le=1.0, description="Partition height adjustment"
    )


class VesselSchema(BaseModel):
    """Vessel dimensions and optional features.

    Attributes:
        length: Pool length in metres.
        width: Pool width in metres.
        depth: Pool depth in metres.
        stairs: Optional stairs.
        basin: Optional secondary basin.
        vertices: Optional polygon corners ``[x, y]`` for a non-rectangular
            wall perimeter, in loop order.
    """

    model_config = ConfigDict(extra="forbid")

    length: float = Field(..., ge=0, le=100.0, description="Pool length in metres")
    width: float = Field(..., ge=0, le=100.0, description="Pool width in metres")
    depth: float = Field(..., ge=0, le=5.0, description="Pool depth in metres")
    stairs: StairsSchema | None = None
    basin: BasinSchema | None = None
    vertices: list[tuple[float, float]] | None = Field(
        default=None, description="Perimeter polygon corners"
    )

    @field_validator("vertices")
    @classmethod
    def validate_vertices(
        cls, v: list[tuple[float, float]] | None
    ) -> list[tuple[float, float]] | None:
        """A polygon needs at least three corners."""
        if v is not None and len(v) < 3:
            raise ValueError(f"vertices needs at least 3 corners, got {len(v)}")
        return v


class MembraneSchema(BaseModel):
    """Membrane choice and planning policy.

    Attributes:
        subtype: Membrane product family.
        priority: What the optimizer minimizes.
        wall_layout: Plan the walls as one loop or as separate walls.
    """

    model_config = ConfigDict(extra="forbid")

    subtype: MembraneSubtype = MembraneSubtype.SINGLE_COLOR
    priority: OptimizationPriority = OptimizationPriority.MINIMIZE_WASTE
    wall_layout: WallLayout = WallLayout.PERIMETER


class PlannerSettingsSchema(BaseModel):
    """Overrides for the roll catalogue and planner tolerances.

    Every field defaults to the standard catalogue value.
    """

    model_config = ConfigDict(extra="forbid")

    narrow_width: float = Field(default=1.65, gt=0, le=5.0, description="Narrow roll width")
    wide_width: float = Field(default=2.05, gt=0, le=5.0, description="Wide roll width")
    roll_length: float = Field(default=25.0, gt=0, le=100.0, description="Roll length")
    min_reusable_offcut: float = Field(
        default=2.0, ge=0, description="Shortest reusable roll-end leftover"
    )
    floor_min_overlap: float = Field(default=0.05, ge=0, le=0.5)
    wall_min_overlap: float = Field(default=0.10, ge=0, le=0.5)
    overlap_ratio: float = Field(default=2.0, ge=1.0, le=5.0)
    join_overlap_min: float = Field(default=0.07, ge=0, le=0.5)
    join_overlap_default: float = Field(default=0.10, ge=0, le=0.5)
    join_overlap_max: float = Field(default=0.15, ge=0, le=0.5)
    bottom_fold: float = Field(default=0.15, ge=0, le=0.5)
    single_width_depth: float = Field(default=1.55, gt=0, le=5.0)
    wide_width_depth: float = Field(default=1.95, gt=0, le=5.0)
    offcut_tolerance: float = Field(default=0.05, ge=0, le=1.0)
    reusable_edge_width: float = Field(default=0.30, ge=0, le=5.0)

    @model_validator(mode="after")
    def validate_widths(self) -> "PlannerSettingsSchema":
        """Validate that the narrow roll is narrower than the wide roll."""
        if self.narrow_width >= self.wide_width:
            raise ValueError(
                f"narrow_width ({self.narrow_width}) must be smaller than "
                f"wide_width ({self.wide_width})"
            )
        return self

    @model_validator(mode="after")
    def validate_min_overlaps(self) -> "PlannerSettingsSchema":
        """Validate that the minimum overlaps are narrower than a narrow strip."""
        for name in ("floor_min_overlap", "wall_min_overlap"):
            if getattr(self, name) >= self.narrow_width:
                raise ValueError(
                    f"{name} ({getattr(self, name)}) must be smaller than "
                    f"narrow_width ({self.narrow_width})"
                )
        return self

    @model_validator(mode="after")
    def validate_join_overlaps(self) -> "PlannerSettingsSchema":
        """Validate the ordering of the join overlaps."""
        if not (
            self.join_overlap_min <= self.join_overlap_default <= self.join_overlap_max
        ):
            raise ValueError(
                "join overlaps must satisfy join_overlap_min <= "
                "join_overlap_default <= join_overlap_max"
            )
        return self

    @model_validator(mode="after")
    def validate_depth_thresholds(self) -> "PlannerSettingsSchema":
        """Validate that the single-width depth does not exceed the wide-width depth."""
        if self.single_width_depth > self.wide_width_depth:
            raise ValueError(
                f"single_width_depth ({self.single_width_depth}) must not exceed "
                f"wide_width_depth ({self.wide_width_depth})"
            )
        return self


class PlanConfiguration(BaseModel):
    """Root configuration model for a planning input file.

    Attributes:
        schema_version: Version string in format "major.minor" (e.g., "1.0")
        vessel: Vessel dimensions and features
        membrane: Membrane subtype and planning policy
        planner: Optional roll catalogue and tolerance overrides

    Example:
        >>> config = PlanConfiguration(
        ...     schema_version="1.0",
        ...     vessel=VesselSchema(length=8.0, width=4.0, depth=1.5)
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    vessel: VesselSchema
    membrane: MembraneSchema = Field(default_factory=MembraneSchema)
    planner: PlannerSettingsSchema | None = Field(
        default=None, description="Planner setting overrides (optional)"
    )

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Validate that schema version is supported.

        Newer minor versions within a supported major version are accepted
        for forward compatibility.
        """
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )
