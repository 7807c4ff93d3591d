"""Validation structures and membrane planning advisory checks.

This module provides validation result structures and checks that go
beyond the schema: dimensions that contradict each other, and vessel
features that the planner handles but that an installer should know about
(stacked wall strips, strips joined from several roll pieces).
"""

from dataclasses import dataclass, field
from typing import Any

from foilplan.application.config.adapter import (
    config_to_geometry,
    config_to_membrane,
    config_to_settings,
)
from foilplan.application.config.schema import PlanConfiguration
from foilplan.domain import GeometryError, PlannerSettings, SurfaceModel, VesselGeometry


@dataclass
class ValidationError:
    """Represents a blocking validation error.

    Attributes:
        path: JSON path to the invalid field (e.g., "vessel.stairs.width")
        message: Human-readable description of the error
        value: The invalid value that caused the error
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """Represents a non-blocking validation warning.

    Attributes:
        path: JSON path to the concerning field
        message: Human-readable description of the concern
        suggestion: Optional suggested remediation
    """

    path: str
    message: str
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Container for validation errors and warnings.

    Attributes:
        errors: List of blocking validation errors
        warnings: List of non-blocking validation warnings
    """

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Check if the configuration has no blocking errors."""
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def exit_code(self) -> int:
        """Get the CLI exit code based on validation status.

        Returns:
            0 if valid with no warnings
            1 if there are errors
            2 if valid but has warnings
        """
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    def add_error(
        self, path: str, message: str, value: Any = None
    ) -> "ValidationResult":
        """Add a validation error and return self for chaining."""
        self.errors.append(ValidationError(path=path, message=message, value=value))
        return self

    def add_warning(
        self, path: str, message: str, suggestion: str | None = None
    ) -> "ValidationResult":
        """Add a validation warning and return self for chaining."""
        self.warnings.append(
            ValidationWarning(path=path, message=message, suggestion=suggestion)
        )
        return self

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


def check_feature_fit(config: PlanConfiguration) -> ValidationResult:
    """Check that stairs and basin fit inside the pool."""
    result = ValidationResult()
    vessel = config.vessel
    shorter = min(vessel.length, vessel.width)
    longer = max(vessel.length, vessel.width)

    if vessel.stairs is not None and vessel.stairs.width is not None:
        if vessel.stairs.width > shorter:
            result.add_error(
                path="vessel.stairs.width",
                message=(
                    f"Stair width ({vessel.stairs.width} m) exceeds the pool's "
                    f"shorter side ({shorter} m)"
                ),
                value=vessel.stairs.width,
            )

    if vessel.basin is not None:
        if vessel.basin.length > longer:
            result.add_error(
                path="vessel.basin.length",
                message=(
                    f"Basin length ({vessel.basin.length} m) exceeds the pool's "
                    f"longer side ({longer} m)"
                ),
                value=vessel.basin.length,
            )
        if vessel.basin.depth > vessel.depth:
            result.add_error(
                path="vessel.basin.depth",
                message=(
                    f"Basin depth ({vessel.basin.depth} m) exceeds the pool depth "
                    f"({vessel.depth} m)"
                ),
                value=vessel.basin.depth,
            )
    return result


def check_planning_advisories(
    config: PlanConfiguration,
    geometry: VesselGeometry,
    settings: PlannerSettings,
) -> ValidationResult:
    """Warn about vessels that need stacked or joined strips.

    Advisories checked:
    - Walls deeper than one wide strip covers (two narrow strips stacked)
    - Narrow-only membrane on walls deeper than one narrow strip covers
    - Floor strips or single walls longer than a roll
    - Vessels without floor area
    """
    result = ValidationResult()
    subtype, _, _ = config_to_membrane(config)
    wall_height = geometry.depth + settings.bottom_fold

    if geometry.depth > settings.wide_width_depth:
        result.add_warning(
            path="vessel.depth",
            message=(
                f"Depth {geometry.depth} m is beyond the single-width range "
                f"({settings.wide_width_depth} m); walls get two stacked narrow strips"
            ),
            suggestion="Expect a horizontal weld along every wall",
        )
    elif settings.is_narrow_only(subtype) and wall_height > settings.narrow_width:
        result.add_warning(
            path="vessel.depth",
            message=(
                f"{subtype.value} membrane is narrow-only; a wall height of "
                f"{wall_height:.2f} m needs two stacked narrow strips"
            ),
        )

    if geometry.shorter_side <= 0 or geometry.longer_side <= 0:
        result.add_warning(
            path="vessel",
            message="Vessel has no floor area; only walls are planned",
        )

    if geometry.longer_side > settings.roll_length:
        result.add_warning(
            path="vessel.length",
            message=(
                f"Floor strips of {geometry.longer_side} m are longer than a "
                f"{settings.roll_length} m roll and are joined from pieces"
            ),
            suggestion="Check that cross welds on the floor are acceptable",
        )

    usable = settings.roll_length - settings.join_overlap_default
    for segment in SurfaceModel(settings).wall_segments(geometry):
        if segment.length > usable:
            result.add_warning(
                path="vessel",
                message=(
                    f"Wall {segment.label} ({segment.length:.2f} m) is longer than "
                    f"a roll; its strip is joined from pieces"
                ),
            )
    return result


def validate_config(config: PlanConfiguration) -> ValidationResult:
    """Perform full validation of a planning configuration.

    Args:
        config: A PlanConfiguration instance (already validated by Pydantic)

    Returns:
        ValidationResult containing any errors or warnings
    """
    result = ValidationResult()
    result.merge(check_feature_fit(config))

    try:
        geometry = config_to_geometry(config)
    except GeometryError as e:
        result.add_error(path=f"vessel.{e.field_name}", message=str(e), value=e.value)
        return result

    try:
        settings = config_to_settings(config)
    except ValueError as e:
        result.add_error(path="planner", message=str(e))
        return result

    result.merge(check_planning_advisories(config, geometry, settings))
    return result
