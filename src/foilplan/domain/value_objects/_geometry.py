"""Vessel geometry value objects."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


class GeometryError(ValueError):
    """Raised for vessel dimensions that cannot describe a real pool.

    Attributes:
        field_name: Dotted name of the offending input (e.g. "basin.depth").
        value: The rejected value.
    """

    def __init__(self, field_name: str, value: float, reason: str = "must not be negative") -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(f"{field_name} {reason} (got {value!r})")


def _require_non_negative(name: str, value: float) -> None:
    if value < 0 or math.isnan(value):
        raise GeometryError(name, value)


@dataclass(frozen=True)
class StairsSpec:
    """Entry stairs built into the vessel.

    Attributes:
        width: Stair width in metres, or None when the stairs span the
            full shorter side of the pool.
        step_height: Rise of one step in metres.
        step_depth: Tread depth of one step in metres.
        step_count: Number of steps.
    """

    width: float | None = 1.5
    step_height: float = 0.20
    step_depth: float = 0.30
    step_count: int = 4

    def __post_init__(self) -> None:
        if self.width is not None:
            _require_non_negative("stairs.width", self.width)
        _require_non_negative("stairs.step_height", self.step_height)
        _require_non_negative("stairs.step_depth", self.step_depth)
        if self.step_count < 0:
            raise GeometryError("stairs.step_count", self.step_count)

    @property
    def run_length(self) -> float:
        """Developed length of the membrane running over all steps."""
        return (self.step_depth + self.step_height) * self.step_count


@dataclass(frozen=True)
class BasinSpec:
    """Shallow secondary basin (wading area) attached to the pool.

    Attributes:
        length: Basin length in metres.
        width: Basin width in metres; also the partition wall length.
        depth: Water depth of the basin in metres.
        has_partition_wall: Whether a partition wall separates the basin
            from the main pool.
        partition_offset: Extra partition wall height above the basin
            floor level, in metres.
    """

    length: float = 1.5
    width: float = 2.0
    depth: float = 0.4
    has_partition_wall: bool = True
    partition_offset: float = 0.0

    def __post_init__(self) -> None:
        _require_non_negative("basin.length", self.length)
        _require_non_negative("basin.width", self.width)
        _require_non_negative("basin.depth", self.depth)
        _require_non_negative("basin.partition_offset", self.partition_offset)


@dataclass(frozen=True)
class VesselGeometry:
    """Pool geometry supplied by the caller for one planning run.

    The floor is always treated as a rectangle of length x width. When
    ``vertices`` is given, the wall perimeter follows that polygon instead
    of the rectangle.

    Attributes:
        length: Pool length in metres.
        width: Pool width in metres.
        depth: Wall height (water depth) in metres.
        stairs: Optional entry stairs.
        basin: Optional secondary basin.
        vertices: Optional ordered (x, y) polygon corners in metres.
    """

    length: float
    width: float
    depth: float
    stairs: StairsSpec | None = None
    basin: BasinSpec | None = None
    vertices: tuple[tuple[float, float], ...] | None = field(default=None)

    def __post_init__(self) -> None:
        _require_non_negative("length", self.length)
        _require_non_negative("width", self.width)
        _require_non_negative("depth", self.depth)
        if self.vertices is not None and 0 < len(self.vertices) < 3:
            raise GeometryError(
                "vertices", len(self.vertices), "needs at least 3 corners"
            )

    @property
    def longer_side(self) -> float:
        """Longer floor side, the strip running direction."""
        return max(self.length, self.width)

    @property
    def shorter_side(self) -> float:
        """Shorter floor side, the width strips must cover."""
        return min(self.length, self.width)

    @property
    def has_custom_perimeter(self) -> bool:
        """True when the wall loop follows explicit vertices."""
        return bool(self.vertices)


@dataclass(frozen=True)
class WallSegment:
    """One straight wall of the perimeter loop, between two corners."""

    index: int
    start_corner: str
    end_corner: str
    length: float

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError("Wall segment length must be non-negative")

    @property
    def label(self) -> str:
        """Corner label such as "A-B"."""
        return f"{self.start_corner}-{self.end_corner}"
