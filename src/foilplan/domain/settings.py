"""Planner settings.

This module provides PlannerSettings, the explicit home of every roll
dimension, overlap tolerance and subtype policy the planner relies on.
Entry points take an instance instead of reading module-level tables, so
two planning runs with different catalogues never interfere.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from foilplan.domain.value_objects import (
    JointKind,
    MembraneSubtype,
    RollWidth,
)


@dataclass(frozen=True)
class PlannerSettings:
    """Roll catalogue, overlap tolerances and subtype policies.

    Attributes:
        narrow_width: Narrow roll width in metres.
        wide_width: Wide roll width in metres.
        roll_length: Stock length of every roll in metres.
        min_reusable_offcut: Shortest roll-end leftover worth keeping.
        floor_min_overlap: Minimum overlap between floor strips.
        wall_min_overlap: Minimum overlap for walls, stairs and partitions.
        overlap_ratio: Maximum overlap as a multiple of the minimum.
        join_overlap_min: Tightest vertical join overlap around the wall loop.
        join_overlap_default: Regular vertical join overlap.
        join_overlap_max: Widest vertical join overlap a partition may use.
        bottom_fold: Wall membrane folded onto the floor, added to depth.
        single_width_depth: Deepest wall still planned in the narrow width.
        wide_width_depth: Deepest wall a single wide strip still covers.
        offcut_tolerance: Length tolerance when matching strips to offcuts.
        reusable_edge_width: Narrowest edge trim still counted as reusable.
        narrow_only_subtypes: Subtypes manufactured only in the narrow width.
        butt_joint_subtypes: Subtypes whose floor strips are butt-welded.
    """

    narrow_width: float = 1.65
    wide_width: float = 2.05
    roll_length: float = 25.0
    min_reusable_offcut: float = 2.0
    floor_min_overlap: float = 0.05
    wall_min_overlap: float = 0.10
    overlap_ratio: float = 2.0
    join_overlap_min: float = 0.07
    join_overlap_default: float = 0.10
    join_overlap_max: float = 0.15
    bottom_fold: float = 0.15
    single_width_depth: float = 1.55
    wide_width_depth: float = 1.95
    offcut_tolerance: float = 0.05
    reusable_edge_width: float = 0.30
    narrow_only_subtypes: frozenset[MembraneSubtype] = field(
        default_factory=lambda: frozenset(
            {MembraneSubtype.PRINTED, MembraneSubtype.TEXTURED}
        )
    )
    butt_joint_subtypes: frozenset[MembraneSubtype] = field(
        default_factory=lambda: frozenset({MembraneSubtype.TEXTURED})
    )

    def __post_init__(self) -> None:
        if self.narrow_width <= 0 or self.wide_width <= 0:
            raise ValueError("Roll widths must be positive")
        if self.narrow_width >= self.wide_width:
            raise ValueError("narrow_width must be smaller than wide_width")
        if self.roll_length <= 0:
            raise ValueError("roll_length must be positive")
        if self.min_reusable_offcut < 0:
            raise ValueError("min_reusable_offcut must be non-negative")
        if self.floor_min_overlap < 0 or self.wall_min_overlap < 0:
            raise ValueError("Minimum overlaps must be non-negative")
        if self.floor_min_overlap >= self.narrow_width:
            raise ValueError("floor_min_overlap must be smaller than the narrow width")
        if self.wall_min_overlap >= self.narrow_width:
            raise ValueError("wall_min_overlap must be smaller than the narrow width")
        if self.overlap_ratio < 1:
            raise ValueError("overlap_ratio must be at least 1")
        if not 0 <= self.join_overlap_min <= self.join_overlap_default <= self.join_overlap_max:
            raise ValueError(
                "Join overlaps must satisfy 0 <= min <= default <= max"
            )
        if self.bottom_fold < 0:
            raise ValueError("bottom_fold must be non-negative")
        if self.single_width_depth > self.wide_width_depth:
            raise ValueError("single_width_depth must not exceed wide_width_depth")
        if self.offcut_tolerance < 0:
            raise ValueError("offcut_tolerance must be non-negative")

    def width_of(self, width: RollWidth) -> float:
        """Metric width of a roll width class."""
        return self.wide_width if width == RollWidth.WIDE else self.narrow_width

    def roll_area(self, width: RollWidth) -> float:
        """Area of one full roll of the given width."""
        return self.width_of(width) * self.roll_length

    def max_overlap_for(self, min_overlap: float) -> float:
        """Upper overlap bound paired with a minimum overlap."""
        return min_overlap * self.overlap_ratio

    def is_narrow_only(self, subtype: MembraneSubtype) -> bool:
        return subtype in self.narrow_only_subtypes

    def floor_joint(self, subtype: MembraneSubtype) -> JointKind:
        """Joint used between floor strips for a subtype."""
        if subtype in self.butt_joint_subtypes:
            return JointKind.BUTT
        return JointKind.OVERLAP

    def allowed_widths(
        self, subtype: MembraneSubtype, structural: bool = False
    ) -> tuple[RollWidth, ...]:
        """Legal roll widths, narrow first.

        Structural surfaces and narrow-only subtypes are limited to the
        narrow width.
        """
        if structural or self.is_narrow_only(subtype):
            return (RollWidth.NARROW,)
        return (RollWidth.NARROW, RollWidth.WIDE)
