"""Planned strips, wall partitions and complete mix configurations."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from ._membrane import MembraneSubtype, OptimizationPriority, RollWidth
from ._surfaces import MixedWidth, SingleWidth, StripAssignment, Surface

if TYPE_CHECKING:
    from foilplan.domain.settings import PlannerSettings


class StripRole(str, Enum):
    """Role of a strip during cross-surface roll pairing."""

    FLOOR = "floor"
    WALL = "wall"
    OTHER = "other"


@dataclass(frozen=True)
class StripRef:
    """One physical strip to be cut from a roll.

    Attributes:
        surface_key: Key of the surface the strip belongs to.
        label: Human readable strip name.
        length: Cut length in metres.
        width: Roll width class the strip is cut from.
        role: Pairing role (floor, wall or other).
    """

    surface_key: str
    label: str
    length: float
    width: RollWidth
    role: StripRole = StripRole.OTHER

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError("Strip length must be positive")


@dataclass(frozen=True)
class WallStrip:
    """One long wall strip spanning consecutive wall segments.

    Attributes:
        segment_indices: Wall segments covered, in loop order.
        label: Corner path such as "A-B-C" or "D-A".
        base_length: Summed length of the covered segments.
        join_overlap_share: Vertical join overlap carried by this strip.
        width: Roll width of the strip.
        horizontal_count: Strips stacked to cover the wall height.
        horizontal_overlap: Overlap between stacked strips.
        edge_waste: Height trimmed off above the required wall height.
    """

    segment_indices: tuple[int, ...]
    label: str
    base_length: float
    join_overlap_share: float
    width: RollWidth
    horizontal_count: int = 1
    horizontal_overlap: float = 0.0
    edge_waste: float = 0.0

    @property
    def length(self) -> float:
        """Cut length including the carried join overlap."""
        return self.base_length + self.join_overlap_share


@dataclass(frozen=True)
class WallPartition:
    """A complete plan for the perimeter loop.

    Attributes:
        strips: Wall strips in loop order.
        join_overlap: Overlap used at every vertical join.
        is_offcut_split: True when a two-strip split was made asymmetric so
            one strip fits a reusable offcut exactly.
    """

    strips: tuple[WallStrip, ...]
    join_overlap: float
    is_offcut_split: bool = False

    @property
    def strip_count(self) -> int:
        return len(self.strips)

    @property
    def physical_strip_count(self) -> int:
        """Strips to cut, stacked strips included."""
        return sum(strip.horizontal_count for strip in self.strips)

    @property
    def total_length(self) -> float:
        return sum(strip.length for strip in self.strips)

    @property
    def length_spread(self) -> float:
        """Difference between the longest and shortest strip."""
        if not self.strips:
            return 0.0
        lengths = [strip.length for strip in self.strips]
        return max(lengths) - min(lengths)

    @property
    def widths(self) -> tuple[RollWidth, ...]:
        return tuple(strip.width for strip in self.strips)

    @property
    def assignment(self) -> StripAssignment | None:
        """Width summary of the strips, None for an empty loop."""
        if not self.strips:
            return None
        if len(set(self.widths)) == 1:
            return SingleWidth(self.widths[0])
        counts: dict[RollWidth, int] = {}
        for strip in self.strips:
            counts[strip.width] = counts.get(strip.width, 0) + strip.horizontal_count
        ordered = [RollWidth.WIDE, RollWidth.NARROW]
        return MixedWidth(tuple((w, counts[w]) for w in ordered if w in counts))

    def material_area(self, settings: PlannerSettings) -> float:
        """Membrane area cut for the walls, overlaps included."""
        return sum(
            strip.length * strip.horizontal_count * settings.width_of(strip.width)
            for strip in self.strips
        )

    def strip_refs(self, surface_key: str) -> list[StripRef]:
        refs: list[StripRef] = []
        for strip in self.strips:
            for level in range(strip.horizontal_count):
                label = f"Wall {strip.label}"
                if strip.horizontal_count > 1:
                    label = f"{label} ({level + 1}/{strip.horizontal_count})"
                refs.append(
                    StripRef(
                        surface_key=surface_key,
                        label=label,
                        length=strip.length,
                        width=strip.width,
                        role=StripRole.WALL,
                    )
                )
        return refs


@dataclass(frozen=True)
class StripPlan:
    """Chosen strips for one surface.

    For the perimeter loop the plan summarises the wall partition held by
    the MixConfiguration; ``strip_count`` then counts every cut strip.

    Attributes:
        surface: The surface being covered.
        assignment: Width assignment, None when the surface needs no strips.
        strip_count: Strips per repetition of the surface.
        overlap: Overlap used between adjacent strips.
        edge_waste: Width trimmed off beyond the cover width.
        covered_width: Width covered after overlaps.
        material_width: Summed width of the strips of one repetition.
        is_manual_override: True when the width was set by hand.
    """

    surface: Surface
    assignment: StripAssignment | None
    strip_count: int
    overlap: float = 0.0
    edge_waste: float = 0.0
    covered_width: float = 0.0
    material_width: float = 0.0
    is_manual_override: bool = False

    def __post_init__(self) -> None:
        if self.strip_count < 0:
            raise ValueError("Strip count must be non-negative")
        if self.strip_count > 0 and self.assignment is None:
            raise ValueError("A plan with strips needs a width assignment")

    @property
    def key(self) -> str:
        return self.surface.key

    @property
    def strip_length(self) -> float:
        return self.surface.strip_length

    @property
    def total_strips(self) -> int:
        return self.strip_count * self.surface.repetition_count

    @property
    def widths(self) -> tuple[RollWidth, ...]:
        """Per-strip widths of one repetition."""
        if self.assignment is None:
            return ()
        return self.assignment.expand(self.strip_count)

    @property
    def primary_width(self) -> RollWidth | None:
        return None if self.assignment is None else self.assignment.primary_width

    @property
    def edge_waste_area(self) -> float:
        if self.strip_count == 0:
            return 0.0
        return self.edge_waste * self.strip_length * self.surface.repetition_count

    def material_area(self, settings: PlannerSettings) -> float:
        """Membrane area of all strips, overlaps included."""
        return sum(
            settings.width_of(width) * self.strip_length for width in self.widths
        ) * self.surface.repetition_count

    def strip_refs(self) -> list[StripRef]:
        if self.strip_count == 0:
            return []
        if self.surface.is_floor:
            role = StripRole.FLOOR
        elif self.surface.is_wall:
            role = StripRole.WALL
        else:
            role = StripRole.OTHER

        refs: list[StripRef] = []
        repeats = self.surface.repetition_count
        for copy in range(repeats):
            for index, width in enumerate(self.widths):
                label = f"{self.surface.label} {index + 1}"
                if repeats > 1:
                    label = f"{self.surface.label} {copy + 1}.{index + 1}"
                refs.append(
                    StripRef(
                        surface_key=self.key,
                        label=label,
                        length=self.strip_length,
                        width=width,
                        role=role,
                    )
                )
        return refs


@dataclass(frozen=True)
class MixConfiguration:
    """Complete per-surface plan for one planning run, with roll totals.

    Attributes:
        plans: Strip plans in surface order.
        wall_partition: Chosen partition of the perimeter loop, if any.
        subtype: Membrane subtype the plan was made for.
        priority: Optimization priority used.
        total_rolls_narrow: Narrow rolls needed after packing.
        total_rolls_wide: Wide rolls needed after packing.
        ordered_area: Area of all rolls to order.
        total_waste_area: Edge waste plus unusable roll-end waste.
        reusable_offcut_area: Roll-end leftovers long enough to reuse.
        waste_percentage: Waste as a share of the ordered area.
        is_optimized: False once any surface has been overridden by hand.
    """

    plans: tuple[StripPlan, ...]
    wall_partition: WallPartition | None
    subtype: MembraneSubtype
    priority: OptimizationPriority
    total_rolls_narrow: int = 0
    total_rolls_wide: int = 0
    ordered_area: float = 0.0
    total_waste_area: float = 0.0
    reusable_offcut_area: float = 0.0
    waste_percentage: float = 0.0
    is_optimized: bool = True

    @property
    def total_rolls(self) -> int:
        return self.total_rolls_narrow + self.total_rolls_wide

    @property
    def surface_keys(self) -> tuple[str, ...]:
        return tuple(plan.key for plan in self.plans)

    def plan_for(self, key: str) -> StripPlan:
        """Plan of a surface by key.

        Raises:
            KeyError: If no surface has that key.
        """
        for plan in self.plans:
            if plan.key == key:
                return plan
        raise KeyError(f"No surface '{key}' in configuration")

    def with_plan(self, plan: StripPlan) -> MixConfiguration:
        """Copy with one surface plan replaced."""
        plans = tuple(plan if p.key == plan.key else p for p in self.plans)
        return replace(self, plans=plans)

    def strip_refs(self, keys: frozenset[str] | None = None) -> list[StripRef]:
        """Every strip to cut, optionally limited to some surfaces."""
        refs: list[StripRef] = []
        for plan in self.plans:
            if keys is not None and plan.key not in keys:
                continue
            if plan.surface.is_perimeter and self.wall_partition is not None:
                refs.extend(self.wall_partition.strip_refs(plan.key))
            else:
                refs.extend(plan.strip_refs())
        return refs

    def edge_waste_area_of(self, plan: StripPlan) -> float:
        """Edge waste area of a plan; the wall loop is measured per strip."""
        if plan.surface.is_perimeter and self.wall_partition is not None:
            return sum(
                strip.edge_waste * strip.length for strip in self.wall_partition.strips
            )
        return plan.edge_waste_area

    def material_area_of(self, plan: StripPlan, settings: PlannerSettings) -> float:
        """Membrane area of a plan; the wall loop is measured per strip."""
        if plan.surface.is_perimeter and self.wall_partition is not None:
            return self.wall_partition.material_area(settings)
        return plan.material_area(settings)

    @property
    def edge_waste_area(self) -> float:
        return sum(self.edge_waste_area_of(plan) for plan in self.plans)
