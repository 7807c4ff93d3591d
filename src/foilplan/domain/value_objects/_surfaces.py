"""Surfaces to cover and the roll-width assignments planned for them."""

from __future__ import annotations

from dataclasses import dataclass

from ._membrane import FoilAssignment, JointKind, RollWidth


@dataclass(frozen=True)
class Surface:
    """One area of the vessel that must be covered with parallel strips.

    Strips run along ``strip_length``; side by side they must cover
    ``cover_width``. Adjacent strips share an overlap between
    ``min_overlap`` and ``max_overlap`` (both zero for butt joints).

    Attributes:
        key: Stable identifier ("floor", "walls", "stairs", ...).
        label: Human readable name.
        strip_length: Length of every strip in metres.
        cover_width: Width to be covered across the strips in metres.
        repetition_count: How many identical copies of the surface exist.
        min_overlap: Smallest allowed overlap between adjacent strips.
        max_overlap: Largest allowed overlap between adjacent strips.
        joint_kind: Overlap weld or butt weld.
        foil_assignment: Membrane pool the surface is priced in.
        is_floor: True for the main pool floor.
        is_wall: True for vertical pool walls (loop or separate).
        is_perimeter: True for the closed wall loop.
    """

    key: str
    label: str
    strip_length: float
    cover_width: float
    repetition_count: int = 1
    min_overlap: float = 0.0
    max_overlap: float = 0.0
    joint_kind: JointKind = JointKind.OVERLAP
    foil_assignment: FoilAssignment = FoilAssignment.MAIN
    is_floor: bool = False
    is_wall: bool = False
    is_perimeter: bool = False

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Surface key must not be empty")
        if self.repetition_count < 1:
            raise ValueError("Repetition count must be at least 1")
        if self.min_overlap < 0:
            raise ValueError("Minimum overlap must be non-negative")
        if self.max_overlap < self.min_overlap:
            raise ValueError("Maximum overlap must not be below minimum overlap")
        if self.joint_kind == JointKind.BUTT and self.max_overlap != 0:
            raise ValueError("Butt-jointed surfaces cannot overlap")
        if self.is_perimeter and not self.is_wall:
            raise ValueError("The perimeter loop must be a wall surface")

    @property
    def is_structural(self) -> bool:
        """True for surfaces priced in the structural membrane pool."""
        return self.foil_assignment == FoilAssignment.STRUCTURAL

    @property
    def is_coverable(self) -> bool:
        """False for degenerate surfaces that need no strips at all."""
        return self.cover_width > 0 and self.strip_length > 0

    @property
    def cover_area(self) -> float:
        """Net area to cover, all repetitions included."""
        if not self.is_coverable:
            return 0.0
        return self.strip_length * self.cover_width * self.repetition_count


@dataclass(frozen=True)
class SingleWidth:
    """Every strip of the surface is cut from one roll width."""

    width: RollWidth

    def expand(self, count: int) -> tuple[RollWidth, ...]:
        """Per-strip widths for ``count`` strips."""
        return (self.width,) * count

    @property
    def widths(self) -> frozenset[RollWidth]:
        return frozenset({self.width})

    @property
    def primary_width(self) -> RollWidth:
        return self.width


@dataclass(frozen=True)
class MixedWidth:
    """Strips of the surface are cut from both roll widths.

    Attributes:
        parts: (width, count) pairs in laying order, wide strips first.
    """

    parts: tuple[tuple[RollWidth, int], ...]

    def __post_init__(self) -> None:
        if not self.parts:
            raise ValueError("Mixed width assignment needs at least one part")
        if any(count < 1 for _, count in self.parts):
            raise ValueError("Mixed width part counts must be positive")

    def expand(self, count: int | None = None) -> tuple[RollWidth, ...]:
        """Per-strip widths in laying order.

        ``count`` is accepted for symmetry with SingleWidth; the mix itself
        fixes the number of strips.
        """
        widths: list[RollWidth] = []
        for width, part_count in self.parts:
            widths.extend([width] * part_count)
        return tuple(widths)

    @property
    def count(self) -> int:
        return sum(part_count for _, part_count in self.parts)

    @property
    def widths(self) -> frozenset[RollWidth]:
        return frozenset(width for width, _ in self.parts)

    @property
    def primary_width(self) -> RollWidth:
        """Wide when any strip is wide, otherwise narrow."""
        return RollWidth.WIDE if RollWidth.WIDE in self.widths else RollWidth.NARROW

    def count_of(self, width: RollWidth) -> int:
        return sum(part_count for w, part_count in self.parts if w == width)


StripAssignment = SingleWidth | MixedWidth
