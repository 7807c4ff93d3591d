"""Perimeter wall loop partitioning.

The walls of a pool form one closed loop of straight segments. Rather than
cutting one strip per wall, the membrane is laid as a few long strips that
each run around one or more consecutive walls and are welded together at
vertical joins. Every join consumes one vertical overlap, so a loop cut
into ``k`` strips needs ``k`` overlaps in total.

PerimeterPartitioner enumerates the ways to cut the loop into contiguous
arcs, turns each arc into a strip with its share of the join overlap, and
drops partitions whose strips would not fit on a roll.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping, Sequence

from foilplan.domain.services.strip_width import (
    COVER_EPSILON,
    StripWidthSelector,
)
from foilplan.domain.settings import PlannerSettings
from foilplan.domain.value_objects import (
    RollWidth,
    Surface,
    WallPartition,
    WallSegment,
    WallStrip,
)

logger = logging.getLogger(__name__)

Grouping = tuple[tuple[int, ...], ...]


def _arc_label(segments: Sequence[WallSegment], indices: Sequence[int]) -> str:
    # Dropped zero-length edges leave a gap between consecutive corners.
    corners = [segments[indices[0]].start_corner]
    for i in indices:
        if segments[i].start_corner != corners[-1]:
            corners.append(segments[i].start_corner)
        corners.append(segments[i].end_corner)
    return "-".join(corners)


def _arcs_from_cuts(count: int, cuts: Sequence[int]) -> Grouping:
    """Contiguous groups between sorted cut corners, wrapping past the end."""
    groups: list[tuple[int, ...]] = []
    for position, start in enumerate(cuts):
        end = cuts[(position + 1) % len(cuts)]
        span = (end - start) % count or count
        groups.append(tuple((start + offset) % count for offset in range(span)))
    return tuple(groups)


class PerimeterPartitioner:
    """Enumerates and builds wall loop partitions.

    Attributes:
        settings: Planner settings (roll length, join overlaps, tolerance).
        selector: Strip selector used to stack strips up the wall height.
    """

    def __init__(
        self,
        settings: PlannerSettings | None = None,
        selector: StripWidthSelector | None = None,
    ) -> None:
        self.settings = settings or PlannerSettings()
        self.selector = selector or StripWidthSelector(self.settings)

    def groupings(self, count: int) -> list[Grouping]:
        """Every grouping of a cyclic loop of ``count`` segments considered.

        Order: the whole loop, each segment alone, every two-arc cut, every
        three-arc cut, then every four-arc cut for loops longer than four
        walls. Duplicates (e.g. two arcs of a two-wall loop) appear once.
        """
        if count <= 0:
            return []

        ordered: list[Grouping] = [(tuple(range(count)),)]
        ordered.append(tuple((i,) for i in range(count)))

        for first in range(count):
            for second in range(first + 1, count):
                ordered.append(_arcs_from_cuts(count, (first, second)))

        for first in range(count):
            for second in range(first + 1, count):
                for third in range(second + 1, count):
                    ordered.append(_arcs_from_cuts(count, (first, second, third)))

        if count > 4:
            for first in range(count):
                for second in range(first + 1, count):
                    for third in range(second + 1, count):
                        for fourth in range(third + 1, count):
                            ordered.append(
                                _arcs_from_cuts(count, (first, second, third, fourth))
                            )

        unique: list[Grouping] = []
        seen: set[Grouping] = set()
        for grouping in ordered:
            if grouping not in seen:
                seen.add(grouping)
                unique.append(grouping)
        return unique

    def required_strip_count(self, perimeter: float, join_overlap: float) -> int:
        """Fewest roll-length strips that wrap a loop of ``perimeter``.

        Each strip carries one join overlap, so ``c`` strips suffice when
        ``perimeter + c * join_overlap <= c * roll_length``.
        """
        if perimeter <= 0:
            return 0
        usable = self.settings.roll_length - join_overlap
        if usable <= 0:
            raise ValueError("Join overlap must be shorter than the roll length")
        return max(1, math.ceil(perimeter / usable - COVER_EPSILON))

    def _shares(
        self,
        bases: Sequence[float],
        widths: Sequence[RollWidth],
        join_overlap: float,
        offcuts: Mapping[RollWidth, Sequence[float]],
    ) -> tuple[list[float], bool]:
        count = len(bases)
        if count == 1:
            return [join_overlap], False

        total = count * join_overlap
        if count == 2:
            roll = self.settings.roll_length
            tolerance = self.settings.offcut_tolerance
            for matched in (0, 1):
                other = 1 - matched
                fits_offcut = any(
                    abs(offcut - bases[matched]) <= tolerance
                    for offcut in offcuts.get(widths[matched], ())
                )
                if fits_offcut and bases[other] + total <= roll + COVER_EPSILON:
                    shares = [0.0, 0.0]
                    shares[other] = total
                    return shares, True
            return [join_overlap, join_overlap], False

        shares = [0.0] * count
        for left in range(count):
            right = (left + 1) % count
            left_width = self.settings.width_of(widths[left])
            right_width = self.settings.width_of(widths[right])
            if left_width != right_width:
                carrier = left if left_width < right_width else right
            else:
                carrier = left if bases[left] >= bases[right] else right
            shares[carrier] += join_overlap
        return shares, False

    def build(
        self,
        surface: Surface,
        segments: Sequence[WallSegment],
        grouping: Grouping,
        widths: Sequence[RollWidth],
        join_overlap: float,
        offcuts: Mapping[RollWidth, Sequence[float]] | None = None,
        enforce_roll_length: bool = True,
    ) -> WallPartition | None:
        """Turn a grouping into a partition, or None if a strip overflows a roll.

        Raises:
            ValueError: If ``join_overlap`` is outside the configured
                join overlap range.
        """
        low, high = self.settings.join_overlap_min, self.settings.join_overlap_max
        if not low - COVER_EPSILON <= join_overlap <= high + COVER_EPSILON:
            raise ValueError(
                f"Join overlap {join_overlap:.3f} m outside {low:.3f}-{high:.3f} m"
            )
        bases = [sum(segments[i].length for i in group) for group in grouping]
        shares, is_offcut_split = self._shares(bases, widths, join_overlap, offcuts or {})

        strips: list[WallStrip] = []
        for group, base, share, width in zip(grouping, bases, shares, widths):
            if enforce_roll_length and base + share > self.settings.roll_length + COVER_EPSILON:
                return None
            stacked = self.selector.strips_for_width(
                width, surface.cover_width, surface.min_overlap, surface.max_overlap
            )
            strips.append(
                WallStrip(
                    segment_indices=group,
                    label=_arc_label(segments, group),
                    base_length=base,
                    join_overlap_share=share,
                    width=width,
                    horizontal_count=stacked.count,
                    horizontal_overlap=stacked.overlap,
                    edge_waste=stacked.edge_waste,
                )
            )
        return WallPartition(
            strips=tuple(strips),
            join_overlap=join_overlap,
            is_offcut_split=is_offcut_split,
        )

    def _build_fitting(
        self,
        surface: Surface,
        segments: Sequence[WallSegment],
        grouping: Grouping,
        widths: Sequence[RollWidth],
        offcuts: Mapping[RollWidth, Sequence[float]],
    ) -> WallPartition | None:
        # The tighter join overlap is only used when the default overflows a roll.
        for overlap in (self.settings.join_overlap_default, self.settings.join_overlap_min):
            partition = self.build(surface, segments, grouping, widths, overlap, offcuts)
            if partition is not None:
                return partition
        return None

    def candidates(
        self,
        surface: Surface,
        segments: Sequence[WallSegment],
        uniform_widths: Sequence[RollWidth],
        split_widths: bool = False,
        offcuts: Mapping[RollWidth, Sequence[float]] | None = None,
    ) -> list[WallPartition]:
        """All feasible partitions for the given width options.

        Args:
            surface: The wall loop surface (cover height and overlaps).
            segments: Ordered wall segments of the loop.
            uniform_widths: Widths tried for every strip of a partition.
            split_widths: Also try narrow/wide and wide/narrow on two-arc
                partitions.
            offcuts: Reusable offcut lengths from other strips, by width.

        Returns:
            Partitions in enumeration order; empty if the loop is degenerate.
        """
        if not segments or not surface.is_coverable:
            return []

        offcuts = offcuts or {}
        perimeter = sum(segment.length for segment in segments)
        minimum = self.required_strip_count(perimeter, self.settings.join_overlap_min)
        found: list[WallPartition] = []
        skipped = 0
        for grouping in self.groupings(len(segments)):
            if len(grouping) < minimum:
                skipped += 1
                continue
            options = [tuple([width] * len(grouping)) for width in uniform_widths]
            if split_widths and len(grouping) == 2:
                options.extend(
                    [
                        (RollWidth.NARROW, RollWidth.WIDE),
                        (RollWidth.WIDE, RollWidth.NARROW),
                    ]
                )
            for widths in options:
                partition = self._build_fitting(surface, segments, grouping, widths, offcuts)
                if partition is not None:
                    found.append(partition)

        logger.debug(
            "Wall loop of %d segments: %d feasible partitions, %d groupings "
            "with fewer than %d strips skipped",
            len(segments),
            len(found),
            skipped,
            minimum,
        )
        return found

    def baseline(
        self,
        surface: Surface,
        segments: Sequence[WallSegment],
        width: RollWidth,
    ) -> WallPartition:
        """Single strip around the whole loop, regardless of roll length."""
        if not segments or not surface.is_coverable:
            return WallPartition(strips=(), join_overlap=0.0)
        partition = self.build(
            surface,
            segments,
            (tuple(range(len(segments))),),
            (width,),
            self.settings.join_overlap_default,
            enforce_roll_length=False,
        )
        assert partition is not None
        return partition
