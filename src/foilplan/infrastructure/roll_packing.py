"""Roll packing data models and algorithms for membrane strip cutting.

This module provides data structures for representing roll allocations,
reusable offcuts and packing results, and the RollPacker that assigns
strips to finite-length rolls.

Packing runs per roll width. Wall strips are first paired with floor
strips when the two together fit one roll (a wall strip often fills the
offcut a floor strip leaves behind); the remaining strips are packed
first-fit decreasing.

All result dataclasses are frozen (immutable) to ensure thread safety and
hashability.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

from foilplan.domain import (
    MixConfiguration,
    PlannerSettings,
    RollWidth,
    StripRef,
    StripRole,
)

logger = logging.getLogger(__name__)

# Slack allowed when comparing strip lengths against the roll length
LENGTH_EPSILON = 1e-9

# Rolls are filled in this order so wide rolls get the lowest numbers
WIDTH_ORDER: tuple[RollWidth, ...] = (RollWidth.WIDE, RollWidth.NARROW)


@dataclass(frozen=True)
class RollAllocation:
    """One physical roll and the strips cut from it.

    Attributes:
        roll_number: Sequential number within its width class, from 1.
        width: Roll width class.
        metric_width: Roll width in metres.
        roll_length: Stock length of the roll in metres.
        strips: Strips cut from this roll, in cutting order.
    """

    roll_number: int
    width: RollWidth
    metric_width: float
    roll_length: float
    strips: tuple[StripRef, ...]

    def __post_init__(self) -> None:
        if self.roll_number < 1:
            raise ValueError("Roll number must be at least 1")
        if self.used_length > self.roll_length + LENGTH_EPSILON:
            raise ValueError(
                f"Strips need {self.used_length:.2f} m but the roll holds "
                f"{self.roll_length:.2f} m"
            )

    @property
    def used_length(self) -> float:
        return sum(strip.length for strip in self.strips)

    @property
    def leftover(self) -> float:
        return max(0.0, self.roll_length - self.used_length)

    @property
    def leftover_area(self) -> float:
        return self.leftover * self.metric_width

    @property
    def roll_area(self) -> float:
        return self.roll_length * self.metric_width

    @property
    def surface_keys(self) -> tuple[str, ...]:
        """Distinct surfaces served by this roll, in cutting order."""
        return tuple(dict.fromkeys(strip.surface_key for strip in self.strips))


@dataclass(frozen=True)
class ReusableOffcut:
    """A roll-end leftover long enough to be used on another job.

    Attributes:
        roll_number: Roll the offcut remains on.
        width: Roll width class.
        length: Offcut length in metres, rounded to 0.1 m.
        area: Offcut area in square metres, rounded to 0.01 m2.
    """

    roll_number: int
    width: RollWidth
    length: float
    area: float

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError("Offcut length must be positive")


@dataclass(frozen=True)
class PackingResult:
    """Complete result of roll packing.

    Attributes:
        rolls: Roll allocations, wide rolls first, each class numbered from 1.
        min_reusable_offcut: Leftover length from which an offcut is reusable.
    """

    rolls: tuple[RollAllocation, ...]
    min_reusable_offcut: float = 2.0

    def rolls_of(self, width: RollWidth) -> tuple[RollAllocation, ...]:
        return tuple(roll for roll in self.rolls if roll.width == width)

    def roll_count(self, width: RollWidth) -> int:
        return len(self.rolls_of(width))

    @property
    def total_rolls(self) -> int:
        return len(self.rolls)

    @property
    def ordered_area(self) -> float:
        """Area of all rolls to order."""
        return sum(roll.roll_area for roll in self.rolls)

    @property
    def used_area(self) -> float:
        return sum(roll.used_length * roll.metric_width for roll in self.rolls)

    def is_reusable(self, roll: RollAllocation) -> bool:
        return roll.leftover >= self.min_reusable_offcut

    @property
    def reusable_offcut_area(self) -> float:
        return sum(roll.leftover_area for roll in self.rolls if self.is_reusable(roll))

    @property
    def unusable_waste_area(self) -> float:
        """Roll-end leftovers too short to reuse."""
        return sum(
            roll.leftover_area for roll in self.rolls if not self.is_reusable(roll)
        )

    @property
    def offcuts(self) -> tuple[ReusableOffcut, ...]:
        return tuple(
            ReusableOffcut(
                roll_number=roll.roll_number,
                width=roll.width,
                length=round(roll.leftover, 1),
                area=round(roll.leftover_area, 2),
            )
            for roll in self.rolls
            if self.is_reusable(roll)
        )


@dataclass
class _RollState:
    """Internal state for a roll while strips are being assigned."""

    strips: list[StripRef] = field(default_factory=list)
    used: float = 0.0

    def add(self, strip: StripRef) -> None:
        self.strips.append(strip)
        self.used += strip.length


class RollPacker:
    """Assigns strips to finite-length rolls, one width class at a time.

    Attributes:
        settings: Planner settings supplying roll length, roll widths, the
            reusable offcut threshold and the join overlap for split strips.
    """

    def __init__(self, settings: PlannerSettings | None = None) -> None:
        """Initialize the packer.

        Args:
            settings: Planner settings; defaults are used when omitted.
        """
        self.settings = settings or PlannerSettings()

    def pack(self, strips: Sequence[StripRef]) -> PackingResult:
        """Pack strips into rolls, minimizing the roll count per width.

        Strips longer than a roll are first split into roll-length pieces
        joined with the regular join overlap.

        Args:
            strips: Strips of all surfaces and widths.

        Returns:
            PackingResult with rolls numbered sequentially per width class.
        """
        threshold = self.settings.min_reusable_offcut
        if not strips:
            return PackingResult(rolls=(), min_reusable_offcut=threshold)

        pieces = self._split_oversized_strips(strips)
        groups = self._group_by_width(pieces)

        rolls: list[RollAllocation] = []
        for width in WIDTH_ORDER:
            group = groups.get(width)
            if not group:
                continue
            states = self._pack_width(group)
            metric = self.settings.width_of(width)
            for number, state in enumerate(states, start=1):
                rolls.append(
                    RollAllocation(
                        roll_number=number,
                        width=width,
                        metric_width=metric,
                        roll_length=self.settings.roll_length,
                        strips=tuple(state.strips),
                    )
                )
            logger.debug(
                "%s rolls: %d strips -> %d rolls", width.value, len(group), len(states)
            )

        return PackingResult(rolls=tuple(rolls), min_reusable_offcut=threshold)

    def _group_by_width(
        self, strips: Sequence[StripRef]
    ) -> dict[RollWidth, list[StripRef]]:
        groups: dict[RollWidth, list[StripRef]] = {}
        for strip in strips:
            if strip.width not in groups:
                groups[strip.width] = []
            groups[strip.width].append(strip)
        return groups

    def _split_oversized_strips(self, strips: Sequence[StripRef]) -> list[StripRef]:
        """Split strips longer than a roll into joined roll-length pieces.

        ``n`` pieces joined with overlap ``o`` cover ``n * L - (n - 1) * o``,
        so a strip of length ``s`` needs ``ceil((s - o) / (L - o))`` pieces,
        never fewer than two and never leaving a last piece over a roll.
        """
        roll = self.settings.roll_length
        overlap = self.settings.join_overlap_default
        result: list[StripRef] = []
        for strip in strips:
            if strip.length <= roll + LENGTH_EPSILON:
                result.append(strip)
                continue

            count = max(
                2, math.ceil((strip.length - overlap) / (roll - overlap) - LENGTH_EPSILON)
            )
            if strip.length - count * (roll - overlap) - overlap > LENGTH_EPSILON:
                count += 1
            last = strip.length + (count - 1) * overlap - (count - 1) * roll
            logger.debug(
                "Splitting %s (%.2f m) into %d pieces", strip.label, strip.length, count
            )
            for index in range(count):
                result.append(
                    StripRef(
                        surface_key=strip.surface_key,
                        label=f"{strip.label} #{index + 1}",
                        length=roll if index < count - 1 else last,
                        width=strip.width,
                        role=strip.role,
                    )
                )
        return result

    def _pack_width(self, strips: list[StripRef]) -> list[_RollState]:
        roll = self.settings.roll_length
        rolls, remaining = self._pair_walls_with_floors(strips)

        for strip in sorted(remaining, key=lambda s: s.length, reverse=True):
            for state in rolls:
                if state.used + strip.length <= roll + LENGTH_EPSILON:
                    state.add(strip)
                    break
            else:
                state = _RollState()
                state.add(strip)
                rolls.append(state)
        return rolls

    def _pair_walls_with_floors(
        self, strips: list[StripRef]
    ) -> tuple[list[_RollState], list[StripRef]]:
        """Greedy pairing of wall and floor strips into shared rolls.

        Repeatedly takes the wall/floor pair with the largest combined
        length that still fits one roll; the first such pair found wins ties.

        Returns:
            The paired rolls and the strips left unpaired, in input order.
        """
        roll = self.settings.roll_length
        walls = [s for s in strips if s.role == StripRole.WALL]
        floors = [s for s in strips if s.role == StripRole.FLOOR]
        others = [s for s in strips if s.role == StripRole.OTHER]
        rolls: list[_RollState] = []

        while walls and floors:
            best: tuple[int, int, float] | None = None
            for wall_index, wall in enumerate(walls):
                for floor_index, floor in enumerate(floors):
                    combined = wall.length + floor.length
                    if combined > roll + LENGTH_EPSILON:
                        continue
                    if best is None or combined > best[2]:
                        best = (wall_index, floor_index, combined)
            if best is None:
                break

            wall = walls.pop(best[0])
            floor = floors.pop(best[1])
            state = _RollState()
            state.add(floor)
            state.add(wall)
            rolls.append(state)
            logger.debug(
                "Paired %s with %s (%.2f m)", wall.label, floor.label, best[2]
            )
        return rolls, walls + floors + others


class RollPackingService:
    """Packs the strips of a mix configuration.

    Attributes:
        settings: Planner settings.
        packer: RollPacker instance doing the actual packing.
    """

    def __init__(self, settings: PlannerSettings | None = None) -> None:
        self.settings = settings or PlannerSettings()
        self.packer = RollPacker(self.settings)

    def pack_configuration(
        self,
        config: MixConfiguration,
        keys: frozenset[str] | None = None,
    ) -> PackingResult:
        """Pack every strip of a configuration, optionally a subset of surfaces."""
        strips = config.strip_refs(keys)
        logger.info(
            "Packing %d strips from %d surfaces",
            len(strips),
            len(config.plans) if keys is None else len(keys),
        )
        return self.packer.pack(strips)
