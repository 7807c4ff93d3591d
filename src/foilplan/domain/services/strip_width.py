"""Strip count and roll width selection for a single surface.

This module provides StripWidthSelector, which works out how many strips
of which roll width cover a surface, and the overlap that leaves the least
edge waste. Single-width and mixed-width assignments go through the same
exact-fit routine (``evaluate``).

The exact-fit rule: with ``n`` strips of total width ``W`` covering
``cover``, the overlap that makes the strips meet the cover width exactly
is ``(W - cover) / (n - 1)``. Inside ``[min_overlap, max_overlap]`` that
overlap is used and nothing is wasted; above the range the overlap is
clamped to the maximum and the excess becomes edge waste.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from foilplan.domain.settings import PlannerSettings
from foilplan.domain.value_objects import (
    MixedWidth,
    OptimizationPriority,
    RollWidth,
    SingleWidth,
    StripAssignment,
    Surface,
)

logger = logging.getLogger(__name__)

# Absorbs floating point noise in coverage and strip count arithmetic
COVER_EPSILON = 1e-9

# Areas closer than this compare as equal when ranking candidates
COMPARISON_QUANTUM = 1e-6


def quantize(value: float) -> int:
    """Integer bucket of a float for deterministic tie comparisons."""
    return round(value / COMPARISON_QUANTUM)


@dataclass(frozen=True)
class StripEvaluation:
    """Outcome of laying a list of strips side by side across a cover width.

    Attributes:
        widths: Roll width of every strip in laying order.
        covered_width: Width covered once overlaps are subtracted.
        material_width: Sum of all strip widths in metres.
        overlap: Overlap used at each join (0 for a single strip).
        edge_waste: Covered width beyond the requirement, trimmed off.
        valid: False when the strips cannot reach the cover width.
    """

    widths: tuple[RollWidth, ...]
    covered_width: float
    material_width: float
    overlap: float
    edge_waste: float
    valid: bool = True

    @property
    def count(self) -> int:
        return len(self.widths)

    @property
    def is_empty(self) -> bool:
        return not self.widths

    @property
    def assignment(self) -> StripAssignment | None:
        """Width assignment describing these strips, None when empty."""
        if not self.widths:
            return None
        distinct = set(self.widths)
        if len(distinct) == 1:
            return SingleWidth(self.widths[0])
        parts: list[tuple[RollWidth, int]] = []
        for width in self.widths:
            if parts and parts[-1][0] == width:
                parts[-1] = (width, parts[-1][1] + 1)
            else:
                parts.append((width, 1))
        return MixedWidth(tuple(parts))

    def count_of(self, width: RollWidth) -> int:
        return sum(1 for w in self.widths if w == width)


EMPTY_EVALUATION = StripEvaluation(
    widths=(),
    covered_width=0.0,
    material_width=0.0,
    overlap=0.0,
    edge_waste=0.0,
)


class StripWidthSelector:
    """Chooses roll widths and strip counts for individual surfaces.

    Attributes:
        settings: Planner settings supplying the metric roll widths.
    """

    def __init__(self, settings: PlannerSettings | None = None) -> None:
        self.settings = settings or PlannerSettings()

    def evaluate(
        self,
        widths: Sequence[RollWidth],
        cover_width: float,
        min_overlap: float,
        max_overlap: float,
    ) -> StripEvaluation:
        """Lay the given strips across ``cover_width`` using the exact-fit rule."""
        if cover_width <= 0 or not widths:
            return EMPTY_EVALUATION

        metric = [self.settings.width_of(w) for w in widths]
        material = sum(metric)
        joins = len(metric) - 1

        if joins == 0:
            overlap = 0.0
            covered = material
        else:
            exact = (material - cover_width) / joins
            overlap = min(max(exact, min_overlap), max_overlap)
            covered = material - joins * overlap

        edge_waste = covered - cover_width
        if abs(edge_waste) < COVER_EPSILON:
            edge_waste = 0.0

        return StripEvaluation(
            widths=tuple(widths),
            covered_width=covered,
            material_width=material,
            overlap=overlap,
            edge_waste=max(0.0, edge_waste),
            valid=covered >= cover_width - COVER_EPSILON,
        )

    def required_count(self, width: RollWidth, cover_width: float, min_overlap: float) -> int:
        """Fewest strips of one width that cover ``cover_width``."""
        if cover_width <= 0:
            return 0
        metric = self.settings.width_of(width)
        if cover_width <= metric + COVER_EPSILON:
            return 1
        step = metric - min_overlap
        if step <= 0:
            raise ValueError(
                f"Overlap {min_overlap} leaves no net width on a {metric} m strip"
            )
        return 1 + math.ceil((cover_width - metric) / step - COVER_EPSILON)

    def strips_for_width(
        self,
        width: RollWidth,
        cover_width: float,
        min_overlap: float,
        max_overlap: float,
    ) -> StripEvaluation:
        """Cover ``cover_width`` with the fewest strips of a single width."""
        count = self.required_count(width, cover_width, min_overlap)
        return self.evaluate([width] * count, cover_width, min_overlap, max_overlap)

    def evaluate_surface(self, surface: Surface, assignment: StripAssignment) -> StripEvaluation:
        """Evaluate a width assignment against a surface.

        A SingleWidth uses the minimum strip count for its width; a
        MixedWidth is evaluated exactly as listed.
        """
        if not surface.is_coverable:
            return EMPTY_EVALUATION
        if isinstance(assignment, SingleWidth):
            return self.strips_for_width(
                assignment.width,
                surface.cover_width,
                surface.min_overlap,
                surface.max_overlap,
            )
        return self.evaluate(
            assignment.expand(),
            surface.cover_width,
            surface.min_overlap,
            surface.max_overlap,
        )

    def single_width_candidates(
        self, surface: Surface, allowed: Sequence[RollWidth]
    ) -> list[StripEvaluation]:
        return [self.evaluate_surface(surface, SingleWidth(width)) for width in allowed]

    def mixed_candidates(self, surface: Surface) -> list[StripEvaluation]:
        """Every valid wide/narrow split over the bounded strip count range.

        Counts run from ``ceil(cover / wide)`` to ``ceil(cover / narrow) + 2``;
        wide strips are laid first.
        """
        if not surface.is_coverable:
            return []
        cover = surface.cover_width
        lowest = max(1, math.ceil(cover / self.settings.wide_width - COVER_EPSILON))
        highest = math.ceil(cover / self.settings.narrow_width - COVER_EPSILON) + 2

        candidates: list[StripEvaluation] = []
        for count in range(lowest, highest + 1):
            for wide_count in range(count + 1):
                widths = [RollWidth.WIDE] * wide_count + [RollWidth.NARROW] * (
                    count - wide_count
                )
                evaluation = self.evaluate(
                    widths, cover, surface.min_overlap, surface.max_overlap
                )
                if evaluation.valid:
                    candidates.append(evaluation)

        logger.debug(
            "Mixed search for %s: %d valid of strip counts %d..%d",
            surface.key,
            len(candidates),
            lowest,
            highest,
        )
        return candidates

    @staticmethod
    def selection_key(
        evaluation: StripEvaluation,
        surface: Surface,
        priority: OptimizationPriority,
        settings: PlannerSettings,
    ) -> tuple[int, int, int]:
        """Ranking key; lower is better.

        minimize-waste: edge waste area, then strips, then material area.
        minimize-total-material: material area, then strips, then edge waste.
        """
        repeat = surface.repetition_count
        length = surface.strip_length
        waste_area = quantize(evaluation.edge_waste * length * repeat)
        material_area = quantize(evaluation.material_width * length * repeat)
        strips = evaluation.count * repeat
        if priority == OptimizationPriority.MINIMIZE_TOTAL_MATERIAL:
            return (material_area, strips, waste_area)
        return (waste_area, strips, material_area)

    def select(
        self,
        surface: Surface,
        allowed: Sequence[RollWidth],
        priority: OptimizationPriority,
        include_mixes: bool = False,
    ) -> StripEvaluation:
        """Best evaluation for a surface under a priority.

        Single widths are ranked first in ``allowed`` order, then mixes, so
        exact ties keep the earlier candidate.
        """
        if not surface.is_coverable:
            return EMPTY_EVALUATION

        candidates = [
            c for c in self.single_width_candidates(surface, allowed) if c.valid
        ]
        if include_mixes and len(allowed) > 1:
            candidates.extend(self.mixed_candidates(surface))

        if not candidates:
            logger.warning(
                "No valid strip layout for %s, falling back to narrow strips",
                surface.key,
            )
            return self.evaluate_surface(surface, SingleWidth(RollWidth.NARROW))

        best = min(
            candidates,
            key=lambda c: self.selection_key(c, surface, priority, self.settings),
        )
        logger.debug(
            "%s: %d strip(s) %s, overlap %.3f, edge waste %.3f",
            surface.key,
            best.count,
            "/".join(w.value for w in best.widths),
            best.overlap,
            best.edge_waste,
        )
        return best
