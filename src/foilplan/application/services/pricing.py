"""Priceable membrane areas for an offer.

PricingAggregator splits a MixConfiguration into the main and structural
membrane pools and reports, per pool, the area to charge and the area lost
in welds. The charged area is the membrane cut into strips, less edge trim
wide and long enough to reuse, plus roll-end waste too short to reuse.
Each pool is packed on its own because the two pools are ordered as
different products.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from foilplan.domain import (
    FoilAssignment,
    JointKind,
    MixConfiguration,
    PlannerSettings,
    StripPlan,
)
from foilplan.infrastructure.roll_packing import RollPacker

logger = logging.getLogger(__name__)

# Keeps exact whole areas from being rounded up to the next square metre
AREA_EPSILON = 1e-9


@dataclass(frozen=True)
class PricingArea:
    """Areas to charge for one planned vessel.

    Attributes:
        main_area: Main membrane area in whole square metres.
        main_weld_area: Main membrane lost in overlaps, to 0.1 m2.
        structural_area: Structural membrane area in whole square metres.
        structural_weld_area: Structural membrane lost in overlaps, to 0.1 m2.
        total_area: Sum of the two pool areas.
    """

    main_area: int
    main_weld_area: float
    structural_area: int
    structural_weld_area: float
    total_area: int


@dataclass(frozen=True)
class SurfaceDetail:
    """Area breakdown of one surface."""

    key: str
    label: str
    foil_assignment: FoilAssignment
    cover_area: float
    foil_area: float
    weld_area: float
    edge_waste_area: float
    reusable_edge_area: float


class PricingAggregator:
    """Computes priceable areas from a mix configuration.

    Attributes:
        settings: Planner settings used for widths and thresholds.
        packer: Packer used to find each pool's roll-end waste.
    """

    def __init__(
        self,
        settings: PlannerSettings | None = None,
        packer: RollPacker | None = None,
    ) -> None:
        self.settings = settings or PlannerSettings()
        self.packer = packer or RollPacker(self.settings)

    def calculate(self, config: MixConfiguration) -> PricingArea:
        """Charged and weld areas per membrane pool."""
        main_area, main_weld = self._pool(config, FoilAssignment.MAIN)
        structural_area, structural_weld = self._pool(config, FoilAssignment.STRUCTURAL)
        result = PricingArea(
            main_area=main_area,
            main_weld_area=main_weld,
            structural_area=structural_area,
            structural_weld_area=structural_weld,
            total_area=main_area + structural_area,
        )
        logger.info(
            "Pricing area: main %d m2, structural %d m2",
            result.main_area,
            result.structural_area,
        )
        return result

    def surface_details(self, config: MixConfiguration) -> list[SurfaceDetail]:
        """Per-surface breakdown in configuration order."""
        return [
            SurfaceDetail(
                key=plan.key,
                label=plan.surface.label,
                foil_assignment=plan.surface.foil_assignment,
                cover_area=round(plan.surface.cover_area, 2),
                foil_area=round(config.material_area_of(plan, self.settings), 2),
                weld_area=round(self.weld_area(config, plan), 2),
                edge_waste_area=round(config.edge_waste_area_of(plan), 2),
                reusable_edge_area=round(self.reusable_edge_area(config, plan), 2),
            )
            for plan in config.plans
        ]

    @staticmethod
    def butt_joint_length(config: MixConfiguration) -> float:
        """Total length of butt welds between adjacent strips."""
        return sum(
            max(0, plan.strip_count - 1) * plan.surface.repetition_count * plan.strip_length
            for plan in config.plans
            if plan.surface.joint_kind == JointKind.BUTT
        )

    def weld_area(self, config: MixConfiguration, plan: StripPlan) -> float:
        """Membrane area hidden in the overlaps of one surface."""
        partition = config.wall_partition
        if plan.surface.is_perimeter and partition is not None:
            stacked = sum(
                (strip.horizontal_count - 1) * strip.horizontal_overlap * strip.length
                for strip in partition.strips
            )
            seams = partition.strip_count * partition.join_overlap * plan.surface.cover_width
            return stacked + seams
        if plan.surface.joint_kind == JointKind.BUTT or plan.strip_count < 2:
            return 0.0
        return (
            (plan.strip_count - 1)
            * plan.surface.repetition_count
            * plan.overlap
            * plan.strip_length
        )

    def reusable_edge_area(self, config: MixConfiguration, plan: StripPlan) -> float:
        """Edge trim wide and long enough to be cut into another strip."""
        min_width = self.settings.reusable_edge_width
        min_length = self.settings.min_reusable_offcut
        partition = config.wall_partition
        if plan.surface.is_perimeter and partition is not None:
            return sum(
                strip.edge_waste * strip.length
                for strip in partition.strips
                if strip.edge_waste >= min_width and strip.length >= min_length
            )
        if plan.edge_waste >= min_width and plan.strip_length >= min_length:
            return plan.edge_waste_area
        return 0.0

    def _pool(
        self, config: MixConfiguration, assignment: FoilAssignment
    ) -> tuple[int, float]:
        plans = [p for p in config.plans if p.surface.foil_assignment == assignment]
        if not plans:
            return 0, 0.0

        strip_area = sum(config.material_area_of(p, self.settings) for p in plans)
        weld = sum(self.weld_area(config, p) for p in plans)
        reusable = sum(self.reusable_edge_area(config, p) for p in plans)

        keys = frozenset(p.key for p in plans)
        packing = self.packer.pack(config.strip_refs(keys))
        charged = strip_area - reusable + packing.unusable_waste_area

        logger.debug(
            "%s pool: strips %.2f, reusable edge %.2f, roll-end waste %.2f",
            assignment.value,
            strip_area,
            reusable,
            packing.unusable_waste_area,
        )
        return max(0, math.ceil(charged - AREA_EPSILON)), round(weld, 1)
