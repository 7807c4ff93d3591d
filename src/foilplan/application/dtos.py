"""Data transfer objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from foilplan.application.services.mix_optimizer import WidthComparison
from foilplan.application.services.pricing import PricingArea, SurfaceDetail
from foilplan.domain import (
    MixConfiguration,
    PlannerSettings,
    VesselGeometry,
    WallLayout,
)
from foilplan.infrastructure.roll_packing import PackingResult, ReusableOffcut


@dataclass
class PlanOutput:
    """Output DTO containing a complete planning run.

    Attributes:
        geometry: The planned vessel.
        settings: Planner settings the plan was made with.
        layout: Wall layout used.
        configuration: Per-surface strip plans and roll totals.
        packing: Rolls with the strips cut from each.
        pricing: Charged and weld areas per membrane pool.
        surface_details: Per-surface area breakdown.
        butt_joint_length: Total length of butt welds.
    """

    geometry: VesselGeometry
    settings: PlannerSettings
    layout: WallLayout
    configuration: MixConfiguration
    packing: PackingResult
    pricing: PricingArea
    surface_details: list[SurfaceDetail] = field(default_factory=list)
    butt_joint_length: float = 0.0

    @property
    def offcuts(self) -> tuple[ReusableOffcut, ...]:
        return self.packing.offcuts


@dataclass
class ComparisonOutput:
    """Output DTO for a width strategy comparison.

    Attributes:
        geometry: The planned vessel.
        comparisons: One entry per width strategy, narrow-only first.
    """

    geometry: VesselGeometry
    comparisons: list[WidthComparison] = field(default_factory=list)

    def best(self) -> WidthComparison | None:
        """Strategy ordering the least roll area; the first wins ties."""
        if not self.comparisons:
            return None
        return min(self.comparisons, key=lambda c: round(c.ordered_area, 6))
