"""Library entry points for membrane planning.

The functions here are thin wrappers that build the services for one
call from explicit PlannerSettings (defaults when omitted). Nothing is
cached between calls.

Example:
    >>> from foilplan import VesselGeometry, MembraneSubtype, OptimizationPriority
    >>> from foilplan import optimize_mix
    >>> config = optimize_mix(
    ...     VesselGeometry(length=8.0, width=4.0, depth=1.5),
    ...     MembraneSubtype.SINGLE_COLOR,
    ...     OptimizationPriority.MINIMIZE_WASTE,
    ... )
    >>> config.total_rolls_wide
    1
"""

from __future__ import annotations

from foilplan.application.dtos import ComparisonOutput, PlanOutput
from foilplan.application.services.mix_optimizer import MixOptimizer
from foilplan.application.services.pricing import PricingAggregator, PricingArea
from foilplan.domain import (
    MembraneSubtype,
    MixConfiguration,
    OptimizationPriority,
    PlannerSettings,
    RollWidth,
    Surface,
    SurfaceModel,
    VesselGeometry,
    WallLayout,
)
from foilplan.infrastructure.roll_packing import RollAllocation, RollPackingService


def derive_surfaces(
    geometry: VesselGeometry,
    settings: PlannerSettings | None = None,
    layout: WallLayout = WallLayout.PERIMETER,
    subtype: MembraneSubtype = MembraneSubtype.SINGLE_COLOR,
) -> list[Surface]:
    """Surfaces of the vessel that need membrane, main surfaces first."""
    return SurfaceModel(settings).derive(geometry, subtype, layout)


def optimize_mix(
    geometry: VesselGeometry,
    subtype: MembraneSubtype,
    priority: OptimizationPriority,
    settings: PlannerSettings | None = None,
    layout: WallLayout = WallLayout.PERIMETER,
) -> MixConfiguration:
    """Best roll width mix for the vessel under a priority."""
    return MixOptimizer(settings).optimize(geometry, subtype, priority, layout)


def update_surface_width(
    config: MixConfiguration,
    surface_key: str,
    new_width: RollWidth,
    geometry: VesselGeometry,
    subtype: MembraneSubtype,
    settings: PlannerSettings | None = None,
) -> MixConfiguration:
    """Copy of ``config`` with one surface forced to a roll width.

    Raises:
        KeyError: If ``surface_key`` is not part of the configuration.
    """
    return MixOptimizer(settings).update_surface_width(
        config, surface_key, new_width, geometry, subtype
    )


def pack_rolls(
    config: MixConfiguration,
    geometry: VesselGeometry,
    settings: PlannerSettings | None = None,
) -> list[RollAllocation]:
    """Rolls to order with the strips cut from each.

    ``geometry`` is accepted for symmetry with the other entry points; the
    strips are fully described by the configuration.
    """
    return list(RollPackingService(settings).pack_configuration(config).rolls)


def calculate_pricing_area(
    config: MixConfiguration,
    geometry: VesselGeometry,
    subtype: MembraneSubtype,
    settings: PlannerSettings | None = None,
) -> PricingArea:
    """Charged and weld areas per membrane pool.

    Raises:
        ValueError: If ``subtype`` is not the membrane the plan was made for.
            Widths, stacking and butt welds depend on the subtype, so such a
            plan must be re-optimized before it is priced.
    """
    if subtype != config.subtype:
        raise ValueError(
            f"Cannot price {subtype.value} membrane with a plan made for "
            f"{config.subtype.value}"
        )
    return PricingAggregator(settings).calculate(config)


class PlanVesselCommand:
    """Runs the full planning pipeline for one vessel.

    Attributes:
        settings: Planner settings shared by every service.
        optimizer: Width mix optimizer.
        packing_service: Roll packing service.
        pricing: Pricing aggregator.
    """

    def __init__(self, settings: PlannerSettings | None = None) -> None:
        self.settings = settings or PlannerSettings()
        self.optimizer = MixOptimizer(self.settings)
        self.packing_service = RollPackingService(self.settings)
        self.pricing = PricingAggregator(self.settings)

    def execute(
        self,
        geometry: VesselGeometry,
        subtype: MembraneSubtype,
        priority: OptimizationPriority,
        layout: WallLayout = WallLayout.PERIMETER,
    ) -> PlanOutput:
        """Plan, pack and price the vessel."""
        configuration = self.optimizer.optimize(geometry, subtype, priority, layout)
        packing = self.packing_service.pack_configuration(configuration)
        return PlanOutput(
            geometry=geometry,
            settings=self.settings,
            layout=layout,
            configuration=configuration,
            packing=packing,
            pricing=self.pricing.calculate(configuration),
            surface_details=self.pricing.surface_details(configuration),
            butt_joint_length=self.pricing.butt_joint_length(configuration),
        )

    def compare(
        self,
        geometry: VesselGeometry,
        subtype: MembraneSubtype,
        priority: OptimizationPriority,
        layout: WallLayout = WallLayout.PERIMETER,
    ) -> ComparisonOutput:
        """Plan the vessel with every width strategy."""
        return ComparisonOutput(
            geometry=geometry,
            comparisons=self.optimizer.compare_width_strategies(
                geometry, subtype, priority, layout
            ),
        )
