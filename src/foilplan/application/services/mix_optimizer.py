"""Roll width mix optimization for a complete vessel.

MixOptimizer coordinates the domain services into one MixConfiguration:

1. SurfaceModel derives the surfaces from the vessel geometry.
2. StripWidthSelector picks widths and strip counts for every surface
   except the wall loop, searching wide/narrow mixes on the floor.
3. PerimeterPartitioner enumerates wall loop partitions; each candidate is
   packed together with the other surfaces' strips and ranked by the rolls
   it makes the whole job order.
4. RollPacker packs the final strips; roll counts and waste come from the
   packing, not from dividing strip lengths by the roll length.

Every call recomputes from scratch and returns a fresh configuration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from foilplan.domain import (
    MembraneSubtype,
    MixConfiguration,
    OptimizationPriority,
    PerimeterPartitioner,
    PlannerSettings,
    RollWidth,
    SingleWidth,
    StripEvaluation,
    StripPlan,
    StripRef,
    StripWidthSelector,
    Surface,
    SurfaceModel,
    VesselGeometry,
    WallLayout,
    WallPartition,
    WallSegment,
)
from foilplan.domain.services.strip_width import quantize
from foilplan.infrastructure.roll_packing import PackingResult, RollPacker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WidthComparison:
    """Outcome of planning with one width strategy.

    Attributes:
        strategy: "narrow-only", "wide-only" or "mixed".
        configuration: The resulting mix configuration.
    """

    strategy: str
    configuration: MixConfiguration

    @property
    def total_rolls_narrow(self) -> int:
        return self.configuration.total_rolls_narrow

    @property
    def total_rolls_wide(self) -> int:
        return self.configuration.total_rolls_wide

    @property
    def ordered_area(self) -> float:
        return self.configuration.ordered_area

    @property
    def total_waste_area(self) -> float:
        return self.configuration.total_waste_area


class MixOptimizer:
    """Plans strips for every surface and totals the rolls to order.

    Attributes:
        settings: Planner settings shared by all collaborating services.
        surface_model: Derives surfaces and wall segments.
        selector: Chooses widths for individual surfaces.
        partitioner: Enumerates wall loop partitions.
        packer: Packs strips into rolls.
    """

    def __init__(
        self,
        settings: PlannerSettings | None = None,
        packer: RollPacker | None = None,
    ) -> None:
        self.settings = settings or PlannerSettings()
        self.surface_model = SurfaceModel(self.settings)
        self.selector = StripWidthSelector(self.settings)
        self.partitioner = PerimeterPartitioner(self.settings, self.selector)
        self.packer = packer or RollPacker(self.settings)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def optimize(
        self,
        geometry: VesselGeometry,
        subtype: MembraneSubtype,
        priority: OptimizationPriority,
        layout: WallLayout = WallLayout.PERIMETER,
    ) -> MixConfiguration:
        """Plan every surface of the vessel under one priority."""
        config = self._plan(geometry, subtype, priority, layout, restrict=None)
        logger.info(
            "Optimized %s membrane (%s): %d narrow + %d wide rolls, %.1f%% waste",
            subtype.value,
            priority.value,
            config.total_rolls_narrow,
            config.total_rolls_wide,
            config.waste_percentage,
        )
        return config

    def update_surface_width(
        self,
        config: MixConfiguration,
        surface_key: str,
        new_width: RollWidth,
        geometry: VesselGeometry,
        subtype: MembraneSubtype,
    ) -> MixConfiguration:
        """Force one surface to a roll width and recompute the totals.

        Widths the subtype or the surface's assignment does not allow are
        coerced to narrow; the plan is still flagged as a manual override.
        Changing any other surface re-plans the wall loop, since the offcuts
        that surface leaves decide how the loop is split.

        Raises:
            KeyError: If the configuration has no surface ``surface_key``.
        """
        current = config.plan_for(surface_key)
        layout = (
            WallLayout.PERIMETER
            if any(plan.surface.is_perimeter for plan in config.plans)
            else WallLayout.SEPARATE
        )
        surfaces = {
            surface.key: surface
            for surface in self.surface_model.derive(geometry, subtype, layout)
        }
        surface = surfaces.get(surface_key, current.surface)

        width = new_width
        if surface.is_structural or self.settings.is_narrow_only(subtype):
            width = RollWidth.NARROW
        if width != new_width:
            logger.info(
                "%s width %s not allowed for %s membrane, using %s",
                surface_key,
                new_width.value,
                subtype.value,
                width.value,
            )

        wall_partition = config.wall_partition
        segments = self.surface_model.wall_segments(geometry)
        if surface.is_perimeter:
            others = [
                ref
                for plan in config.plans
                if plan.key != surface_key
                for ref in plan.strip_refs()
            ]
            wall_partition = self._choose_wall_partition(
                surface, segments, others, (width,), False, config.priority
            )
            plan = self._wall_plan(surface, wall_partition, manual=True)
        else:
            evaluation = self.selector.evaluate_surface(surface, SingleWidth(width))
            plan = self._surface_plan(surface, evaluation, width, manual=True)

        plans = tuple(plan if p.key == surface_key else p for p in config.plans)
        loop_plan = next((p for p in plans if p.surface.is_perimeter), None)
        if loop_plan is not None and not surface.is_perimeter:
            # Offcuts left by the changed surface decide the wall split.
            loop = surfaces.get(loop_plan.key, loop_plan.surface)
            others = [
                ref for p in plans if p.key != loop_plan.key for ref in p.strip_refs()
            ]
            widths, split_walls = self._current_wall_widths(
                loop_plan, wall_partition, geometry, subtype, config.priority
            )
            wall_partition = self._choose_wall_partition(
                loop, segments, others, widths, split_walls, config.priority
            )
            walls = self._wall_plan(
                loop, wall_partition, manual=loop_plan.is_manual_override
            )
            plans = tuple(walls if p.key == loop_plan.key else p for p in plans)

        return self._finalize(
            plans, wall_partition, subtype, config.priority, is_optimized=False
        )

    def compare_width_strategies(
        self,
        geometry: VesselGeometry,
        subtype: MembraneSubtype,
        priority: OptimizationPriority,
        layout: WallLayout = WallLayout.PERIMETER,
    ) -> list[WidthComparison]:
        """Plan the vessel narrow-only, wide-only and mixed.

        Structural surfaces stay narrow in every strategy; for narrow-only
        subtypes the wide-only strategy therefore equals narrow-only.
        """
        strategies: list[tuple[str, RollWidth | None]] = [
            ("narrow-only", RollWidth.NARROW),
            ("wide-only", RollWidth.WIDE),
            ("mixed", None),
        ]
        return [
            WidthComparison(
                strategy=name,
                configuration=self._plan(geometry, subtype, priority, layout, restrict),
            )
            for name, restrict in strategies
        ]

    # ------------------------------------------------------------------
    # Planning core
    # ------------------------------------------------------------------

    def _plan(
        self,
        geometry: VesselGeometry,
        subtype: MembraneSubtype,
        priority: OptimizationPriority,
        layout: WallLayout,
        restrict: RollWidth | None,
    ) -> MixConfiguration:
        surfaces = self.surface_model.derive(geometry, subtype, layout)
        wall_widths, split_walls = self._wall_widths(geometry, subtype, priority, restrict)

        plans: dict[str, StripPlan] = {}
        loop: Surface | None = None
        for surface in surfaces:
            if surface.is_perimeter:
                loop = surface
                continue
            if surface.is_wall:
                allowed = wall_widths
            else:
                allowed = self._allowed_widths(surface, subtype, restrict)
            evaluation = self.selector.select(
                surface, allowed, priority, include_mixes=surface.is_floor
            )
            plans[surface.key] = self._surface_plan(surface, evaluation, allowed[0])

        wall_partition: WallPartition | None = None
        if loop is not None:
            others = [ref for plan in plans.values() for ref in plan.strip_refs()]
            wall_partition = self._choose_wall_partition(
                loop,
                self.surface_model.wall_segments(geometry),
                others,
                wall_widths,
                split_walls,
                priority,
            )
            plans[loop.key] = self._wall_plan(loop, wall_partition)

        ordered_plans = tuple(plans[surface.key] for surface in surfaces)
        return self._finalize(ordered_plans, wall_partition, subtype, priority)

    def _allowed_widths(
        self,
        surface: Surface,
        subtype: MembraneSubtype,
        restrict: RollWidth | None,
    ) -> tuple[RollWidth, ...]:
        allowed = self.settings.allowed_widths(subtype, surface.is_structural)
        if restrict is None:
            return allowed
        return tuple(w for w in allowed if w == restrict) or (RollWidth.NARROW,)

    def _wall_widths(
        self,
        geometry: VesselGeometry,
        subtype: MembraneSubtype,
        priority: OptimizationPriority,
        restrict: RollWidth | None,
    ) -> tuple[tuple[RollWidth, ...], bool]:
        """Wall widths to consider and whether per-arc mixes are searched.

        Depth decides the wall width: up to ``single_width_depth`` narrow,
        up to ``wide_width_depth`` wide, deeper narrow again with two strips
        stacked up the wall. Only when the narrow width is chosen by depth
        and total material is minimized are the wide alternatives searched.
        """
        if self.settings.is_narrow_only(subtype):
            return (RollWidth.NARROW,), False
        if restrict is not None:
            return (restrict,), False
        depth = geometry.depth
        if depth > self.settings.wide_width_depth:
            return (RollWidth.NARROW,), False
        if depth > self.settings.single_width_depth:
            return (RollWidth.WIDE,), False
        if priority == OptimizationPriority.MINIMIZE_TOTAL_MATERIAL:
            return (RollWidth.NARROW, RollWidth.WIDE), True
        return (RollWidth.NARROW,), False

    def _current_wall_widths(
        self,
        loop_plan: StripPlan,
        partition: WallPartition | None,
        geometry: VesselGeometry,
        subtype: MembraneSubtype,
        priority: OptimizationPriority,
    ) -> tuple[tuple[RollWidth, ...], bool]:
        """Wall widths for re-planning the loop after another surface changed.

        A manually set wall width is kept; otherwise the depth rule applies.
        """
        if loop_plan.is_manual_override and partition is not None and partition.strips:
            return (partition.widths[0],), False
        return self._wall_widths(geometry, subtype, priority, None)

    def _reusable_offcuts(self, strips: Sequence[StripRef]) -> dict[RollWidth, list[float]]:
        roll = self.settings.roll_length
        offcuts: dict[RollWidth, list[float]] = {}
        for strip in strips:
            leftover = roll - strip.length
            if leftover >= self.settings.min_reusable_offcut:
                offcuts.setdefault(strip.width, []).append(leftover)
        return offcuts

    def _wall_candidate_key(
        self,
        partition: WallPartition,
        packing: PackingResult,
        priority: OptimizationPriority,
    ) -> tuple[int, ...]:
        """Ranking key for a wall partition; lower is better.

        Both priorities rank first by the roll area the whole job orders.
        minimize-waste then prefers fewer strips (fewer vertical welds),
        less unusable roll-end waste and evenly sized strips;
        minimize-total-material prefers less wall membrane first.
        """
        ordered = quantize(packing.ordered_area)
        waste = quantize(packing.unusable_waste_area)
        spread = quantize(partition.length_spread)
        strips = partition.physical_strip_count
        if priority == OptimizationPriority.MINIMIZE_TOTAL_MATERIAL:
            material = quantize(partition.material_area(self.settings))
            return (ordered, material, waste, strips, spread)
        return (ordered, strips, waste, spread)

    def _choose_wall_partition(
        self,
        surface: Surface,
        segments: Sequence[WallSegment],
        other_strips: Sequence[StripRef],
        widths: Sequence[RollWidth],
        split_widths: bool,
        priority: OptimizationPriority,
    ) -> WallPartition:
        candidates = self.partitioner.candidates(
            surface,
            segments,
            widths,
            split_widths=split_widths,
            offcuts=self._reusable_offcuts(other_strips),
        )
        if not candidates:
            if surface.is_coverable and segments:
                logger.warning(
                    "No wall partition fits the roll length, using one strip around %.2f m",
                    surface.strip_length,
                )
            return self.partitioner.baseline(surface, segments, widths[0])

        best: tuple[tuple[int, ...], WallPartition] | None = None
        for partition in candidates:
            packing = self.packer.pack(
                [*other_strips, *partition.strip_refs(surface.key)]
            )
            key = self._wall_candidate_key(partition, packing, priority)
            if best is None or key < best[0]:
                best = (key, partition)

        assert best is not None
        chosen = best[1]
        logger.debug(
            "Wall loop: %d strip(s) %s (%s), join overlap %.2f",
            chosen.strip_count,
            ", ".join(f"{s.label}={s.length:.2f}" for s in chosen.strips),
            "/".join(w.value for w in chosen.widths),
            chosen.join_overlap,
        )
        return chosen

    # ------------------------------------------------------------------
    # Plan assembly
    # ------------------------------------------------------------------

    @staticmethod
    def _surface_plan(
        surface: Surface,
        evaluation: StripEvaluation,
        nominal_width: RollWidth,
        manual: bool = False,
    ) -> StripPlan:
        assignment = evaluation.assignment
        if assignment is None:
            assignment = SingleWidth(nominal_width)
        return StripPlan(
            surface=surface,
            assignment=assignment,
            strip_count=evaluation.count,
            overlap=evaluation.overlap,
            edge_waste=evaluation.edge_waste,
            covered_width=evaluation.covered_width,
            material_width=evaluation.material_width,
            is_manual_override=manual,
        )

    def _wall_plan(
        self,
        surface: Surface,
        partition: WallPartition,
        manual: bool = False,
    ) -> StripPlan:
        if not partition.strips:
            return StripPlan(
                surface=surface,
                assignment=SingleWidth(RollWidth.NARROW),
                strip_count=0,
                is_manual_override=manual,
            )
        first = partition.strips[0]
        edge_waste = max(strip.edge_waste for strip in partition.strips)
        return StripPlan(
            surface=surface,
            assignment=partition.assignment,
            strip_count=partition.physical_strip_count,
            overlap=max(strip.horizontal_overlap for strip in partition.strips),
            edge_waste=edge_waste,
            covered_width=surface.cover_width + edge_waste,
            material_width=self.settings.width_of(first.width) * first.horizontal_count,
            is_manual_override=manual,
        )

    def _finalize(
        self,
        plans: tuple[StripPlan, ...],
        wall_partition: WallPartition | None,
        subtype: MembraneSubtype,
        priority: OptimizationPriority,
        is_optimized: bool = True,
    ) -> MixConfiguration:
        draft = MixConfiguration(
            plans=plans,
            wall_partition=wall_partition,
            subtype=subtype,
            priority=priority,
            is_optimized=is_optimized,
        )
        packing = self.packer.pack(draft.strip_refs())
        ordered = packing.ordered_area
        waste = draft.edge_waste_area + packing.unusable_waste_area
        return MixConfiguration(
            plans=plans,
            wall_partition=wall_partition,
            subtype=subtype,
            priority=priority,
            total_rolls_narrow=packing.roll_count(RollWidth.NARROW),
            total_rolls_wide=packing.roll_count(RollWidth.WIDE),
            ordered_area=ordered,
            total_waste_area=waste,
            reusable_offcut_area=packing.reusable_offcut_area,
            waste_percentage=(waste / ordered * 100) if ordered > 0 else 0.0,
            is_optimized=is_optimized,
        )
