"""Tests for MixOptimizer width selection, wall partitioning and roll totals.

Tests cover:
- Reference vessels planned under both priorities
- Depth-driven wall widths
- Subtype restrictions (narrow-only, butt-welded floors)
- Manual width overrides
- Width strategy comparison
"""

from __future__ import annotations

import pytest

from foilplan.application import MixOptimizer, pack_rolls
from foilplan.domain import (
    BasinSpec,
    MembraneSubtype,
    MixConfiguration,
    OptimizationPriority,
    PlannerSettings,
    RollWidth,
    VesselGeometry,
    WallLayout,
)

N = RollWidth.NARROW
W = RollWidth.WIDE
SINGLE = MembraneSubtype.SINGLE_COLOR
WASTE = OptimizationPriority.MINIMIZE_WASTE
MATERIAL = OptimizationPriority.MINIMIZE_TOTAL_MATERIAL


@pytest.fixture
def optimizer(settings: PlannerSettings) -> MixOptimizer:
    return MixOptimizer(settings)


@pytest.fixture
def family_config(optimizer: MixOptimizer, family_pool: VesselGeometry) -> MixConfiguration:
    return optimizer.optimize(family_pool, SINGLE, WASTE)


@pytest.mark.scenario
class TestFamilyPool:
    """10 x 5 x 1.5 m pool: mixed floor, walls split to use a floor offcut."""

    def test_floor_mixes_widths(self, family_config: MixConfiguration) -> None:
        floor = family_config.plan_for("floor")
        assert floor.widths == (W, N, N)
        assert floor.edge_waste == pytest.approx(0.15)
        assert floor.overlap == pytest.approx(0.10)

    def test_walls_split_in_two(self, family_config: MixConfiguration) -> None:
        partition = family_config.wall_partition
        assert partition is not None
        assert partition.is_offcut_split
        assert [s.label for s in partition.strips] == ["A-B-C", "C-D-A"]
        assert [s.length for s in partition.strips] == pytest.approx([15.0, 15.2])
        assert partition.widths == (N, N)

    def test_roll_totals(self, family_config: MixConfiguration) -> None:
        assert family_config.total_rolls_narrow == 3
        assert family_config.total_rolls_wide == 1
        assert family_config.ordered_area == pytest.approx(175.0)

    def test_waste(self, family_config: MixConfiguration) -> None:
        assert family_config.total_waste_area == pytest.approx(1.5)
        assert family_config.waste_percentage == pytest.approx(1.5 / 175.0 * 100)

    def test_optimized_flag(self, family_config: MixConfiguration) -> None:
        assert family_config.is_optimized
        assert not any(plan.is_manual_override for plan in family_config.plans)

    def test_surface_order(self, family_config: MixConfiguration) -> None:
        assert family_config.surface_keys == ("floor", "walls")

    def test_totals_match_packed_rolls(
        self, family_config: MixConfiguration, family_pool: VesselGeometry
    ) -> None:
        rolls = pack_rolls(family_config, family_pool)
        assert len(rolls) == family_config.total_rolls
        assert sum(r.roll_area for r in rolls) == pytest.approx(family_config.ordered_area)


@pytest.mark.scenario
class TestSmallPool:
    """8 x 4 x 1.5 m pool: two wide floor strips, one strip around the walls."""

    @pytest.mark.parametrize("priority", [WASTE, MATERIAL])
    def test_floor_two_wide_strips(
        self, optimizer: MixOptimizer, small_pool: VesselGeometry, priority: OptimizationPriority
    ) -> None:
        config = optimizer.optimize(small_pool, SINGLE, priority)
        floor = config.plan_for("floor")
        assert floor.widths == (W, W)
        assert floor.edge_waste == pytest.approx(0.0)

    @pytest.mark.parametrize("priority", [WASTE, MATERIAL])
    def test_single_wall_strip(
        self, optimizer: MixOptimizer, small_pool: VesselGeometry, priority: OptimizationPriority
    ) -> None:
        config = optimizer.optimize(small_pool, SINGLE, priority)
        partition = config.wall_partition
        assert partition is not None
        assert partition.strip_count == 1
        assert partition.strips[0].label == "A-B-C-D-A"
        assert partition.strips[0].length == pytest.approx(24.1)
        assert partition.strips[0].width == N

    def test_rolls_and_waste(self, optimizer: MixOptimizer, small_pool: VesselGeometry) -> None:
        config = optimizer.optimize(small_pool, SINGLE, WASTE)
        assert config.total_rolls_narrow == 1
        assert config.total_rolls_wide == 1
        assert config.total_waste_area == pytest.approx(0.9 * 1.65)
        assert config.reusable_offcut_area == pytest.approx(9.0 * 2.05)


@pytest.mark.scenario
class TestPriorities:
    @pytest.mark.parametrize("priority", [WASTE, MATERIAL])
    def test_family_floor_same_under_both_priorities(
        self,
        optimizer: MixOptimizer,
        family_pool: VesselGeometry,
        priority: OptimizationPriority,
    ) -> None:
        config = optimizer.optimize(family_pool, SINGLE, priority)
        assert config.plan_for("floor").widths == (W, N, N)
        assert config.priority == priority

    def test_deterministic(self, optimizer: MixOptimizer, family_pool: VesselGeometry) -> None:
        first = optimizer.optimize(family_pool, SINGLE, MATERIAL)
        second = optimizer.optimize(family_pool, SINGLE, MATERIAL)
        assert first == second

    def test_family_walls_under_total_material(
        self, optimizer: MixOptimizer, family_pool: VesselGeometry
    ) -> None:
        config = optimizer.optimize(family_pool, SINGLE, MATERIAL)
        partition = config.wall_partition
        assert partition is not None
        assert [s.label for s in partition.strips] == ["A-B", "B-C-D-A"]
        assert [s.length for s in partition.strips] == pytest.approx([10.1, 20.1])
        assert partition.widths == (W, N)
        assert config.total_rolls_narrow == 2
        assert config.total_rolls_wide == 1
        assert config.ordered_area == pytest.approx(2 * 25 * 1.65 + 25 * 2.05)

    def test_priorities_pick_different_wall_partitions(
        self, optimizer: MixOptimizer, family_pool: VesselGeometry
    ) -> None:
        waste = optimizer.optimize(family_pool, SINGLE, WASTE)
        material = optimizer.optimize(family_pool, SINGLE, MATERIAL)
        assert waste.wall_partition is not None
        assert material.wall_partition is not None
        assert [s.label for s in waste.wall_partition.strips] == ["A-B-C", "C-D-A"]
        assert waste.wall_partition != material.wall_partition
        assert material.ordered_area < waste.ordered_area


class TestStructuralSurfaces:
    """Stairs and basin surfaces are always narrow."""

    def test_stairs_narrow(
        self, optimizer: MixOptimizer, pool_with_stairs: VesselGeometry
    ) -> None:
        config = optimizer.optimize(pool_with_stairs, SINGLE, WASTE)
        stairs = config.plan_for("stairs")
        assert stairs.surface.is_structural
        assert stairs.widths == (N,)

    def test_basin_surfaces_present(self, optimizer: MixOptimizer) -> None:
        geometry = VesselGeometry(length=10.0, width=5.0, depth=1.5, basin=BasinSpec())
        config = optimizer.optimize(geometry, SINGLE, WASTE)
        assert config.plan_for("basin-floor").widths == (N,)
        assert "partition-wall" in config.surface_keys


class TestWallDepth:
    """Wall width follows the pool depth."""

    def test_shallow_walls_narrow(self, family_config: MixConfiguration) -> None:
        assert family_config.wall_partition is not None
        assert set(family_config.wall_partition.widths) == {N}

    def test_medium_depth_walls_wide(self, optimizer: MixOptimizer) -> None:
        config = optimizer.optimize(
            VesselGeometry(length=10.0, width=5.0, depth=1.8), SINGLE, WASTE
        )
        assert config.wall_partition is not None
        assert set(config.wall_partition.widths) == {W}

    def test_deep_walls_stack_narrow_strips(self, optimizer: MixOptimizer) -> None:
        config = optimizer.optimize(
            VesselGeometry(length=8.0, width=4.0, depth=2.2), SINGLE, WASTE
        )
        partition = config.wall_partition
        assert partition is not None
        assert set(partition.widths) == {N}
        assert all(strip.horizontal_count == 2 for strip in partition.strips)
        assert config.plan_for("walls").strip_count == partition.physical_strip_count


class TestSubtypes:
    @pytest.mark.parametrize(
        "subtype", [MembraneSubtype.PRINTED, MembraneSubtype.TEXTURED]
    )
    def test_narrow_only_subtypes_use_no_wide_rolls(
        self,
        optimizer: MixOptimizer,
        family_pool: VesselGeometry,
        subtype: MembraneSubtype,
    ) -> None:
        config = optimizer.optimize(family_pool, subtype, WASTE)
        assert config.total_rolls_wide == 0
        assert all(set(plan.widths) <= {N} for plan in config.plans)

    def test_textured_floor_butt_welded(
        self, optimizer: MixOptimizer, family_pool: VesselGeometry
    ) -> None:
        config = optimizer.optimize(family_pool, MembraneSubtype.TEXTURED, WASTE)
        floor = config.plan_for("floor")
        assert floor.strip_count == 4
        assert floor.overlap == 0.0
        assert floor.edge_waste == pytest.approx(1.6)

    def test_custom_narrow_only_policy(self, family_pool: VesselGeometry) -> None:
        settings = PlannerSettings(narrow_only_subtypes=frozenset({SINGLE}))
        config = MixOptimizer(settings).optimize(family_pool, SINGLE, WASTE)
        assert config.total_rolls_wide == 0


class TestSeparateLayout:
    def test_walls_planned_individually(
        self, optimizer: MixOptimizer, family_pool: VesselGeometry
    ) -> None:
        config = optimizer.optimize(family_pool, SINGLE, WASTE, WallLayout.SEPARATE)
        assert config.wall_partition is None
        assert config.surface_keys == ("floor", "wall-long", "wall-short")
        long_walls = config.plan_for("wall-long")
        assert long_walls.total_strips == 2
        assert long_walls.widths == (N,)


class TestUpdateSurfaceWidth:
    """Tests for manual width overrides."""

    def test_floor_forced_wide(
        self,
        optimizer: MixOptimizer,
        family_config: MixConfiguration,
        family_pool: VesselGeometry,
    ) -> None:
        updated = optimizer.update_surface_width(
            family_config, "floor", W, family_pool, SINGLE
        )
        floor = updated.plan_for("floor")
        assert floor.widths == (W, W, W)
        assert floor.is_manual_override
        assert not updated.is_optimized
        assert not updated.plan_for("walls").is_manual_override

    def test_original_unchanged(
        self,
        optimizer: MixOptimizer,
        family_config: MixConfiguration,
        family_pool: VesselGeometry,
    ) -> None:
        optimizer.update_surface_width(family_config, "floor", N, family_pool, SINGLE)
        assert family_config.plan_for("floor").widths == (W, N, N)
        assert family_config.is_optimized

    def test_walls_forced_wide(
        self,
        optimizer: MixOptimizer,
        family_config: MixConfiguration,
        family_pool: VesselGeometry,
    ) -> None:
        updated = optimizer.update_surface_width(
            family_config, "walls", W, family_pool, SINGLE
        )
        assert updated.wall_partition is not None
        assert set(updated.wall_partition.widths) == {W}
        assert updated.plan_for("walls").is_manual_override

    def test_structural_surface_coerced_to_narrow(
        self, optimizer: MixOptimizer, pool_with_stairs: VesselGeometry
    ) -> None:
        config = optimizer.optimize(pool_with_stairs, SINGLE, WASTE)
        updated = optimizer.update_surface_width(
            config, "stairs", W, pool_with_stairs, SINGLE
        )
        stairs = updated.plan_for("stairs")
        assert stairs.widths == (N,)
        assert stairs.is_manual_override

    def test_narrow_only_subtype_coerced(
        self, optimizer: MixOptimizer, family_pool: VesselGeometry
    ) -> None:
        config = optimizer.optimize(family_pool, MembraneSubtype.PRINTED, WASTE)
        updated = optimizer.update_surface_width(
            config, "floor", W, family_pool, MembraneSubtype.PRINTED
        )
        assert updated.total_rolls_wide == 0

    def test_unknown_surface_raises(
        self,
        optimizer: MixOptimizer,
        family_config: MixConfiguration,
        family_pool: VesselGeometry,
    ) -> None:
        with pytest.raises(KeyError):
            optimizer.update_surface_width(
                family_config, "diving-board", W, family_pool, SINGLE
            )

    def test_totals_recomputed(
        self,
        optimizer: MixOptimizer,
        family_config: MixConfiguration,
        family_pool: VesselGeometry,
    ) -> None:
        updated = optimizer.update_surface_width(
            family_config, "floor", W, family_pool, SINGLE
        )
        rolls = pack_rolls(updated, family_pool)
        assert updated.total_rolls == len(rolls)

    def test_floor_change_replans_walls(
        self,
        optimizer: MixOptimizer,
        family_config: MixConfiguration,
        family_pool: VesselGeometry,
    ) -> None:
        assert family_config.wall_partition is not None
        assert family_config.wall_partition.is_offcut_split

        updated = optimizer.update_surface_width(
            family_config, "floor", W, family_pool, SINGLE
        )
        partition = updated.wall_partition
        assert partition is not None
        assert not partition.is_offcut_split
        assert [s.label for s in partition.strips] == ["A-B-C", "C-D-A"]
        assert [s.length for s in partition.strips] == pytest.approx([15.1, 15.1])
        assert updated.total_rolls_narrow == 2
        assert updated.total_rolls_wide == 2

    def test_manual_wall_width_kept_when_floor_changes(
        self,
        optimizer: MixOptimizer,
        family_config: MixConfiguration,
        family_pool: VesselGeometry,
    ) -> None:
        walls_wide = optimizer.update_surface_width(
            family_config, "walls", W, family_pool, SINGLE
        )
        updated = optimizer.update_surface_width(
            walls_wide, "floor", N, family_pool, SINGLE
        )
        assert updated.wall_partition is not None
        assert set(updated.wall_partition.widths) == {W}
        assert updated.plan_for("walls").is_manual_override


class TestOversizedStrips:
    """Strips longer than a roll are joined from several pieces."""

    def test_floor_just_over_roll_length(self, optimizer: MixOptimizer) -> None:
        geometry = VesselGeometry(length=25.00000002, width=4.0, depth=1.5)
        config = optimizer.optimize(geometry, SINGLE, WASTE)
        assert config.plan_for("floor").widths == (W, W)
        rolls = pack_rolls(config, geometry)
        assert len(rolls) == config.total_rolls
        assert all(r.used_length <= r.roll_length + 1e-9 for r in rolls)


class TestCompareWidthStrategies:
    def test_three_strategies(
        self, optimizer: MixOptimizer, family_pool: VesselGeometry
    ) -> None:
        comparisons = optimizer.compare_width_strategies(family_pool, SINGLE, WASTE)
        assert [c.strategy for c in comparisons] == ["narrow-only", "wide-only", "mixed"]

    def test_narrow_only_orders_no_wide_rolls(
        self, optimizer: MixOptimizer, family_pool: VesselGeometry
    ) -> None:
        narrow, wide, _ = optimizer.compare_width_strategies(family_pool, SINGLE, WASTE)
        assert narrow.total_rolls_wide == 0
        assert wide.total_rolls_narrow == 0

    def test_mixed_matches_optimize(
        self,
        optimizer: MixOptimizer,
        family_pool: VesselGeometry,
        family_config: MixConfiguration,
    ) -> None:
        mixed = optimizer.compare_width_strategies(family_pool, SINGLE, WASTE)[2]
        assert mixed.configuration == family_config

    def test_wide_only_keeps_structural_narrow(
        self, optimizer: MixOptimizer, pool_with_stairs: VesselGeometry
    ) -> None:
        wide = optimizer.compare_width_strategies(pool_with_stairs, SINGLE, WASTE)[1]
        assert wide.configuration.plan_for("stairs").widths == (N,)
