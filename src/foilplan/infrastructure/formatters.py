"""Plain-text formatters for membrane plans."""

from __future__ import annotations

from typing import TYPE_CHECKING

from foilplan.domain import MixConfiguration, StripPlan, WallPartition
from foilplan.infrastructure.roll_packing import PackingResult

if TYPE_CHECKING:
    from foilplan.application.dtos import ComparisonOutput, PlanOutput
    from foilplan.application.services.pricing import PricingArea, SurfaceDetail


def _describe_widths(plan: StripPlan) -> str:
    if plan.assignment is None or plan.strip_count == 0:
        return "-"
    counts: dict[str, int] = {}
    for width in plan.widths:
        counts[width.value] = counts.get(width.value, 0) + 1
    return " + ".join(f"{count}x {name}" for name, count in counts.items())


class StripPlanFormatter:
    """Formats the per-surface strip plans as a table."""

    def format(self, config: MixConfiguration) -> str:
        if not config.plans:
            return "No surfaces to cover."

        lines = [
            "STRIP PLAN",
            "=" * 78,
            f"{'Surface':<18} {'Length':>8} {'Cover':>7} {'Rep':>4} "
            f"{'Strips':<22} {'Overlap':>8} {'Waste':>7}",
            "-" * 78,
        ]
        for plan in config.plans:
            if plan.surface.is_perimeter and config.wall_partition is not None:
                strips = f"{config.wall_partition.physical_strip_count} (see walls)"
            else:
                strips = _describe_widths(plan)
            marker = " *" if plan.is_manual_override else ""
            lines.append(
                f"{plan.surface.label + marker:<18} {plan.strip_length:>8.2f} "
                f"{plan.surface.cover_width:>7.2f} {plan.surface.repetition_count:>4} "
                f"{strips:<22} {plan.overlap:>8.3f} {plan.edge_waste:>7.3f}"
            )
        lines.append("-" * 78)
        if any(plan.is_manual_override for plan in config.plans):
            lines.append("* width set by hand")
        return "\n".join(lines)


class WallPartitionFormatter:
    """Formats the strips around the wall loop."""

    def format(self, partition: WallPartition | None) -> str:
        if partition is None or not partition.strips:
            return "No wall loop."

        lines = [
            "WALL STRIPS",
            "=" * 64,
            f"{'Strip':<16} {'Walls':>8} {'Join':>7} {'Length':>8} {'Width':<8} {'Stack':>5}",
            "-" * 64,
        ]
        for strip in partition.strips:
            lines.append(
                f"{strip.label:<16} {strip.base_length:>8.2f} "
                f"{strip.join_overlap_share:>7.2f} {strip.length:>8.2f} "
                f"{strip.width.value:<8} {strip.horizontal_count:>5}"
            )
        lines.append("-" * 64)
        lines.append(
            f"{partition.strip_count} strip(s), join overlap {partition.join_overlap:.2f} m"
        )
        if partition.is_offcut_split:
            lines.append("One strip is sized to fit a reusable offcut.")
        return "\n".join(lines)


class RollReportFormatter:
    """Formats packed rolls and their offcuts."""

    def format(self, packing: PackingResult) -> str:
        if not packing.rolls:
            return "No rolls needed."

        lines = ["ROLLS", "=" * 64]
        for roll in packing.rolls:
            lines.append(
                f"{roll.width.value.capitalize()} roll {roll.roll_number} "
                f"({roll.metric_width:.2f} x {roll.roll_length:.0f} m)"
            )
            for strip in roll.strips:
                lines.append(f"  {strip.label:<32} {strip.length:>8.2f} m")
            status = "reusable" if packing.is_reusable(roll) else "waste"
            lines.append(f"  {'Leftover':<32} {roll.leftover:>8.2f} m ({status})")
        lines.append("-" * 64)
        lines.append(
            f"Ordered: {packing.ordered_area:.2f} m2, "
            f"reusable offcuts: {packing.reusable_offcut_area:.2f} m2, "
            f"waste: {packing.unusable_waste_area:.2f} m2"
        )
        return "\n".join(lines)


class PricingFormatter:
    """Formats charged areas and the per-surface breakdown."""

    def format(
        self,
        pricing: PricingArea,
        details: list[SurfaceDetail] | None = None,
        butt_joint_length: float = 0.0,
    ) -> str:
        lines = [
            "PRICING AREA",
            "=" * 64,
            f"{'Main membrane':<24} {pricing.main_area:>6} m2   "
            f"(welds {pricing.main_weld_area:.1f} m2)",
            f"{'Structural membrane':<24} {pricing.structural_area:>6} m2   "
            f"(welds {pricing.structural_weld_area:.1f} m2)",
            f"{'Total':<24} {pricing.total_area:>6} m2",
        ]
        if butt_joint_length > 0:
            lines.append(f"{'Butt welds':<24} {butt_joint_length:>6.1f} m")

        if details:
            lines.extend(
                [
                    "",
                    f"{'Surface':<18} {'Foil':<11} {'Cover':>8} {'Strips':>8} "
                    f"{'Welds':>7} {'Trim':>7}",
                    "-" * 64,
                ]
            )
            for detail in details:
                lines.append(
                    f"{detail.label:<18} {detail.foil_assignment.value:<11} "
                    f"{detail.cover_area:>8.2f} {detail.foil_area:>8.2f} "
                    f"{detail.weld_area:>7.2f} {detail.edge_waste_area:>7.2f}"
                )
        return "\n".join(lines)


class PlanReportFormatter:
    """Formats a complete planning run as a text report."""

    def __init__(self) -> None:
        self.strip_plans = StripPlanFormatter()
        self.walls = WallPartitionFormatter()
        self.rolls = RollReportFormatter()
        self.pricing = PricingFormatter()

    def format(self, output: PlanOutput) -> str:
        config = output.configuration
        geometry = output.geometry
        header = [
            "MEMBRANE PLAN",
            f"Vessel: {geometry.length:.2f} x {geometry.width:.2f} x {geometry.depth:.2f} m",
            f"Membrane: {config.subtype.value}, priority {config.priority.value}",
            f"Rolls: {config.total_rolls_narrow} narrow + {config.total_rolls_wide} wide, "
            f"waste {config.total_waste_area:.2f} m2 ({config.waste_percentage:.1f}%)",
        ]
        sections = [
            "\n".join(header),
            self.strip_plans.format(config),
        ]
        if config.wall_partition is not None:
            sections.append(self.walls.format(config.wall_partition))
        sections.append(self.rolls.format(output.packing))
        sections.append(
            self.pricing.format(
                output.pricing, output.surface_details, output.butt_joint_length
            )
        )
        return "\n\n".join(sections)


class ComparisonFormatter:
    """Formats a width strategy comparison."""

    def format(self, output: ComparisonOutput) -> str:
        if not output.comparisons:
            return "Nothing to compare."

        best = output.best()
        lines = [
            "WIDTH STRATEGIES",
            "=" * 64,
            f"{'Strategy':<14} {'Narrow':>7} {'Wide':>6} {'Ordered m2':>11} "
            f"{'Waste m2':>9} {'Waste %':>8}",
            "-" * 64,
        ]
        for comparison in output.comparisons:
            config = comparison.configuration
            marker = " <" if comparison is best else ""
            lines.append(
                f"{comparison.strategy:<14} {config.total_rolls_narrow:>7} "
                f"{config.total_rolls_wide:>6} {config.ordered_area:>11.2f} "
                f"{config.total_waste_area:>9.2f} {config.waste_percentage:>8.1f}{marker}"
            )
        return "\n".join(lines)
