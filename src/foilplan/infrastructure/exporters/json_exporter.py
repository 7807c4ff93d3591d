"""JSON export of a complete membrane plan."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from foilplan.domain import MixConfiguration, StripPlan, WallPartition
from foilplan.infrastructure.exporters.base import ExporterRegistry
from foilplan.infrastructure.roll_packing import PackingResult

if TYPE_CHECKING:
    from foilplan.application.dtos import PlanOutput


def _plan_to_dict(plan: StripPlan) -> dict[str, Any]:
    return {
        "key": plan.key,
        "label": plan.surface.label,
        "foil": plan.surface.foil_assignment.value,
        "joint": plan.surface.joint_kind.value,
        "strip_length": round(plan.strip_length, 3),
        "cover_width": round(plan.surface.cover_width, 3),
        "repetition_count": plan.surface.repetition_count,
        "strip_count": plan.strip_count,
        "widths": [width.value for width in plan.widths],
        "overlap": round(plan.overlap, 4),
        "edge_waste": round(plan.edge_waste, 4),
        "manual_override": plan.is_manual_override,
    }


def _partition_to_dict(partition: WallPartition) -> dict[str, Any]:
    return {
        "join_overlap": partition.join_overlap,
        "offcut_split": partition.is_offcut_split,
        "total_length": round(partition.total_length, 3),
        "strips": [
            {
                "label": strip.label,
                "segments": list(strip.segment_indices),
                "base_length": round(strip.base_length, 3),
                "join_overlap_share": round(strip.join_overlap_share, 3),
                "length": round(strip.length, 3),
                "width": strip.width.value,
                "horizontal_count": strip.horizontal_count,
            }
            for strip in partition.strips
        ],
    }


def configuration_to_dict(config: MixConfiguration) -> dict[str, Any]:
    """Serializable summary of a mix configuration."""
    return {
        "subtype": config.subtype.value,
        "priority": config.priority.value,
        "optimized": config.is_optimized,
        "total_rolls_narrow": config.total_rolls_narrow,
        "total_rolls_wide": config.total_rolls_wide,
        "ordered_area": round(config.ordered_area, 2),
        "total_waste_area": round(config.total_waste_area, 2),
        "reusable_offcut_area": round(config.reusable_offcut_area, 2),
        "waste_percentage": round(config.waste_percentage, 2),
        "surfaces": [_plan_to_dict(plan) for plan in config.plans],
        "wall_partition": (
            _partition_to_dict(config.wall_partition)
            if config.wall_partition is not None
            else None
        ),
    }


def packing_to_dict(packing: PackingResult) -> dict[str, Any]:
    return {
        "rolls": [
            {
                "width": roll.width.value,
                "number": roll.roll_number,
                "strips": [
                    {"label": s.label, "surface": s.surface_key, "length": round(s.length, 3)}
                    for s in roll.strips
                ],
                "leftover": round(roll.leftover, 3),
            }
            for roll in packing.rolls
        ],
        "offcuts": [
            {
                "width": offcut.width.value,
                "roll": offcut.roll_number,
                "length": offcut.length,
                "area": offcut.area,
            }
            for offcut in packing.offcuts
        ],
    }


def plan_to_dict(output: PlanOutput) -> dict[str, Any]:
    """Serializable form of a complete planning run."""
    geometry = output.geometry
    pricing = output.pricing
    return {
        "vessel": {
            "length": geometry.length,
            "width": geometry.width,
            "depth": geometry.depth,
            "wall_layout": output.layout.value,
        },
        "configuration": configuration_to_dict(output.configuration),
        "packing": packing_to_dict(output.packing),
        "pricing": {
            "main_area": pricing.main_area,
            "main_weld_area": pricing.main_weld_area,
            "structural_area": pricing.structural_area,
            "structural_weld_area": pricing.structural_weld_area,
            "total_area": pricing.total_area,
            "butt_joint_length": round(output.butt_joint_length, 2),
        },
        "surface_details": [
            {
                "key": detail.key,
                "foil": detail.foil_assignment.value,
                "cover_area": detail.cover_area,
                "foil_area": detail.foil_area,
                "weld_area": detail.weld_area,
                "edge_waste_area": detail.edge_waste_area,
                "reusable_edge_area": detail.reusable_edge_area,
            }
            for detail in output.surface_details
        ],
    }


@ExporterRegistry.register("json")
class JsonPlanExporter:
    """Exports a plan as indented JSON."""

    format_name: ClassVar[str] = "json"
    file_extension: ClassVar[str] = "json"

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def export(self, output: PlanOutput, path: Path) -> None:
        path.write_text(self.export_string(output), encoding="utf-8")

    def export_string(self, output: PlanOutput) -> str:
        return json.dumps(plan_to_dict(output), indent=self.indent)
