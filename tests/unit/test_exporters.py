"""Tests for plan exporters, the exporter registry and text formatters."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from foilplan.application import PlanOutput, PlanVesselCommand
from foilplan.domain import (
    MembraneSubtype,
    OptimizationPriority,
    VesselGeometry,
)
from foilplan.infrastructure import (
    ComparisonFormatter,
    Exporter,
    ExporterRegistry,
    ExportManager,
    JsonPlanExporter,
    PlanReportFormatter,
    RollReportFormatter,
    TextPlanExporter,
    WallPartitionFormatter,
)
from foilplan.infrastructure.exporters import plan_to_dict

SINGLE = MembraneSubtype.SINGLE_COLOR
WASTE = OptimizationPriority.MINIMIZE_WASTE


@pytest.fixture
def family_plan(family_pool: VesselGeometry) -> PlanOutput:
    return PlanVesselCommand().execute(family_pool, SINGLE, WASTE)


class TestExporterRegistry:
    def test_builtin_formats_registered(self) -> None:
        assert ExporterRegistry.is_registered("json")
        assert ExporterRegistry.is_registered("text")
        assert "json" in ExporterRegistry.available_formats()

    def test_get_returns_class(self) -> None:
        assert ExporterRegistry.get("json") is JsonPlanExporter
        assert ExporterRegistry.get("text") is TextPlanExporter

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(KeyError, match="Available formats"):
            ExporterRegistry.get("dxf")

    def test_exporters_satisfy_protocol(self) -> None:
        assert isinstance(JsonPlanExporter(), Exporter)
        assert isinstance(TextPlanExporter(), Exporter)


class TestJsonExport:
    """Tests for the JSON plan document."""

    def test_top_level_sections(self, family_plan: PlanOutput) -> None:
        data = json.loads(JsonPlanExporter().export_string(family_plan))
        assert set(data) == {
            "vessel",
            "configuration",
            "packing",
            "pricing",
            "surface_details",
        }

    def test_configuration_totals(self, family_plan: PlanOutput) -> None:
        data = plan_to_dict(family_plan)
        configuration = data["configuration"]
        assert configuration["total_rolls_narrow"] == 3
        assert configuration["total_rolls_wide"] == 1
        assert configuration["ordered_area"] == pytest.approx(175.0)
        assert [s["key"] for s in configuration["surfaces"]] == ["floor", "walls"]
        assert configuration["surfaces"][0]["widths"] == ["wide", "narrow", "narrow"]

    def test_wall_partition(self, family_plan: PlanOutput) -> None:
        partition = plan_to_dict(family_plan)["configuration"]["wall_partition"]
        assert partition["offcut_split"] is True
        assert [s["label"] for s in partition["strips"]] == ["A-B-C", "C-D-A"]
        assert partition["total_length"] == pytest.approx(30.2)

    def test_rolls_match_totals(self, family_plan: PlanOutput) -> None:
        rolls = plan_to_dict(family_plan)["packing"]["rolls"]
        assert len(rolls) == 4
        assert rolls[0]["width"] == "wide"

    def test_offcuts(self, family_plan: PlanOutput) -> None:
        offcuts = plan_to_dict(family_plan)["packing"]["offcuts"]
        assert len(offcuts) == len(family_plan.offcuts) == 3
        assert sorted(o["length"] for o in offcuts) == pytest.approx([9.8, 15.0, 15.0])

    def test_pricing(self, family_plan: PlanOutput) -> None:
        pricing = plan_to_dict(family_plan)["pricing"]
        assert pricing["main_area"] == 104
        assert pricing["structural_area"] == 0
        assert pricing["butt_joint_length"] == 0.0

    def test_export_to_file(self, family_plan: PlanOutput, tmp_path: Path) -> None:
        path = tmp_path / "plan.json"
        JsonPlanExporter().export(family_plan, path)
        assert json.loads(path.read_text())["vessel"]["length"] == 10.0


class TestTextExport:
    def test_report_sections(self, family_plan: PlanOutput) -> None:
        report = TextPlanExporter().export_string(family_plan)
        assert report.startswith("MEMBRANE PLAN")
        for heading in ("STRIP PLAN", "WALL STRIPS", "ROLLS", "PRICING AREA"):
            assert heading in report

    def test_report_mentions_offcut_split(self, family_plan: PlanOutput) -> None:
        report = PlanReportFormatter().format(family_plan)
        assert "Rolls: 3 narrow + 1 wide" in report
        assert "reusable offcut" in report


class TestFormatters:
    def test_no_wall_loop(self) -> None:
        assert WallPartitionFormatter().format(None) == "No wall loop."

    def test_roll_report_marks_leftovers(self, family_plan: PlanOutput) -> None:
        report = RollReportFormatter().format(family_plan.packing)
        assert "Wide roll 1" in report
        assert "(reusable)" in report

    def test_comparison_marks_best(self, family_pool: VesselGeometry) -> None:
        comparison = PlanVesselCommand().compare(family_pool, SINGLE, WASTE)
        text = ComparisonFormatter().format(comparison)
        assert "WIDTH STRATEGIES" in text
        best = comparison.best()
        assert best is not None
        marked = [line for line in text.splitlines() if line.endswith(" <")]
        assert len(marked) == 1
        assert marked[0].startswith(best.strategy)


class TestExportManager:
    def test_export_all(self, family_plan: PlanOutput, tmp_path: Path) -> None:
        manager = ExportManager(tmp_path / "out")
        results = manager.export_all(["json", "text"], family_plan, project_name="family")
        assert results["json"].name == "family_json.json"
        assert results["text"].name == "family_text.txt"
        assert all(path.exists() for path in results.values())

    def test_unknown_format(self, family_plan: PlanOutput, tmp_path: Path) -> None:
        with pytest.raises(KeyError):
            ExportManager(tmp_path).export_all(["svg"], family_plan)
