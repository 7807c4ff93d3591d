"""Plain-text report export."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from foilplan.infrastructure.exporters.base import ExporterRegistry
from foilplan.infrastructure.formatters import PlanReportFormatter

if TYPE_CHECKING:
    from foilplan.application.dtos import PlanOutput


@ExporterRegistry.register("text")
class TextPlanExporter:
    """Exports the human readable plan report."""

    format_name: ClassVar[str] = "text"
    file_extension: ClassVar[str] = "txt"

    def __init__(self) -> None:
        self.formatter = PlanReportFormatter()

    def export(self, output: PlanOutput, path: Path) -> None:
        path.write_text(self.export_string(output) + "\n", encoding="utf-8")

    def export_string(self, output: PlanOutput) -> str:
        return self.formatter.format(output)
