"""Exporter framework for membrane plans.

Registered exporters:
- json: Complete plan with strips, rolls, offcuts and pricing
- text: Human readable report

Usage:
    from foilplan.infrastructure.exporters import ExporterRegistry

    exporter = ExporterRegistry.get("json")()
    print(exporter.export_string(plan_output))
"""

from foilplan.infrastructure.exporters.base import (
    Exporter,
    ExporterRegistry,
    ExportManager,
)
from foilplan.infrastructure.exporters.json_exporter import (
    JsonPlanExporter,
    configuration_to_dict,
    packing_to_dict,
    plan_to_dict,
)
from foilplan.infrastructure.exporters.text_exporter import TextPlanExporter

__all__ = [
    "ExportManager",
    "Exporter",
    "ExporterRegistry",
    "JsonPlanExporter",
    "TextPlanExporter",
    "configuration_to_dict",
    "packing_to_dict",
    "plan_to_dict",
]
