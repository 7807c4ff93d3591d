"""Infrastructure layer - roll packing, formatters and exporters."""

from .roll_packing import (
    PackingResult,
    ReusableOffcut,
    RollAllocation,
    RollPacker,
    RollPackingService,
)
from .formatters import (
    ComparisonFormatter,
    PlanReportFormatter,
    PricingFormatter,
    RollReportFormatter,
    StripPlanFormatter,
    WallPartitionFormatter,
)
from .exporters import (
    Exporter,
    ExporterRegistry,
    ExportManager,
    JsonPlanExporter,
    TextPlanExporter,
)

__all__ = [
    # Roll packing
    "PackingResult",
    "ReusableOffcut",
    "RollAllocation",
    "RollPacker",
    "RollPackingService",
    # Formatters
    "ComparisonFormatter",
    "PlanReportFormatter",
    "PricingFormatter",
    "RollReportFormatter",
    "StripPlanFormatter",
    "WallPartitionFormatter",
    # Exporters
    "ExportManager",
    "Exporter",
    "ExporterRegistry",
    "JsonPlanExporter",
    "TextPlanExporter",
]
