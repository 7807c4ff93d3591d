"""Domain services for membrane planning."""

from .perimeter import PerimeterPartitioner
from .strip_width import StripEvaluation, StripWidthSelector
from .surface_model import SurfaceModel, corner_label

__all__ = [
    "PerimeterPartitioner",
    "StripEvaluation",
    "StripWidthSelector",
    "SurfaceModel",
    "corner_label",
]
