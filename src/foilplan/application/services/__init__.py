"""Application services that orchestrate planning across layers."""

from .mix_optimizer import MixOptimizer, WidthComparison
from .pricing import PricingAggregator, PricingArea, SurfaceDetail

__all__ = [
    "MixOptimizer",
    "PricingAggregator",
    "PricingArea",
    "SurfaceDetail",
    "WidthComparison",
]
