"""
Core modules for Agent Cost Simulator.

This package contains the pricing catalog, the configuration snapshot,
the monthly cost engine and the growth projector.
"""

from .configuration import Configuration
from .engine import CostBreakdown, compute
from .pricing import (
    DEFAULT_CATALOG,
    PricingCatalog,
    PricingEntry,
    UnitPrices,
    UnknownModel,
)
from .projection import (
    DEFAULT_SCALE_FACTORS,
    DEFAULT_SCALING_RULES,
    ProjectionPoint,
    ScalingRule,
    ScalingRules,
    project,
)

__all__ = [
    "Configuration",
    "CostBreakdown",
    "compute",
    "DEFAULT_CATALOG",
    "PricingCatalog",
    "PricingEntry",
    "UnitPrices",
    "UnknownModel",
    "DEFAULT_SCALE_FACTORS",
    "DEFAULT_SCALING_RULES",
    "ProjectionPoint",
    "ScalingRule",
    "ScalingRules",
    "project",
]
