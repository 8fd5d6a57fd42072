"""
Agent Cost Simulator.

What-if estimates of the monthly operating cost of an AI agent product.
"""

from agent_cost_sim.core import (
    Configuration,
    CostBreakdown,
    DEFAULT_CATALOG,
    ProjectionPoint,
    UnknownModel,
    compute,
    project,
)

__all__ = [
    "Configuration",
    "CostBreakdown",
    "DEFAULT_CATALOG",
    "ProjectionPoint",
    "UnknownModel",
    "compute",
    "project",
]
