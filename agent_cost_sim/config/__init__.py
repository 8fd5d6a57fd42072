"""
Scenario and pricing file loading for Agent Cost Simulator.
"""

from .loader import Scenario, load_pricing_catalog, load_scenario

__all__ = ["Scenario", "load_pricing_catalog", "load_scenario"]
