"""
Shared helpers for Agent Cost Simulator.
"""

from .logging import setup_logging

__all__ = ["setup_logging"]
