"""
Collectors for external signals used in planning.

This module provides:
- Static carbon source: catalog default intensities
- Electricity Maps source: live grid carbon intensity with static fallback
"""

from .carbon import (
    ElectricityMapsCarbonSource,
    StaticCarbonSource,
)

__all__ = [
    "StaticCarbonSource",
    "ElectricityMapsCarbonSource",
]
