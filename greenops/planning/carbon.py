"""
Carbon intensity readings and the source interface the planner consumes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from greenops.planning.regions import Region


class ReadingSource(str, Enum):
    """Where a carbon reading came from."""

    LIVE = "live"
    FALLBACK_STATIC = "fallback-static"


@dataclass(frozen=True)
class CarbonReading:
    """Carbon intensity of one region's grid, in gCO2eq/kWh."""

    region_id: str
    value: float
    source: ReadingSource

    @property
    def is_live(self) -> bool:
        return self.source == ReadingSource.LIVE

    @classmethod
    def fallback(cls, region: Region) -> "CarbonReading":
        return cls(
            region_id=region.id,
            value=float(region.default_carbon_intensity),
            source=ReadingSource.FALLBACK_STATIC,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "region_id": self.region_id,
            "value": self.value,
            "source": self.source.value,
        }


class CarbonIntensitySource(ABC):
    """Interface for carbon intensity providers."""

    @property
    def is_live(self) -> bool:
        """Whether this source can return live readings at all."""
        return False

    @abstractmethod
    async def get_reading(self, region: Region) -> CarbonReading:
        """
        Get the current carbon intensity for a region.

        Must not raise; failures return ``CarbonReading.fallback(region)``.
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None
