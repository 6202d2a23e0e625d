"""
Region catalog for placement decisions.

Responsibilities:
- Describe each candidate region (cost, default grid carbon intensity, geography)
- Keep a stable iteration order used for deterministic tie-breaking
- Map regions to Electricity Maps zones for live carbon data
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from greenops.planning.exceptions import CatalogError


class GeoGroup(str, Enum):
    """Coarse geography used as a latency proxy."""

    EU = "eu"
    US_EAST = "us-east"
    US_WEST = "us-west"
    AP_SOUTH = "ap-south"
    AP_SOUTHEAST = "ap-southeast"


@dataclass(frozen=True)
class Region:
    """A candidate deployment region."""

    id: str
    label: str
    default_carbon_intensity: float  # gCO2eq/kWh
    base_cost: float  # USD per replica-hour
    geo_group: GeoGroup
    zone: str | None = None  # Electricity Maps zone code

    def __post_init__(self) -> None:
        if self.default_carbon_intensity <= 0:
            raise CatalogError(f"Region {self.id} needs a positive carbon intensity")
        if self.base_cost <= 0:
            raise CatalogError(f"Region {self.id} needs a positive base cost")


class RegionCatalog:
    """
    Immutable, ordered set of candidate regions.

    Iteration order is the catalog order; the planner relies on it to break
    score ties.
    """

    def __init__(self, regions: Iterable[Region]) -> None:
        self._regions: tuple[Region, ...] = tuple(regions)
        if not self._regions:
            raise CatalogError("Region catalog cannot be empty")

        self._by_id: dict[str, Region] = {}
        for region in self._regions:
            if region.id in self._by_id:
                raise CatalogError(f"Duplicate region id: {region.id}")
            self._by_id[region.id] = region

    def __iter__(self) -> Iterator[Region]:
        return iter(self._regions)

    def __len__(self) -> int:
        return len(self._regions)

    def __contains__(self, region_id: object) -> bool:
        return region_id in self._by_id

    @property
    def regions(self) -> tuple[Region, ...]:
        return self._regions

    def get(self, region_id: str) -> Region | None:
        """Look up a region by id."""
        return self._by_id.get(region_id)

    @property
    def max_base_cost(self) -> float:
        """Most expensive per-replica cost in the catalog."""
        return max(r.base_cost for r in self._regions)


DEFAULT_REGIONS: tuple[Region, ...] = (
    Region("LON1", "London, UK", 260, 0.24, GeoGroup.EU, zone="GB"),
    Region("FRA1", "Frankfurt, Germany", 210, 0.26, GeoGroup.EU, zone="DE"),
    Region("NYC1", "New York, USA", 390, 0.23, GeoGroup.US_EAST, zone="US-NY-NYIS"),
    Region("SFO1", "San Francisco, USA", 380, 0.27, GeoGroup.US_WEST, zone="US-CAL-CISO"),
    Region("BLR1", "Bengaluru, India", 650, 0.18, GeoGroup.AP_SOUTH, zone="IN"),
    Region("SGP1", "Singapore", 510, 0.21, GeoGroup.AP_SOUTHEAST, zone="SG"),
)


def default_region_catalog() -> RegionCatalog:
    """Build the standard six-region catalog."""
    return RegionCatalog(DEFAULT_REGIONS)
