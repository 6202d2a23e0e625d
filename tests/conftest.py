"""
Shared test fixtures and configuration.
"""

from datetime import UTC, datetime

import pytest

from greenops.execution.base import MockExecutor
from greenops.monitoring.analytics import AnalyticsTracker
from greenops.monitoring.metrics import PlannerMetrics
from greenops.planning.capacity import WorkloadComponent
from greenops.planning.carbon import CarbonIntensitySource, CarbonReading, ReadingSource
from greenops.planning.regions import (
    GeoGroup,
    Region,
    RegionCatalog,
    default_region_catalog,
)

# ============================================================================
# Carbon Source Fakes
# ============================================================================


class FixedCarbonSource(CarbonIntensitySource):
    """Returns preset live values; regions without one fall back."""

    def __init__(self, values: dict[str, float] | None = None) -> None:
        self.values = values or {}
        self.calls: list[str] = []

    @property
    def is_live(self) -> bool:
        return True

    async def get_reading(self, region: Region) -> CarbonReading:
        self.calls.append(region.id)
        if region.id in self.values:
            return CarbonReading(region.id, self.values[region.id], ReadingSource.LIVE)
        return CarbonReading.fallback(region)


class FallbackOnlySource(CarbonIntensitySource):
    """Static defaults for every region, counting calls."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def get_reading(self, region: Region) -> CarbonReading:
        self.calls.append(region.id)
        return CarbonReading.fallback(region)


# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def catalog() -> RegionCatalog:
    """The standard six-region catalog."""
    return default_region_catalog()


@pytest.fixture
def small_catalog() -> RegionCatalog:
    """Three regions with distinct carbon and cost."""
    return RegionCatalog([
        Region("EU1", "Europe One", 200, 0.30, GeoGroup.EU, zone="DE"),
        Region("US1", "US East One", 400, 0.20, GeoGroup.US_EAST, zone="US-NY-NYIS"),
        Region("AP1", "India One", 600, 0.10, GeoGroup.AP_SOUTH, zone="IN"),
    ])


# ============================================================================
# Workload Fixtures
# ============================================================================


@pytest.fixture
def single_api() -> list[WorkloadComponent]:
    return [WorkloadComponent(name="api", type="api-gateway")]


@pytest.fixture
def web_stack() -> list[WorkloadComponent]:
    """Frontend, API and a managed database."""
    return [
        WorkloadComponent(name="Web Frontend", type="frontend"),
        WorkloadComponent(name="Orders API", type="api-gateway"),
        WorkloadComponent(name="orders-db", type="database"),
    ]


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def fallback_source() -> FallbackOnlySource:
    return FallbackOnlySource()


@pytest.fixture
def metrics() -> PlannerMetrics:
    """Metrics on a private registry."""
    return PlannerMetrics()


@pytest.fixture
def mock_executor() -> MockExecutor:
    return MockExecutor()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def tracker(catalog: RegionCatalog, fixed_now: datetime) -> AnalyticsTracker:
    """Analytics tracker with a frozen clock."""
    return AnalyticsTracker(catalog=catalog, clock=lambda: fixed_now)


@pytest.fixture
def fixed_source() -> FixedCarbonSource:
    """Live source; set ``.values`` per test."""
    return FixedCarbonSource()
