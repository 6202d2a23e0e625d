"""
Planning service wiring the plan assembler to configuration.

Responsibilities:
- Build the region catalog, carbon source and manifest generator from settings
- Serve planning requests
- Release the carbon source's HTTP client on shutdown
"""

from config.settings import AppSettings, get_settings
from greenops.collectors.carbon import ElectricityMapsCarbonSource
from greenops.monitoring.metrics import PlannerMetrics, get_planner_metrics
from greenops.planning.carbon import CarbonIntensitySource
from greenops.planning.engine import PlanAssembler, PlanningRequest, PlanningResult
from greenops.planning.manifest import ManifestConfig, ManifestGenerator
from greenops.planning.regions import RegionCatalog, default_region_catalog
from greenops.utils.logging import get_logger

logger = get_logger(__name__)


class PlanningService:
    """Serves planning requests for the API."""

    def __init__(
        self,
        catalog: RegionCatalog | None = None,
        carbon_source: CarbonIntensitySource | None = None,
        manifest_generator: ManifestGenerator | None = None,
        metrics: PlannerMetrics | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        settings = settings or get_settings()

        self.catalog = catalog or default_region_catalog()
        self.carbon_source = carbon_source or ElectricityMapsCarbonSource(
            api_key=settings.electricity_maps.api_key,
            base_url=settings.electricity_maps.base_url,
            timeout_seconds=settings.electricity_maps.timeout_seconds,
        )
        self.manifest_generator = manifest_generator or ManifestGenerator(
            ManifestConfig(
                namespace=settings.manifest.namespace,
                image_registry=settings.manifest.image_registry,
                container_port=settings.manifest.container_port,
                service_port=settings.manifest.service_port,
            )
        )
        self.metrics = metrics if metrics is not None else get_planner_metrics()

        self.assembler = PlanAssembler(
            catalog=self.catalog,
            carbon_source=self.carbon_source,
            manifest_generator=self.manifest_generator,
            metrics=self.metrics,
        )

        logger.info(
            "Planning service initialized",
            regions=len(self.catalog),
            live_carbon=self.carbon_source.is_live,
        )

    @property
    def live_data_enabled(self) -> bool:
        return self.carbon_source.is_live

    async def plan(self, request: PlanningRequest) -> PlanningResult:
        """Produce one plan per strategy."""
        return await self.assembler.plan(request)

    async def close(self) -> None:
        await self.carbon_source.close()


# Global instance
_planning_service: PlanningService | None = None


def get_planning_service() -> PlanningService:
    """Get the global planning service."""
    global _planning_service
    if _planning_service is None:
        _planning_service = PlanningService()
    return _planning_service


def init_planning_service(**kwargs) -> PlanningService:
    """Initialize the global planning service."""
    global _planning_service
    _planning_service = PlanningService(**kwargs)
    return _planning_service
