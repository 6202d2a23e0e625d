"""
Deployment service for realizing a selected plan.

Responsibilities:
- Validate deployment requests
- Record the deployment's estimated footprint for analytics
- Apply the manifest through the configured executor
"""

from dataclasses import dataclass
from typing import Any

from config.settings import AppSettings, get_settings
from greenops.execution.base import BaseExecutor, ExecutionResult
from greenops.execution.kubectl import KubectlConfig, KubectlExecutor
from greenops.monitoring.analytics import AnalyticsTracker, DeploymentRecord
from greenops.monitoring.metrics import PlannerMetrics, get_planner_metrics
from greenops.planning.exceptions import InvalidDeploymentRequest
from greenops.planning.regions import RegionCatalog, default_region_catalog
from greenops.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class DeploymentRequest:
    """A plan the caller wants deployed."""

    plan_id: str
    region: str
    manifest: str
    region_label: str | None = None
    carbon_intensity: Any = None
    replicas: Any = None
    scores: dict[str, float] | None = None

    def validate(self) -> None:
        """
        Raises:
            InvalidDeploymentRequest: If plan id, region or manifest is missing
        """
        if not self.plan_id or not self.region or not self.manifest:
            raise InvalidDeploymentRequest(
                "planId, region, and kubernetesYaml are required to deploy."
            )


@dataclass
class DeploymentOutcome:
    """Analytics record plus executor result for one deployment."""

    record: DeploymentRecord
    execution: ExecutionResult

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "record": self.record.to_dict(),
            "execution": self.execution.to_dict(),
        }


class DeploymentService:
    """Records and applies deployments."""

    def __init__(
        self,
        tracker: AnalyticsTracker | None = None,
        executor: BaseExecutor | None = None,
        catalog: RegionCatalog | None = None,
        metrics: PlannerMetrics | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        settings = settings or get_settings()

        self.tracker = tracker or AnalyticsTracker(
            catalog=catalog or default_region_catalog(),
            usd_to_inr=settings.currency.usd_to_inr,
            power_kw_per_replica=settings.deploy.power_kw_per_replica,
            fallback_carbon_intensity=settings.deploy.fallback_carbon_intensity,
            fallback_cost_per_replica=settings.deploy.fallback_cost_per_replica,
        )
        self.executor = executor or KubectlExecutor(
            KubectlConfig(
                enabled=settings.deploy.enabled,
                binary=settings.deploy.kubectl_binary,
                context=settings.deploy.kubectl_context,
                timeout_seconds=settings.deploy.timeout_seconds,
            )
        )
        self.metrics = metrics if metrics is not None else get_planner_metrics()

    async def deploy(self, request: DeploymentRequest) -> DeploymentOutcome:
        """
        Record and apply a deployment.

        The deployment is recorded before the manifest is applied, so dry
        runs and failed applies still show up in analytics.

        Raises:
            InvalidDeploymentRequest: If required fields are missing
        """
        request.validate()

        record = self.tracker.record(
            plan_id=request.plan_id,
            region_id=request.region,
            replicas=request.replicas,
            carbon_intensity=request.carbon_intensity,
            region_label=request.region_label,
            scores=request.scores,
        )

        execution = await self.executor.apply(request.manifest, request.plan_id)

        if self.metrics:
            self.metrics.record_deployment(execution.status.value)

        logger.info(
            "Deployment processed",
            plan_id=request.plan_id,
            region=request.region,
            status=execution.status.value,
            co2_kg=record.footprint.co2_kg,
        )

        return DeploymentOutcome(record=record, execution=execution)


# Global instance
_deployment_service: DeploymentService | None = None


def get_deployment_service() -> DeploymentService:
    """Get the global deployment service."""
    global _deployment_service
    if _deployment_service is None:
        _deployment_service = DeploymentService()
    return _deployment_service


def init_deployment_service(**kwargs) -> DeploymentService:
    """Initialize the global deployment service."""
    global _deployment_service
    _deployment_service = DeploymentService(**kwargs)
    return _deployment_service
