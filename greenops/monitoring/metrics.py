"""
Prometheus metrics for the placement planner.

Responsibilities:
- Count generated plans per strategy and selected region
- Count carbon readings by source (live vs. fallback)
- Track planning latency
- Count deployments by outcome
"""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from greenops.utils.logging import get_logger

logger = get_logger(__name__)


class PlannerMetrics:
    """
    Prometheus metrics for the planner.

    Each instance owns its registry so tests never collide on metric names.
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        prefix: str = "greenops",
    ) -> None:
        """
        Initialize metrics.

        Args:
            registry: Prometheus registry (a fresh one if None)
            prefix: Prefix for all metric names
        """
        self.registry = registry or CollectorRegistry()
        self._prefix = prefix

        self.plans_total = Counter(
            f"{prefix}_plans_total",
            "Plans generated",
            ["strategy", "region"],
            registry=self.registry,
        )
        self.planning_requests_total = Counter(
            f"{prefix}_planning_requests_total",
            "Planning requests by outcome",
            ["outcome"],
            registry=self.registry,
        )
        self.carbon_readings_total = Counter(
            f"{prefix}_carbon_readings_total",
            "Carbon intensity readings by source",
            ["source"],
            registry=self.registry,
        )
        self.planning_duration_seconds = Histogram(
            f"{prefix}_planning_duration_seconds",
            "Time to produce all plans for a request",
            buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
            registry=self.registry,
        )
        self.deployments_total = Counter(
            f"{prefix}_deployments_total",
            "Deployment attempts by status",
            ["status"],
            registry=self.registry,
        )

    def record_plan(self, strategy: str, region: str) -> None:
        self.plans_total.labels(strategy=strategy, region=region).inc()

    def record_planning_request(self, outcome: str, duration_seconds: float | None = None) -> None:
        self.planning_requests_total.labels(outcome=outcome).inc()
        if duration_seconds is not None:
            self.planning_duration_seconds.observe(duration_seconds)

    def record_carbon_reading(self, source: str) -> None:
        self.carbon_readings_total.labels(source=source).inc()

    def record_deployment(self, status: str) -> None:
        self.deployments_total.labels(status=status).inc()

    def get_value(self, name: str, labels: dict[str, str] | None = None) -> float:
        """Current sample value, 0.0 if never recorded."""
        value = self.registry.get_sample_value(f"{self._prefix}_{name}", labels or {})
        return value or 0.0

    def export(self) -> bytes:
        """Render the registry in Prometheus text format."""
        return generate_latest(self.registry)


# Global instance
_planner_metrics: PlannerMetrics | None = None


def get_planner_metrics() -> PlannerMetrics:
    """Get the global planner metrics."""
    global _planner_metrics
    if _planner_metrics is None:
        _planner_metrics = PlannerMetrics()
    return _planner_metrics
