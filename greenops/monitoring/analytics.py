"""
Deployment analytics for realized placements.

Responsibilities:
- Estimate hourly energy, CO2 and cost of a deployment
- Keep an append-only, in-memory history of deployments
- Summarize totals against a most-expensive-region baseline
- Group totals and averages by plan and by region
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from greenops.planning.regions import RegionCatalog
from greenops.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_POWER_KW_PER_REPLICA = 0.1
DEFAULT_CARBON_INTENSITY = 500.0
DEFAULT_COST_PER_REPLICA = 0.25
DEFAULT_USD_TO_INR = 85.0


@dataclass(frozen=True)
class FootprintEstimate:
    """Estimated hourly footprint of one deployment."""

    replicas: int
    energy_kwh: float
    co2_kg: float
    cost_usd: float
    cost_inr: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "estimatedHourlyEnergyKwh": self.energy_kwh,
            "estimatedHourlyCO2Kg": self.co2_kg,
            "estimatedHourlyCostUsd": self.cost_usd,
            "estimatedHourlyCostInr": self.cost_inr,
        }


def estimate_footprint(
    replicas: int | None,
    carbon_intensity: float,
    cost_per_replica: float,
    power_kw_per_replica: float = DEFAULT_POWER_KW_PER_REPLICA,
    usd_to_inr: float = DEFAULT_USD_TO_INR,
) -> FootprintEstimate:
    """
    Estimate hourly energy, CO2 and cost.

    Args:
        replicas: Replica count; missing or non-positive counts as one
        carbon_intensity: Grid intensity in gCO2eq/kWh
        cost_per_replica: USD per replica-hour
        power_kw_per_replica: Assumed draw of one replica
        usd_to_inr: Conversion rate for the INR figure

    Returns:
        FootprintEstimate rounded to 3/3/4/2 decimal places
    """
    usable = isinstance(replicas, int) and not isinstance(replicas, bool) and replicas > 0
    safe_replicas = replicas if usable else 1
    energy_kwh = safe_replicas * power_kw_per_replica
    co2_kg = (carbon_intensity / 1000) * energy_kwh
    cost_usd = cost_per_replica * safe_replicas

    return FootprintEstimate(
        replicas=safe_replicas,
        energy_kwh=round(energy_kwh, 3),
        co2_kg=round(co2_kg, 3),
        cost_usd=round(cost_usd, 4),
        cost_inr=round(cost_usd * usd_to_inr, 2),
    )


@dataclass(frozen=True)
class DeploymentRecord:
    """One realized deployment."""

    plan_id: str
    region: str
    region_label: str
    carbon_intensity: float
    replicas: int
    footprint: FootprintEstimate
    scores: dict[str, float] | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "planId": self.plan_id,
            "region": self.region,
            "regionLabel": self.region_label,
            "carbonIntensity_gCo2PerKwh": self.carbon_intensity,
            "replicas": self.replicas,
            "scores": self.scores,
            **self.footprint.to_dict(),
        }


@dataclass
class GroupStats:
    """Aggregates for deployments sharing a plan or region."""

    key: str
    label: str | None = None
    deployments: int = 0
    total_co2_kg: float = 0.0
    total_ci: float = 0.0
    total_cost_usd: float = 0.0

    def add(self, record: DeploymentRecord) -> None:
        self.deployments += 1
        self.total_co2_kg += record.footprint.co2_kg
        self.total_ci += record.carbon_intensity
        self.total_cost_usd += record.footprint.cost_usd

    @property
    def avg_ci(self) -> float:
        return self.total_ci / self.deployments if self.deployments > 0 else 0.0

    @property
    def avg_cost_usd(self) -> float:
        return self.total_cost_usd / self.deployments if self.deployments > 0 else 0.0


@dataclass(frozen=True)
class AnalyticsSummary:
    """Totals across all recorded deployments."""

    total_deployments: int
    total_co2_kg: float
    average_carbon_intensity: float
    total_cost_usd: float
    total_cost_inr: float
    baseline_cost_usd: float
    baseline_cost_inr: float
    savings_usd: float
    savings_inr: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "totalDeployments": self.total_deployments,
            "totalEstimatedHourlyCO2Kg": round(self.total_co2_kg, 3),
            "averageCarbonIntensity_gCo2PerKwh": round(self.average_carbon_intensity, 2),
            "totalEstimatedHourlyCostUsd": round(self.total_cost_usd, 4),
            "totalEstimatedHourlyCostInr": round(self.total_cost_inr, 2),
            "baselineEstimatedHourlyCostUsd": round(self.baseline_cost_usd, 4),
            "baselineEstimatedHourlyCostInr": round(self.baseline_cost_inr, 2),
            "estimatedHourlySavingsUsd": round(self.savings_usd, 4),
            "estimatedHourlySavingsInr": round(self.savings_inr, 2),
        }


class AnalyticsTracker:
    """
    Append-only deployment history with summary views.

    The baseline prices every deployment at the most expensive catalog
    region, so savings show what region selection saved.
    """

    def __init__(
        self,
        catalog: RegionCatalog,
        usd_to_inr: float = DEFAULT_USD_TO_INR,
        power_kw_per_replica: float = DEFAULT_POWER_KW_PER_REPLICA,
        fallback_carbon_intensity: float = DEFAULT_CARBON_INTENSITY,
        fallback_cost_per_replica: float = DEFAULT_COST_PER_REPLICA,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize analytics tracker.

        Args:
            catalog: Region catalog for costs and the baseline
            usd_to_inr: Conversion rate for INR figures
            power_kw_per_replica: Assumed draw of one replica
            fallback_carbon_intensity: Used when a deployment reports none
            fallback_cost_per_replica: Used for regions outside the catalog
            clock: Timestamp source for new records
        """
        self.catalog = catalog
        self.usd_to_inr = usd_to_inr
        self.power_kw_per_replica = power_kw_per_replica
        self.fallback_carbon_intensity = fallback_carbon_intensity
        self.fallback_cost_per_replica = fallback_cost_per_replica
        self._clock = clock or (lambda: datetime.now(UTC))
        self._records: list[DeploymentRecord] = []

    @property
    def records(self) -> tuple[DeploymentRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def estimate(
        self,
        region_id: str,
        replicas: int | None,
        carbon_intensity: float | None,
    ) -> FootprintEstimate:
        """Footprint of a prospective deployment."""
        region = self.catalog.get(region_id)
        cost_per_replica = region.base_cost if region else self.fallback_cost_per_replica
        ci = self._carbon_intensity(carbon_intensity)

        return estimate_footprint(
            replicas,
            carbon_intensity=ci,
            cost_per_replica=cost_per_replica,
            power_kw_per_replica=self.power_kw_per_replica,
            usd_to_inr=self.usd_to_inr,
        )

    def record(
        self,
        plan_id: str,
        region_id: str,
        replicas: int | None,
        carbon_intensity: float | None,
        region_label: str | None = None,
        scores: dict[str, float] | None = None,
    ) -> DeploymentRecord:
        """
        Append a deployment to the history.

        Returns:
            The created DeploymentRecord
        """
        footprint = self.estimate(region_id, replicas, carbon_intensity)
        record = DeploymentRecord(
            plan_id=plan_id,
            region=region_id,
            region_label=region_label or region_id,
            carbon_intensity=self._carbon_intensity(carbon_intensity),
            replicas=footprint.replicas,
            footprint=footprint,
            scores=scores,
            timestamp=self._clock(),
        )
        self._records.append(record)

        logger.debug(
            "Deployment recorded",
            plan_id=plan_id,
            region=region_id,
            replicas=record.replicas,
            co2_kg=footprint.co2_kg,
        )
        return record

    def _carbon_intensity(self, value: float | None) -> float:
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or not math.isfinite(value)
            or value < 0
        ):
            return self.fallback_carbon_intensity
        return float(value)

    def summary(self) -> AnalyticsSummary:
        """Totals across every recorded deployment."""
        max_base_cost = self.catalog.max_base_cost
        total = len(self._records)

        total_co2 = sum(r.footprint.co2_kg for r in self._records)
        total_ci = sum(r.carbon_intensity for r in self._records)
        total_cost = sum(r.footprint.cost_usd for r in self._records)
        baseline = sum(max_base_cost * r.replicas for r in self._records)
        savings = baseline - total_cost

        return AnalyticsSummary(
            total_deployments=total,
            total_co2_kg=total_co2,
            average_carbon_intensity=total_ci / total if total > 0 else 0.0,
            total_cost_usd=total_cost,
            total_cost_inr=total_cost * self.usd_to_inr,
            baseline_cost_usd=baseline,
            baseline_cost_inr=baseline * self.usd_to_inr,
            savings_usd=savings,
            savings_inr=savings * self.usd_to_inr,
        )

    def by_plan(self) -> list[GroupStats]:
        """Aggregates per plan id, in first-seen order."""
        groups: dict[str, GroupStats] = {}
        for record in self._records:
            groups.setdefault(record.plan_id, GroupStats(key=record.plan_id)).add(record)
        return list(groups.values())

    def by_region(self) -> list[GroupStats]:
        """Aggregates per region, in first-seen order."""
        groups: dict[str, GroupStats] = {}
        for record in self._records:
            stats = groups.setdefault(
                record.region,
                GroupStats(key=record.region, label=record.region_label),
            )
            stats.add(record)
        return list(groups.values())

    def _group_to_dict(self, stats: GroupStats, key_name: str) -> dict[str, Any]:
        data: dict[str, Any] = {key_name: stats.key}
        if stats.label is not None:
            data["regionLabel"] = stats.label
        data.update({
            "deployments": stats.deployments,
            "totalCO2": stats.total_co2_kg,
            "totalCI": stats.total_ci,
            "totalCostUsd": stats.total_cost_usd,
            "avgCI": stats.avg_ci,
            "avgCostUsd": stats.avg_cost_usd,
            "totalCostInr": round(stats.total_cost_usd * self.usd_to_inr, 2),
        })
        return data

    def report(self) -> dict[str, Any]:
        """Full analytics view: summary, groupings and raw history."""
        return {
            "summary": self.summary().to_dict(),
            "byPlan": [self._group_to_dict(s, "planId") for s in self.by_plan()],
            "byRegion": [self._group_to_dict(s, "region") for s in self.by_region()],
            "deployments": [r.to_dict() for r in self._records],
            "currency": {"usdToInr": self.usd_to_inr},
        }
