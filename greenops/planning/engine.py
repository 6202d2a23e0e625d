"""
Plan assembly for placement requests.

Responsibilities:
- Validate the planning request before any scoring
- Fetch carbon intensity for every catalog region concurrently
- Normalize carbon and cost, estimate latency per region
- Size replicas once per request
- For each strategy: weight scores, pick the best region, render a manifest
- Produce human-readable notes explaining each decision
"""

import asyncio
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from greenops.monitoring.metrics import PlannerMetrics
from greenops.planning.capacity import (
    WorkloadComponent,
    count_runtime_components,
    estimate_replicas,
)
from greenops.planning.carbon import CarbonIntensitySource, CarbonReading
from greenops.planning.exceptions import InvalidPlanningRequest
from greenops.planning.manifest import ManifestGenerator
from greenops.planning.regions import Region, RegionCatalog
from greenops.planning.scoring import (
    LatencyEstimator,
    ScoreSet,
    normalize_scores,
    select_best,
)
from greenops.planning.strategies import (
    LatencyTolerance,
    Strategy,
    WeightPolicy,
    Weights,
)
from greenops.utils.logging import get_logger, log_context

logger = get_logger(__name__)

CLUSTER_TYPE = "kubernetes"


def _round(x: float) -> float:
    return round(x, 2)


@dataclass
class PlanningRequest:
    """Input to a planning run."""

    components: list[WorkloadComponent]
    user_region: str = "global"
    latency_tolerance: LatencyTolerance = LatencyTolerance.BALANCED
    optimization_preference: str = "balanced"

    def validate(self) -> None:
        """
        Raises:
            InvalidPlanningRequest: If there are no components
        """
        if not self.components:
            raise InvalidPlanningRequest(
                "At least one component is required to generate a plan."
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "components": [c.to_dict() for c in self.components],
            "user_region": self.user_region,
            "latency_tolerance": LatencyTolerance(self.latency_tolerance).value,
            "optimization_preference": self.optimization_preference,
        }


@dataclass
class Plan:
    """Placement decision for one strategy."""

    strategy: Strategy
    label: str
    description: str
    region: Region
    instance_class: str
    replicas: int
    scores: ScoreSet
    carbon: CarbonReading
    weights: Weights
    manifest: str
    notes: list[str] = field(default_factory=list)
    cluster_type: str = CLUSTER_TYPE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with presentation rounding."""
        return {
            "strategy": self.strategy.value,
            "label": self.label,
            "description": self.description,
            "region": self.region.id,
            "region_label": self.region.label,
            "cluster_type": self.cluster_type,
            "instance_class": self.instance_class,
            "replicas": self.replicas,
            "scores": self.scores.rounded(),
            "carbon_intensity": {
                "value": _round(self.carbon.value),
                "source": self.carbon.source.value,
            },
            "weights": {k: _round(v) for k, v in self.weights.to_dict().items()},
            "notes": list(self.notes),
            "manifest": self.manifest,
        }


@dataclass
class PlanningResult:
    """All plans produced for one request."""

    request: PlanningRequest
    readings: list[CarbonReading]
    region_scores: list[ScoreSet]
    plans: list[Plan]
    live_data_enabled: bool = False

    def plan_for(self, strategy: Strategy) -> Plan:
        for plan in self.plans:
            if plan.strategy == Strategy(strategy):
                return plan
        raise KeyError(strategy)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "request": self.request.to_dict(),
            "live_data_enabled": self.live_data_enabled,
            "readings": [r.to_dict() for r in self.readings],
            "region_scores": [s.to_dict() for s in self.region_scores],
            "plans": [p.to_dict() for p in self.plans],
        }


class PlanAssembler:
    """
    Orchestrates region scoring and plan generation.

    Holds only immutable collaborators, so one assembler can serve
    concurrent requests.

    Production callers keep the default strategy set so every response
    carries one plan per strategy. A narrower set is for isolating a single
    strategy in tests; it must be non-empty and free of duplicates.
    """

    def __init__(
        self,
        catalog: RegionCatalog,
        carbon_source: CarbonIntensitySource,
        weight_policy: WeightPolicy | None = None,
        latency_estimator: LatencyEstimator | None = None,
        manifest_generator: ManifestGenerator | None = None,
        metrics: PlannerMetrics | None = None,
        strategies: Sequence[Strategy] = tuple(Strategy),
    ) -> None:
        self.catalog = catalog
        self.carbon_source = carbon_source
        self.weight_policy = weight_policy or WeightPolicy()
        self.latency_estimator = latency_estimator or LatencyEstimator()
        self.manifest_generator = manifest_generator or ManifestGenerator()
        self.metrics = metrics
        self.strategies = tuple(Strategy(s) for s in strategies)
        if not self.strategies:
            raise ValueError("At least one strategy is required")
        if len(set(self.strategies)) != len(self.strategies):
            raise ValueError(f"Duplicate strategies: {[s.value for s in self.strategies]}")

    async def fetch_readings(self) -> list[CarbonReading]:
        """One reading per catalog region, in catalog order."""
        readings = await asyncio.gather(
            *(self.carbon_source.get_reading(region) for region in self.catalog)
        )
        if self.metrics:
            for reading in readings:
                self.metrics.record_carbon_reading(reading.source.value)
        return list(readings)

    def score_regions(
        self,
        readings: Sequence[CarbonReading],
        user_region: str | None,
    ) -> list[ScoreSet]:
        """Unweighted co2/latency/cost scores per catalog region."""
        regions = self.catalog.regions
        if len(readings) != len(regions):
            raise ValueError(
                f"Expected {len(regions)} carbon readings, got {len(readings)}"
            )

        co2_scores = normalize_scores([r.value for r in readings], invert=True)
        cost_scores = normalize_scores([r.base_cost for r in regions], invert=True)
        latency_scores = self.latency_estimator.score_regions(user_region, regions)

        return [
            ScoreSet(region=region, co2=co2, latency=latency, cost=cost)
            for region, co2, latency, cost in zip(
                regions, co2_scores, latency_scores, cost_scores
            )
        ]

    def build_plan(
        self,
        strategy: Strategy,
        request: PlanningRequest,
        region_scores: Sequence[ScoreSet],
        readings: Sequence[CarbonReading],
        replicas: int,
    ) -> Plan:
        """Weight scores for one strategy and render its manifest."""
        profile = self.weight_policy.profile(strategy)
        tolerance = LatencyTolerance(request.latency_tolerance)
        weights = self.weight_policy.weights(strategy, tolerance)

        weighted = [s.with_overall(weights) for s in region_scores]
        best = select_best(weighted)
        reading = next(r for s, r in zip(weighted, readings) if s is best)

        manifest = self.manifest_generator.render(
            plan_id=profile.strategy.value,
            region_id=best.region.id,
            instance_class=profile.instance_class,
            replicas=replicas,
            components=request.components,
        )

        runtime_count = count_runtime_components(request.components)
        notes = [
            f"Strategy: {profile.label}",
            (
                f"Selected region {best.region.id} ({best.region.label}) based on "
                "combined CO₂, latency, and cost scores."
            ),
            (
                f"Estimated grid carbon intensity: {_round(reading.value)} gCO₂eq/kWh "
                f"(source: {reading.source.value})."
            ),
            (
                f"Recommended replicas: {replicas} (derived from {runtime_count} runtime "
                f'components and "{tolerance.value}" latency tolerance).'
            ),
            (
                f"Weights used: CO₂ {_round(weights.co2)}, Latency "
                f"{_round(weights.latency)}, Cost {_round(weights.cost)}."
            ),
        ]

        logger.debug(
            "Strategy evaluated",
            strategy=strategy.value,
            region=best.region.id,
            overall=best.overall,
        )

        return Plan(
            strategy=profile.strategy,
            label=f"{profile.label} Plan",
            description=profile.description,
            region=best.region,
            instance_class=profile.instance_class,
            replicas=replicas,
            scores=best,
            carbon=reading,
            weights=weights,
            manifest=manifest,
            notes=notes,
        )

    async def plan(self, request: PlanningRequest) -> PlanningResult:
        """
        Produce one plan per strategy.

        Args:
            request: Workload description and preferences

        Returns:
            PlanningResult with a plan for every configured strategy

        Raises:
            InvalidPlanningRequest: If the request has no components
        """
        start = time.perf_counter()
        try:
            request.validate()
        except InvalidPlanningRequest:
            if self.metrics:
                self.metrics.record_planning_request("rejected")
            raise

        with log_context(user_region=request.user_region):
            readings = await self.fetch_readings()
            region_scores = self.score_regions(readings, request.user_region)
            replicas = estimate_replicas(request.components, request.latency_tolerance)

            plans = [
                self.build_plan(strategy, request, region_scores, readings, replicas)
                for strategy in self.strategies
            ]

            duration = time.perf_counter() - start
            if self.metrics:
                for plan in plans:
                    self.metrics.record_plan(plan.strategy.value, plan.region.id)
                self.metrics.record_planning_request("ok", duration)

            logger.info(
                "Plans generated",
                components=len(request.components),
                replicas=replicas,
                live_readings=sum(1 for r in readings if r.is_live),
                selections={p.strategy.value: p.region.id for p in plans},
                duration_ms=round(duration * 1000, 2),
            )

        return PlanningResult(
            request=request,
            readings=readings,
            region_scores=region_scores,
            plans=plans,
            live_data_enabled=self.carbon_source.is_live,
        )
