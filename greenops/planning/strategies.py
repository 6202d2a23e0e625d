"""
Optimization strategies and the weight policy.

Each strategy carries one fixed profile: base (co2, latency, cost) weights,
the instance class it deploys with and human-readable text. The weight
policy biases the base weights by latency tolerance and renormalizes.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from greenops.utils.logging import get_logger

logger = get_logger(__name__)


class Strategy(str, Enum):
    """Optimization strategies evaluated for every planning request."""

    BALANCED = "balanced"
    MAX_GREEN = "max-green"
    BUDGET = "budget"


class LatencyTolerance(str, Enum):
    """Caller-declared sensitivity to network latency."""

    STRICT = "strict"
    BALANCED = "balanced"
    RELAXED = "relaxed"

    @classmethod
    def parse(cls, value: "str | LatencyTolerance | None") -> "LatencyTolerance":
        """
        Lenient conversion used at the request boundary.

        Unknown or missing values score like ``balanced``.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            logger.debug("Unknown latency tolerance, using balanced", value=value)
            return cls.BALANCED


@dataclass(frozen=True)
class Weights:
    """Relative importance of each score; sums to 1 after normalization."""

    co2: float
    latency: float
    cost: float

    @property
    def total(self) -> float:
        return self.co2 + self.latency + self.cost

    def scaled(self, co2: float, latency: float, cost: float) -> "Weights":
        return Weights(self.co2 * co2, self.latency * latency, self.cost * cost)

    def normalized(self) -> "Weights":
        total = self.total
        return Weights(self.co2 / total, self.latency / total, self.cost / total)

    def to_dict(self) -> dict[str, float]:
        return {"co2": self.co2, "latency": self.latency, "cost": self.cost}


@dataclass(frozen=True)
class StrategyProfile:
    """Fixed settings attached to a strategy."""

    strategy: Strategy
    label: str
    description: str
    instance_class: str
    base_weights: Weights


DEFAULT_STRATEGY_PROFILES: Mapping[Strategy, StrategyProfile] = MappingProxyType({
    Strategy.BALANCED: StrategyProfile(
        strategy=Strategy.BALANCED,
        label="Balanced",
        description=(
            "Balanced trade-off between carbon efficiency, latency, and cost "
            "for general workloads."
        ),
        instance_class="standard-medium",
        base_weights=Weights(co2=0.34, latency=0.33, cost=0.33),
    ),
    Strategy.MAX_GREEN: StrategyProfile(
        strategy=Strategy.MAX_GREEN,
        label="Max Green",
        description=(
            "Prioritizes regions with lower carbon intensity while still keeping "
            "latency and cost within acceptable bounds."
        ),
        instance_class="eco-small",
        base_weights=Weights(co2=0.60, latency=0.25, cost=0.15),
    ),
    Strategy.BUDGET: StrategyProfile(
        strategy=Strategy.BUDGET,
        label="Budget Friendly",
        description=(
            "Prioritizes lower-cost regions and instance types, while keeping "
            "latency and carbon footprint reasonable."
        ),
        instance_class="standard-small",
        base_weights=Weights(co2=0.15, latency=0.25, cost=0.60),
    ),
})

# (co2, latency, cost) multipliers
TOLERANCE_ADJUSTMENTS: Mapping[LatencyTolerance, tuple[float, float, float]] = MappingProxyType({
    LatencyTolerance.STRICT: (0.9, 1.2, 0.9),
    LatencyTolerance.BALANCED: (1.0, 1.0, 1.0),
    LatencyTolerance.RELAXED: (1.1, 0.7, 1.1),
})


class WeightPolicy:
    """
    Produces normalized weights for a strategy and latency tolerance.

    Profiles are injected so tests can use their own table. A table
    missing any strategy is rejected with ValueError.
    """

    def __init__(
        self,
        profiles: Mapping[Strategy, StrategyProfile] | None = None,
    ) -> None:
        self._profiles = profiles if profiles is not None else DEFAULT_STRATEGY_PROFILES
        missing = [s for s in Strategy if s not in self._profiles]
        if missing:
            raise ValueError(f"Missing strategy profiles: {[s.value for s in missing]}")

    def profile(self, strategy: Strategy) -> StrategyProfile:
        """Get the fixed profile for a strategy."""
        return self._profiles[Strategy(strategy)]

    def weights(self, strategy: Strategy, tolerance: LatencyTolerance) -> Weights:
        """
        Compute weights for a strategy.

        Args:
            strategy: Optimization strategy
            tolerance: Latency tolerance biasing latency vs. the other two

        Returns:
            Weights whose components sum to 1.0
        """
        base = self.profile(strategy).base_weights
        co2, latency, cost = TOLERANCE_ADJUSTMENTS[LatencyTolerance(tolerance)]
        return base.scaled(co2, latency, cost).normalized()
