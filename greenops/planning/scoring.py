"""
Score normalization and latency estimation.

All scores are in [0, 1] with higher meaning better.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from greenops.planning.regions import GeoGroup, Region
from greenops.planning.strategies import Weights

# Returned for every element when a metric does not discriminate between regions
NEUTRAL_SCORE = 0.7

# Latency proxy when affinity or geography has no table entry
DEFAULT_LATENCY_SCORE = 0.6


def normalize_scores(values: Sequence[float], invert: bool = False) -> list[float]:
    """
    Min-max scale values into [0, 1], preserving order.

    Args:
        values: Raw metric values
        invert: Negate before scaling so that lower raw values score higher

    Returns:
        One score per input value
    """
    if not values:
        return []

    v = [-x for x in values] if invert else list(values)
    low = min(v)
    high = max(v)

    if high == low:
        return [NEUTRAL_SCORE] * len(v)

    span = high - low
    return [(x - low) / span for x in v]


# Caller-declared affinity -> geography group it targets
AFFINITY_TARGETS: Mapping[str, GeoGroup] = MappingProxyType({
    "ap-south": GeoGroup.AP_SOUTH,
    "eu-west": GeoGroup.EU,
    "us-east": GeoGroup.US_EAST,
    "us-west": GeoGroup.US_WEST,
})

PROXIMITY: Mapping[GeoGroup, Mapping[GeoGroup, float]] = MappingProxyType({
    GeoGroup.AP_SOUTH: {
        GeoGroup.AP_SOUTH: 1.0,
        GeoGroup.AP_SOUTHEAST: 0.85,
        GeoGroup.EU: 0.6,
        GeoGroup.US_EAST: 0.45,
        GeoGroup.US_WEST: 0.45,
    },
    GeoGroup.EU: {
        GeoGroup.EU: 1.0,
        GeoGroup.US_EAST: 0.8,
        GeoGroup.US_WEST: 0.7,
        GeoGroup.AP_SOUTH: 0.55,
        GeoGroup.AP_SOUTHEAST: 0.55,
    },
    GeoGroup.US_EAST: {
        GeoGroup.US_EAST: 1.0,
        GeoGroup.EU: 0.8,
        GeoGroup.US_WEST: 0.75,
        GeoGroup.AP_SOUTH: 0.5,
        GeoGroup.AP_SOUTHEAST: 0.5,
    },
    GeoGroup.US_WEST: {
        GeoGroup.US_WEST: 1.0,
        GeoGroup.US_EAST: 0.8,
        GeoGroup.AP_SOUTHEAST: 0.7,
        GeoGroup.EU: 0.6,
        GeoGroup.AP_SOUTH: 0.5,
    },
})


class LatencyEstimator:
    """
    Latency proxy from caller affinity and region geography.

    ``global`` and unrecognized affinities score every region the same.
    """

    def __init__(
        self,
        proximity: Mapping[GeoGroup, Mapping[GeoGroup, float]] | None = None,
        default_score: float = DEFAULT_LATENCY_SCORE,
    ) -> None:
        self._proximity = proximity if proximity is not None else PROXIMITY
        self._default = default_score

    def score(self, affinity: str | None, geo_group: GeoGroup | str) -> float:
        target = AFFINITY_TARGETS.get(affinity or "")
        if target is None:
            return self._default

        try:
            group = GeoGroup(geo_group)
        except ValueError:
            return self._default

        return self._proximity.get(target, {}).get(group, self._default)

    def score_regions(self, affinity: str | None, regions: Sequence[Region]) -> list[float]:
        """Latency score for each region, in order."""
        return [self.score(affinity, r.geo_group) for r in regions]


@dataclass
class ScoreSet:
    """Per-region scores for one planning request."""

    region: Region
    co2: float
    latency: float
    cost: float
    overall: float | None = None

    def weighted(self, weights: Weights) -> float:
        """Overall score under the given weights."""
        return (
            self.co2 * weights.co2
            + self.latency * weights.latency
            + self.cost * weights.cost
        )

    def with_overall(self, weights: Weights) -> "ScoreSet":
        return ScoreSet(
            region=self.region,
            co2=self.co2,
            latency=self.latency,
            cost=self.cost,
            overall=self.weighted(weights),
        )

    def rounded(self, digits: int = 2) -> dict[str, float]:
        """Scores rounded for presentation."""
        scores = {
            "co2": round(self.co2, digits),
            "latency": round(self.latency, digits),
            "cost": round(self.cost, digits),
        }
        if self.overall is not None:
            scores["overall"] = round(self.overall, digits)
        return scores

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, rounded like plan scores."""
        return {"region": self.region.id, **self.rounded()}


def select_best(scored: Sequence[ScoreSet]) -> ScoreSet:
    """
    Highest overall score; the first one in catalog order wins ties.

    Raises:
        ValueError: If there is nothing to select from
    """
    if not scored:
        raise ValueError("No scored regions to select from")

    best = scored[0]
    for candidate in scored[1:]:
        if (candidate.overall or 0.0) > (best.overall or 0.0):
            best = candidate
    return best
