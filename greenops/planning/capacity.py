"""
Workload components and replica sizing.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from greenops.planning.strategies import LatencyTolerance

# Component types that consume compute and get a Deployment
RUNTIME_TYPES: frozenset[str] = frozenset({"api-gateway", "frontend", "container", "function"})

MIN_REPLICAS = 1
MAX_REPLICAS = 4


@dataclass(frozen=True)
class WorkloadComponent:
    """One part of the caller's workload."""

    name: str
    type: str

    @property
    def is_runtime(self) -> bool:
        return self.type in RUNTIME_TYPES

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.type}


def runtime_components(components: Iterable[WorkloadComponent]) -> list[WorkloadComponent]:
    """Runtime components, in input order."""
    return [c for c in components if c.is_runtime]


def count_runtime_components(components: Iterable[WorkloadComponent]) -> int:
    return len(runtime_components(components))


def estimate_replicas(
    components: Sequence[WorkloadComponent],
    tolerance: LatencyTolerance,
) -> int:
    """
    Replica count shared by every runtime component.

    One replica per two runtime components (at least one), one extra for
    strict latency tolerance with more than one runtime component, capped
    at MAX_REPLICAS.
    """
    runtime_count = count_runtime_components(components)
    replicas = max(MIN_REPLICAS, math.ceil(runtime_count / 2))

    if LatencyTolerance(tolerance) == LatencyTolerance.STRICT and runtime_count > 1:
        replicas += 1

    return min(replicas, MAX_REPLICAS)
