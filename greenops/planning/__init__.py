"""
Placement planning module.

This module provides:
- Region catalog: candidate regions and their fixed attributes
- Strategies: optimization profiles and the weight policy
- Scoring: score normalization and latency estimation
- Capacity: workload components and replica sizing
- Manifest: Kubernetes manifest generation
- Engine: plan assembly across all strategies
"""

from .capacity import (
    MAX_REPLICAS,
    RUNTIME_TYPES,
    WorkloadComponent,
    count_runtime_components,
    estimate_replicas,
    runtime_components,
)
from .carbon import (
    CarbonIntensitySource,
    CarbonReading,
    ReadingSource,
)
from .engine import (
    Plan,
    PlanAssembler,
    PlanningRequest,
    PlanningResult,
)
from .exceptions import (
    CatalogError,
    GreenOpsError,
    InvalidDeploymentRequest,
    InvalidPlanningRequest,
)
from .manifest import (
    ManifestConfig,
    ManifestGenerator,
    safe_name,
)
from .regions import (
    DEFAULT_REGIONS,
    GeoGroup,
    Region,
    RegionCatalog,
    default_region_catalog,
)
from .scoring import (
    NEUTRAL_SCORE,
    LatencyEstimator,
    ScoreSet,
    normalize_scores,
    select_best,
)
from .strategies import (
    DEFAULT_STRATEGY_PROFILES,
    LatencyTolerance,
    Strategy,
    StrategyProfile,
    WeightPolicy,
    Weights,
)

__all__ = [
    # Regions
    "GeoGroup",
    "Region",
    "RegionCatalog",
    "DEFAULT_REGIONS",
    "default_region_catalog",
    # Strategies
    "Strategy",
    "LatencyTolerance",
    "Weights",
    "StrategyProfile",
    "DEFAULT_STRATEGY_PROFILES",
    "WeightPolicy",
    # Scoring
    "NEUTRAL_SCORE",
    "normalize_scores",
    "LatencyEstimator",
    "ScoreSet",
    "select_best",
    # Carbon
    "CarbonIntensitySource",
    "CarbonReading",
    "ReadingSource",
    # Capacity
    "RUNTIME_TYPES",
    "MAX_REPLICAS",
    "WorkloadComponent",
    "runtime_components",
    "count_runtime_components",
    "estimate_replicas",
    # Manifest
    "ManifestConfig",
    "ManifestGenerator",
    "safe_name",
    # Engine
    "PlanningRequest",
    "Plan",
    "PlanningResult",
    "PlanAssembler",
    # Exceptions
    "GreenOpsError",
    "InvalidPlanningRequest",
    "InvalidDeploymentRequest",
    "CatalogError",
]
