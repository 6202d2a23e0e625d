"""
Monitoring module for the placement planner.

This module provides:
- Prometheus metrics for planning and deployments
- Deployment analytics (footprint estimates, summaries, groupings)
"""

from greenops.monitoring.analytics import (
    AnalyticsSummary,
    AnalyticsTracker,
    DeploymentRecord,
    FootprintEstimate,
    GroupStats,
    estimate_footprint,
)
from greenops.monitoring.metrics import PlannerMetrics, get_planner_metrics

__all__ = [
    # Metrics
    "PlannerMetrics",
    "get_planner_metrics",
    # Analytics
    "FootprintEstimate",
    "estimate_footprint",
    "DeploymentRecord",
    "GroupStats",
    "AnalyticsSummary",
    "AnalyticsTracker",
]
