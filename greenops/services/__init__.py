"""
Services for the placement planner.

This module provides:
- Planning service for producing placement plans
- Deployment service for recording and applying a selected plan
"""

from greenops.services.deployment import (
    DeploymentOutcome,
    DeploymentRequest,
    DeploymentService,
    get_deployment_service,
    init_deployment_service,
)
from greenops.services.planning import (
    PlanningService,
    get_planning_service,
    init_planning_service,
)

__all__ = [
    # Planning
    "PlanningService",
    "get_planning_service",
    "init_planning_service",
    # Deployment
    "DeploymentRequest",
    "DeploymentOutcome",
    "DeploymentService",
    "get_deployment_service",
    "init_deployment_service",
]
