"""
Deployment analytics routes.
"""

from typing import Any

from fastapi import APIRouter, Depends

from greenops.services.deployment import DeploymentService, get_deployment_service

router = APIRouter(tags=["Analytics"])


@router.get("/analytics")
async def get_analytics(
    service: DeploymentService = Depends(get_deployment_service),
) -> dict[str, Any]:
    """Summary, per-plan and per-region totals, and the raw deployment history."""
    return service.tracker.report()
