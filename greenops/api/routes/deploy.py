"""
Deployment API routes.
"""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from greenops.execution.base import ExecutionStatus
from greenops.services.deployment import (
    DeploymentOutcome,
    DeploymentRequest,
    DeploymentService,
    get_deployment_service,
)

router = APIRouter(tags=["Deployment"])


class DeployRequestBody(BaseModel):
    """Request body for deploying a plan."""

    planId: str | None = None
    region: str | None = None
    regionLabel: str | None = None
    # Taken as sent; analytics substitutes defaults for unusable values
    carbonIntensity: Any = None
    replicas: Any = None
    scores: Any = None
    kubernetesYaml: str | None = None


def _analytics(outcome: DeploymentOutcome) -> dict[str, Any]:
    record = outcome.record
    return {
        "timestamp": record.timestamp.isoformat(),
        **record.footprint.to_dict(),
    }


def _response(outcome: DeploymentOutcome) -> JSONResponse:
    execution = outcome.execution

    if execution.status == ExecutionStatus.ERROR:
        # Manifest could not be written; nothing ran
        if execution.command is None:
            return JSONResponse(
                status_code=500,
                content={"error": execution.message, "details": execution.error},
            )
        return JSONResponse(
            status_code=500,
            content={
                "status": execution.status.value,
                "message": execution.message,
                "command": execution.command,
                "error": execution.error,
                "stdout": execution.stdout,
                "stderr": execution.stderr,
            },
        )

    content: dict[str, Any] = {
        "status": execution.status.value,
        "message": execution.message,
        "command": execution.command,
    }
    if execution.status == ExecutionStatus.OK:
        content["kubectl"] = {"stdout": execution.stdout, "stderr": execution.stderr}
    content["analytics"] = _analytics(outcome)

    return JSONResponse(status_code=200, content=content)


@router.post("/deploy")
async def deploy_plan(
    body: DeployRequestBody,
    service: DeploymentService = Depends(get_deployment_service),
) -> JSONResponse:
    """
    Record a deployment and apply its manifest.

    With deployment disabled this is a dry run: the manifest is written
    to a temporary file and the kubectl command is returned, not executed.
    """
    request = DeploymentRequest(
        plan_id=body.planId or "",
        region=body.region or "",
        manifest=body.kubernetesYaml or "",
        region_label=body.regionLabel,
        carbon_intensity=body.carbonIntensity,
        replicas=body.replicas,
        scores=body.scores if isinstance(body.scores, dict) else None,
    )

    outcome = await service.deploy(request)
    return _response(outcome)
