"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from config.settings import AppSettings, get_settings

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


class ServiceStatusResponse(BaseModel):
    """Service status with integration configuration."""

    status: str
    app: str
    message: str
    electricityMaps: dict[str, bool]
    deploy: dict[str, bool | str | None]
    currency: dict[str, float]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(status="healthy")


@router.get("/health/live", response_model=HealthResponse)
async def liveness_check() -> HealthResponse:
    """Liveness probe for Kubernetes."""
    return HealthResponse(status="alive")


@router.get("/api/health", response_model=ServiceStatusResponse)
async def service_status(
    settings: AppSettings = Depends(get_settings),
) -> ServiceStatusResponse:
    """Report which integrations are configured."""
    return ServiceStatusResponse(
        status="ok",
        app="GreenOps Planner",
        message="Green by default",
        electricityMaps={"configured": settings.electricity_maps.is_configured},
        deploy={
            "enabled": settings.deploy.enabled,
            "kubectlContext": settings.deploy.kubectl_context,
        },
        currency={"usdToInr": settings.currency.usd_to_inr},
    )
