"""
FastAPI application for the GreenOps planner.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST

from config.settings import get_settings
from greenops.monitoring.metrics import get_planner_metrics
from greenops.planning.exceptions import InvalidDeploymentRequest, InvalidPlanningRequest
from greenops.services.deployment import get_deployment_service
from greenops.services.planning import get_planning_service
from greenops.utils.logging import get_logger, setup_logging

from .middleware import RequestIdMiddleware, request_timing_middleware
from .routes import analytics, deploy, health, plan

# Initialize logging
setup_logging()
logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown."""
    logger.info("Starting GreenOps planner", env=settings.env)

    planning_service = get_planning_service()
    deployment_service = get_deployment_service()

    logger.info(
        "GreenOps planner started",
        live_carbon=planning_service.live_data_enabled,
        deploy_enabled=deployment_service.executor.enabled,
    )

    yield

    logger.info("Shutting down GreenOps planner")
    await planning_service.close()
    logger.info("GreenOps planner shutdown complete")


app = FastAPI(
    title="GreenOps Planner",
    description="Carbon-aware region scoring and Kubernetes deployment planning",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)
app.middleware("http")(request_timing_middleware)


@app.exception_handler(InvalidPlanningRequest)
@app.exception_handler(InvalidDeploymentRequest)
async def invalid_request_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report caller input errors as 400 with an error message."""
    logger.warning("Rejected request", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.exception("Unhandled exception", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


@app.get("/metrics")
async def prometheus_metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=get_planner_metrics().export(), media_type=CONTENT_TYPE_LATEST)


app.include_router(health.router)
app.include_router(plan.router, prefix="/api")
app.include_router(deploy.router, prefix="/api")
app.include_router(analytics.router, prefix="/api")


def main() -> None:
    """Entry point for running the application."""
    import uvicorn

    uvicorn.run(
        "greenops.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    main()
