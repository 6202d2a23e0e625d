"""
Planning API routes.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from greenops.planning.capacity import WorkloadComponent
from greenops.planning.engine import Plan, PlanningRequest
from greenops.planning.strategies import LatencyTolerance
from greenops.services.planning import PlanningService, get_planning_service

router = APIRouter(tags=["Planning"])


class ComponentIn(BaseModel):
    """One workload component."""

    name: str = ""
    type: str


class PlanRequestBody(BaseModel):
    """Request body for a planning run."""

    components: list[ComponentIn] = Field(default_factory=list)
    userRegion: str = "global"
    latencyTolerance: str = "balanced"
    optimizationPreference: str = "balanced"


class ScoresOut(BaseModel):
    co2: float
    latency: float
    cost: float
    overall: float


class CarbonIntensityOut(BaseModel):
    value_gCo2PerKwh: float
    source: str


class PlacementOut(BaseModel):
    region: str
    regionLabel: str
    clusterType: str
    instanceClass: str
    replicas: int


class PlanOut(BaseModel):
    """One strategy's plan."""

    id: str
    label: str
    description: str
    scores: ScoresOut
    carbonIntensity: CarbonIntensityOut
    civo: PlacementOut
    notes: list[str]
    kubernetesYaml: str


class PlanResponse(BaseModel):
    """All plans for a request."""

    inputEcho: PlanRequestBody
    electricityMaps: dict[str, bool]
    plans: list[PlanOut]


def _plan_out(plan: Plan) -> PlanOut:
    scores = plan.scores.rounded()
    return PlanOut(
        id=plan.strategy.value,
        label=plan.label,
        description=plan.description,
        scores=ScoresOut(**scores),
        carbonIntensity=CarbonIntensityOut(
            value_gCo2PerKwh=round(plan.carbon.value, 2),
            source=plan.carbon.source.value,
        ),
        civo=PlacementOut(
            region=plan.region.id,
            regionLabel=plan.region.label,
            clusterType=plan.cluster_type,
            instanceClass=plan.instance_class,
            replicas=plan.replicas,
        ),
        notes=plan.notes,
        kubernetesYaml=plan.manifest,
    )


@router.post("/plan", response_model=PlanResponse)
async def create_plan(
    body: PlanRequestBody,
    service: PlanningService = Depends(get_planning_service),
) -> PlanResponse:
    """
    Score every region and return one plan per strategy.

    An empty component list is rejected with 400 before any scoring.
    """
    request = PlanningRequest(
        components=[WorkloadComponent(name=c.name, type=c.type) for c in body.components],
        user_region=body.userRegion,
        latency_tolerance=LatencyTolerance.parse(body.latencyTolerance),
        optimization_preference=body.optimizationPreference,
    )

    result = await service.plan(request)

    return PlanResponse(
        inputEcho=body,
        electricityMaps={"enabled": result.live_data_enabled},
        plans=[_plan_out(p) for p in result.plans],
    )
