"""
apigw_synth.api.routers.gateways

Gateway planning endpoint.

Responsibilities:
- Apply gateway defaults for a stack and return the resolved gateway plan.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from apigw_synth.api.deps import settings_dep
from apigw_synth.gateway.plan import GatewayPlan, apply_gateway_defaults, plan_gateway
from apigw_synth.naming.namer import ResourceNamer
from apigw_synth.routing.models import GatewayArgs
from apigw_synth.settings import Settings

router = APIRouter(prefix="/v1/gateways", tags=["gateways"])


class PlanRequest(BaseModel):
    stack_name: str = Field(min_length=1, max_length=100)
    backend_url: str
    frontend_url: str
    gateway: GatewayArgs | None = None
    region: str | None = None
    labels: dict[str, str] = Field(default_factory=dict)
    identity_email: str | None = Field(default=None, max_length=320)


class PlanResponse(BaseModel):
    plan: GatewayPlan | None


@router.post("/plan", response_model=PlanResponse)
async def plan(body: PlanRequest, settings: Settings = Depends(settings_dep)) -> PlanResponse:
    args = apply_gateway_defaults(
        body.gateway,
        backend_url=body.backend_url,
        frontend_url=body.frontend_url,
        default_name=settings.default_gateway_name,
    )
    return PlanResponse(
        plan=plan_gateway(
            ResourceNamer(body.stack_name),
            args,
            region=body.region or settings.default_region,
            labels=body.labels,
            identity_email=body.identity_email,
        )
    )
