"""
apigw_synth.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness check (`/healthz`).
- Provide readiness check (`/readyz`).
"""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz() -> dict[str, str]:
    # The synthesis core has no external dependencies to check.
    return {"status": "ready"}
