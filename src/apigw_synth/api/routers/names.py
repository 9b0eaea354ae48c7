"""
apigw_synth.api.routers.names

Name allocation endpoint.

Responsibilities:
- Expose the length-bounded name allocator to orchestration tooling.
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

from apigw_synth.naming.allocator import allocate_name

router = APIRouter(prefix="/v1/names", tags=["names"])


class NameRequest(BaseModel):
    segments: list[str] = Field(min_length=1, max_length=8)
    max_length: int = Field(ge=1, le=1024)


class NameResponse(BaseModel):
    name: str


@router.post("", response_model=NameResponse)
async def allocate(body: NameRequest) -> NameResponse:
    # NameAllocationError is mapped to 422 by the app factory.
    return NameResponse(name=allocate_name(body.segments, body.max_length))
