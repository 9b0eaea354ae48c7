"""
apigw_synth.api.routers.specs

Gateway document compilation endpoint.

Responsibilities:
- Compile a routing configuration into the gateway document.
- Return either the Swagger 2.0 document (default) or the OpenAPI 3 source document.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from apigw_synth.routing.compiler import compile_openapi, render_gateway_document
from apigw_synth.routing.models import APIConfig

router = APIRouter(prefix="/v1/specs", tags=["specs"])


class SpecRequest(BaseModel):
    config: APIConfig | None = None
    identity_email: str | None = Field(default=None, max_length=320)
    title: str | None = Field(default=None, max_length=256)
    schema_version: Literal["2.0", "3.0"] = "2.0"


@router.post("")
async def compile_spec(body: SpecRequest) -> dict[str, Any]:
    if body.schema_version == "3.0":
        return compile_openapi(
            body.config, identity_email=body.identity_email, title=body.title
        ).to_dict()

    document = render_gateway_document(
        body.config, identity_email=body.identity_email, title=body.title
    )
    return json.loads(document)
