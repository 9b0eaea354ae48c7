"""
tests.test_api

HTTP surface tests (allocation, compilation, planning).

Responsibilities:
- Exercise each router through the ASGI app without a network.
- Check that domain errors map to 422 responses.
"""

from __future__ import annotations

import base64
import json
from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from apigw_synth.api.app import create_app
from apigw_synth.settings import Settings
from tests.conftest import BACKEND_URL, FRONTEND_URL, IDENTITY_EMAIL

UPSTREAMS = {
    "backend": {"service_url": BACKEND_URL, "jwt_auth": {}},
    "frontend": {"service_url": FRONTEND_URL},
}


@pytest_asyncio.fixture
async def client() -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=Settings(env="test", default_region="europe-west4"))
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.mark.asyncio
async def test_allocate_name(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/v1/names",
        json={
            "segments": ["this-is-a-very-long-app-name", "backend-service", "service-account"],
            "max_length": 25,
        },
    )
    assert r.status_code == 200
    assert r.json() == {"name": "this-is-a-very-l-bac-serv"}


@pytest.mark.asyncio
async def test_allocate_name_degenerate_limit_is_422(client: httpx.AsyncClient) -> None:
    r = await client.post("/v1/names", json={"segments": ["abc", "def", "ghi"], "max_length": 3})
    assert r.status_code == 422
    assert "cannot fit" in r.json()["detail"]


@pytest.mark.asyncio
async def test_compile_spec_defaults_to_swagger2(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/v1/specs", json={"config": UPSTREAMS, "identity_email": IDENTITY_EMAIL}
    )
    assert r.status_code == 200
    body = r.json()
    assert body["swagger"] == "2.0"
    assert body["securityDefinitions"]["jwt_auth"]["x-google-issuer"] == IDENTITY_EMAIL
    assert body["paths"]["/api/v1/{proxy}"]["get"]["security"] == [{"jwt_auth": []}]
    assert "security" not in body["paths"]["/api/v1/{proxy}"]["options"]


@pytest.mark.asyncio
async def test_compile_spec_v3(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/v1/specs", json={"config": UPSTREAMS, "schema_version": "3.0", "title": "edge"}
    )
    assert r.status_code == 200
    body = r.json()
    assert body["openapi"] == "3.0.1"
    assert body["info"]["title"] == "edge"


@pytest.mark.asyncio
async def test_compile_spec_without_config_is_422(client: httpx.AsyncClient) -> None:
    r = await client.post("/v1/specs", json={})
    assert r.status_code == 422
    assert "APIConfig" in r.json()["detail"]


@pytest.mark.asyncio
async def test_plan_gateway(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/v1/gateways/plan",
        json={
            "stack_name": "my-fullstack",
            "backend_url": BACKEND_URL,
            "frontend_url": FRONTEND_URL,
            "labels": {"environment": "production"},
        },
    )
    assert r.status_code == 200
    plan = r.json()["plan"]
    assert plan["api_id"] == "my-fullstack-gateway-api"
    assert plan["region"] == "europe-west4"
    assert plan["labels"] == {"environment": "production", "gateway": "true"}
    document = json.loads(base64.b64decode(plan["document_contents"]))
    assert document["paths"]["/{proxy}"]["get"]["x-google-backend"]["address"] == FRONTEND_URL


@pytest.mark.asyncio
async def test_plan_disabled_gateway(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/v1/gateways/plan",
        json={
            "stack_name": "my-fullstack",
            "backend_url": BACKEND_URL,
            "frontend_url": FRONTEND_URL,
            "gateway": {"disabled": True},
        },
    )
    assert r.status_code == 200
    assert r.json() == {"plan": None}
