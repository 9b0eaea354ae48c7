"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.

Responsibilities:
- Ensure the FastAPI app starts and health checks respond.
"""

from __future__ import annotations

import httpx
import pytest

from apigw_synth.api.app import create_app
from apigw_synth.observability.middleware import resolve_request_id
from apigw_synth.settings import Settings


@pytest.mark.asyncio
async def test_health_endpoints() -> None:
    app = create_app(settings=Settings(env="test"))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

        r = await client.get("/readyz")
        assert r.status_code == 200
        assert r.json()["status"] == "ready"

        r = await client.get("/healthz", headers={"x-request-id": "req-123"})
        assert r.headers["x-request-id"] == "req-123"


@pytest.mark.asyncio
async def test_malformed_request_ids_are_replaced() -> None:
    app = create_app(settings=Settings(env="test"))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        oversized = "a" * 129
        r = await client.get("/healthz", headers={"x-request-id": oversized})
        assert r.status_code == 200
        assert r.headers["x-request-id"] != oversized
        assert len(r.headers["x-request-id"]) == 36

        r = await client.get("/healthz", headers={"x-request-id": "bad id;drop"})
        assert r.headers["x-request-id"] != "bad id;drop"

        r = await client.get("/healthz")
        assert len(r.headers["x-request-id"]) == 36


def test_resolve_request_id_keeps_well_formed_ids() -> None:
    assert resolve_request_id("trace-01.a:b_c") == "trace-01.a:b_c"
    assert resolve_request_id("x" * 128) == "x" * 128
    assert resolve_request_id("x" * 129) != "x" * 129
    assert resolve_request_id(None) != resolve_request_id(None)
