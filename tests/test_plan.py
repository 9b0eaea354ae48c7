"""
tests.test_plan

Gateway planning tests.

Responsibilities:
- Default gateway arguments.
- Identifier derivation, labels and the encoded gateway document.
"""

from __future__ import annotations

import base64
import json

import pytest

from apigw_synth.gateway.plan import apply_gateway_defaults, merge_labels, plan_gateway
from apigw_synth.naming.namer import ResourceNamer
from apigw_synth.routing.errors import ConfigurationError
from apigw_synth.routing.models import APIConfig, APIPath, GatewayArgs, JWTAuth, Upstream
from tests.conftest import BACKEND_URL, FRONTEND_URL, IDENTITY_EMAIL


def test_defaults_fill_missing_args() -> None:
    args = apply_gateway_defaults(None, backend_url=BACKEND_URL, frontend_url=FRONTEND_URL)

    assert args.name == "gateway"
    assert args.disabled is False
    assert args.config is not None
    assert args.config.backend.service_url == BACKEND_URL
    assert args.config.frontend.service_url == FRONTEND_URL
    assert args.config.enable_cors is True


def test_defaults_override_service_urls_but_keep_rules() -> None:
    given = GatewayArgs(
        name="edge",
        config=APIConfig(
            backend=Upstream(
                service_url="https://stale.example.com",
                api_paths=[APIPath(path="/api/v2")],
                jwt_auth=JWTAuth(),
            )
        ),
    )
    args = apply_gateway_defaults(given, backend_url=BACKEND_URL, frontend_url=FRONTEND_URL)

    assert args.name == "edge"
    assert args.config.backend.service_url == BACKEND_URL
    assert args.config.backend.api_paths == [APIPath(path="/api/v2")]
    assert args.config.backend.jwt_auth == JWTAuth()
    assert args.config.frontend.service_url == FRONTEND_URL
    assert given.config.backend.service_url == "https://stale.example.com"


def test_plan_derives_identifiers_labels_and_document() -> None:
    args = apply_gateway_defaults(None, backend_url=BACKEND_URL, frontend_url=FRONTEND_URL)
    plan = plan_gateway(
        ResourceNamer("my-fullstack"),
        args,
        region="us-central1",
        labels={"environment": "production", "gateway": "false"},
        identity_email=IDENTITY_EMAIL,
    )

    assert plan is not None
    assert plan.api_id == "my-fullstack-gateway-api"
    assert plan.config_id == "my-fullstack-gateway-api-config"
    assert plan.gateway_id == "my-fullstack-gateway"
    assert plan.service_account_id == "my-fullstack-gateway-account"
    assert plan.backend_invoker_name == "my-fullstack-gateway-backend-invoker"
    assert plan.frontend_invoker_name == "my-fullstack-gateway-frontend-invoker"
    assert plan.region == "us-central1"
    assert plan.labels == {"environment": "production", "gateway": "true"}
    assert plan.document_path == "/openapi.yaml"

    document = json.loads(base64.b64decode(plan.document_contents))
    assert document["swagger"] == "2.0"
    assert document["info"]["title"] == "Gateway API (apiID: my-fullstack-gateway-api)"
    assert set(document["paths"]) == {"/api/v1/{proxy}", "/{proxy}"}


def test_plan_uses_first_requested_region_and_bounded_ids() -> None:
    args = apply_gateway_defaults(
        GatewayArgs(name="public-edge-gateway", regions=["europe-west1", "us-east1"]),
        backend_url=BACKEND_URL,
        frontend_url=FRONTEND_URL,
    )
    plan = plan_gateway(ResourceNamer("production-fullstack-platform"), args, region="us-central1")

    assert plan.region == "europe-west1"
    assert len(plan.service_account_id) <= 28
    assert len(plan.api_id) <= 50
    assert len(plan.gateway_id) <= 50
    assert plan.config_id == f"{plan.api_id}-config"


def test_disabled_gateway_has_no_plan() -> None:
    args = GatewayArgs(disabled=True)
    assert plan_gateway(ResourceNamer("stack"), args, region="us-central1") is None


def test_enabled_gateway_requires_config() -> None:
    with pytest.raises(ConfigurationError):
        plan_gateway(ResourceNamer("stack"), GatewayArgs(name="gw"), region="us-central1")


def test_merge_labels_extra_wins() -> None:
    assert merge_labels({"a": "1", "b": "2"}, {"b": "3"}) == {"a": "1", "b": "3"}
