"""
apigw_synth.gateway.plan

Pure planning step for an API gateway deployment.

Responsibilities:
- Apply default gateway arguments (name, config, upstream service URLs).
- Derive every gateway identifier through the resource namer with provider limits.
- Render the base64-encoded gateway document and merged labels.

The orchestration layer consumes a `GatewayPlan` to declare the actual resources
(API, API config, gateway, service account, invoker bindings).
"""

from __future__ import annotations

import base64
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from apigw_synth.naming.namer import (
    GATEWAY_ID_MAX,
    IAM_MEMBER_NAME_MAX,
    SERVICE_ACCOUNT_ID_MAX,
    ResourceNamer,
)
from apigw_synth.observability.logging import get_logger
from apigw_synth.routing.compiler import render_gateway_document
from apigw_synth.routing.errors import ConfigurationError
from apigw_synth.routing.models import APIConfig, GatewayArgs, Upstream

log = get_logger(__name__)

DEFAULT_GATEWAY_NAME = "gateway"
GATEWAY_LABEL = "gateway"


class GatewayPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_id: str
    api_display_name: str
    config_id: str
    config_display_name: str
    gateway_id: str
    gateway_display_name: str
    region: str

    service_account_id: str
    service_account_display_name: str
    backend_invoker_name: str
    frontend_invoker_name: str

    labels: dict[str, str]
    document_path: str
    # Base64 of the Swagger 2.0 JSON document.
    document_contents: str


def merge_labels(base: Mapping[str, str], extra: Mapping[str, str]) -> dict[str, str]:
    # Extra labels win on key collision.
    return {**base, **extra}


def apply_gateway_defaults(
    args: GatewayArgs | None,
    *,
    backend_url: str,
    frontend_url: str,
    default_name: str = DEFAULT_GATEWAY_NAME,
) -> GatewayArgs:
    """
    Complete partial gateway arguments. Upstream service URLs are always replaced by
    the deployed service URLs; any value the caller set is ignored.
    """

    args = args or GatewayArgs()
    config = args.config or APIConfig()
    backend = (config.backend or Upstream()).model_copy(update={"service_url": backend_url})
    frontend = (config.frontend or Upstream()).model_copy(update={"service_url": frontend_url})

    return args.model_copy(
        update={
            "name": args.name or default_name,
            "config": config.model_copy(update={"backend": backend, "frontend": frontend}),
        }
    )


def plan_gateway(
    namer: ResourceNamer,
    args: GatewayArgs,
    *,
    region: str,
    labels: Mapping[str, str] | None = None,
    identity_email: str | None = None,
) -> GatewayPlan | None:
    """
    Returns None when the gateway is disabled. Raises `ConfigurationError` when the
    gateway is enabled without an API config.
    """

    if args.disabled:
        log.info("gateway_disabled", name=args.name)
        return None
    if args.config is None:
        raise ConfigurationError("APIConfig is required when the API gateway is enabled")

    name = args.name or DEFAULT_GATEWAY_NAME
    api_id = namer.name(name, "api", max_length=GATEWAY_ID_MAX)
    gateway_id = namer.name(name, max_length=GATEWAY_ID_MAX)
    config_id = f"{api_id}-config"

    document = render_gateway_document(
        args.config,
        identity_email=identity_email,
        title=f"Gateway API (apiID: {api_id})",
    )

    plan = GatewayPlan(
        api_id=api_id,
        api_display_name=f"Gateway API (apiID: {api_id})",
        config_id=config_id,
        config_display_name=f"Config for {api_id}",
        gateway_id=gateway_id,
        gateway_display_name=f"Gateway (gatewayID: {gateway_id})",
        region=args.regions[0] if args.regions else region,
        service_account_id=namer.name(name, "account", max_length=SERVICE_ACCOUNT_ID_MAX),
        service_account_display_name=f"API Gateway service account ({name})",
        backend_invoker_name=namer.name(name, "backend-invoker", max_length=IAM_MEMBER_NAME_MAX),
        frontend_invoker_name=namer.name(
            name, "frontend-invoker", max_length=IAM_MEMBER_NAME_MAX
        ),
        labels=merge_labels(labels or {}, {GATEWAY_LABEL: "true"}),
        document_path=args.config.openapi_spec_path,
        document_contents=base64.b64encode(document.encode("utf-8")).decode("ascii"),
    )
    log.info("gateway_planned", api_id=plan.api_id, gateway_id=plan.gateway_id, region=plan.region)
    return plan


# --- Module Notes -----------------------------------------------------------
# Only the first region is planned; multi-region gateways share one API config and
# would each need their own gateway id.
