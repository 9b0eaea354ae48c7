"""
apigw_synth.routing.compiler

Route specification compiler.

Responsibilities:
- Turn the declarative upstream configuration into path routes with backend
  forwarding directives (default vs explicit rewrite rules).
- Synthesize per-path operations for API and UI upstreams.
- Gate non-preflight operations with the JWT scheme where configured.
- Render the final Swagger 2.0 document accepted by the gateway.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from apigw_synth.observability.logging import get_logger
from apigw_synth.routing.document import (
    BackendDirective,
    Components,
    Header,
    Info,
    MediaType,
    OpenAPIDocument,
    Operation,
    Parameter,
    PathItem,
    PathTranslation,
    RequestBody,
    Response,
    Schema,
)
from apigw_synth.routing.downgrade import downgrade_to_swagger2
from apigw_synth.routing.errors import ConfigurationError
from apigw_synth.routing.models import APIConfig, JWTAuth, Upstream, UpstreamKind
from apigw_synth.routing.security import (
    JWT_SCHEME_NAME,
    apply_jwt_defaults,
    cors_extension,
    jwt_requirement,
    jwt_security_scheme,
)

log = get_logger(__name__)

PROXY_PARAM = "proxy"
PROXY_CAPTURE = "{" + PROXY_PARAM + "}"

DEFAULT_TITLE = "API Gateway for Cloud Run"
DEFAULT_DESCRIPTION = "API Gateway routing to Cloud Run backend and frontend"

DEFAULT_PREFIXES: dict[UpstreamKind, str] = {
    UpstreamKind.API: "/api/v1",
    UpstreamKind.UI: "",
}
_OPERATION_ID_PREFIXES: dict[UpstreamKind, str] = {
    UpstreamKind.API: "api",
    UpstreamKind.UI: "frontend",
}


@dataclass(frozen=True, slots=True)
class Route:
    public_path: str
    backend: BackendDirective


def resolve_routes(kind: UpstreamKind, upstream: Upstream) -> list[Route]:
    """
    Routes for one upstream.

    Without rules a single `{prefix}/{proxy}` route appends the request path to the
    service URL. With rules, a rule whose upstream path differs from its public path
    is a rewrite (append to `service_url + upstream_path`); any other rule forwards to
    the service URL as a constant address.
    """

    prefix = DEFAULT_PREFIXES[kind]
    if not upstream.api_paths:
        return [
            Route(
                public_path=_public_path(prefix),
                backend=BackendDirective(
                    address=upstream.service_url,
                    path_translation=PathTranslation.APPEND_PATH_TO_ADDRESS,
                ),
            )
        ]

    routes: list[Route] = []
    for rule in upstream.api_paths:
        path = rule.path or prefix
        if rule.upstream_path and rule.upstream_path != path:
            backend = BackendDirective(
                address=upstream.service_url.rstrip("/") + rule.upstream_path,
                path_translation=PathTranslation.APPEND_PATH_TO_ADDRESS,
            )
        else:
            backend = BackendDirective(
                address=upstream.service_url,
                path_translation=PathTranslation.CONSTANT_ADDRESS,
            )
        routes.append(Route(public_path=_public_path(path), backend=backend))
    return routes


def compile_openapi(
    config: APIConfig | None,
    *,
    identity_email: str | None = None,
    title: str | None = None,
) -> OpenAPIDocument:
    """
    Compile the routing configuration into an OpenAPI 3 document.

    `identity_email` is the companion identity used to default blank JWT fields.
    Raises `ConfigurationError` when the config or an upstream is missing. A rule that
    publishes an already-routed path replaces the earlier route.
    """

    if config is None:
        raise ConfigurationError("APIConfig is required to compile gateway routes")

    paths: dict[str, PathItem] = {}
    stems: dict[str, str] = {}
    published_jwt: JWTAuth | None = None

    for kind, upstream in config.upstreams():
        jwt_auth = None
        if upstream.jwt_auth is not None:
            jwt_auth = apply_jwt_defaults(upstream.jwt_auth, identity_email)
            if published_jwt is None:
                published_jwt = jwt_auth
            elif jwt_auth != published_jwt:
                log.warning("jwt_policy_ignored", upstream=kind.value, scheme=JWT_SCHEME_NAME)

        for route in resolve_routes(kind, upstream):
            if route.public_path in paths:
                log.warning(
                    "route_overridden",
                    path=route.public_path,
                    upstream=kind.value,
                    address=route.backend.address,
                )
                del stems[route.public_path]
            stem = _unique_stem(_operation_stem(kind, route.public_path), set(stems.values()))
            stems[route.public_path] = stem
            paths[route.public_path] = _path_item(kind, route, stem, secured=jwt_auth is not None)

    components = None
    if published_jwt is not None:
        components = Components(
            security_schemes={JWT_SCHEME_NAME: jwt_security_scheme(published_jwt)}
        )

    document = OpenAPIDocument(
        info=Info(title=title or DEFAULT_TITLE, description=DEFAULT_DESCRIPTION),
        paths=paths,
        components=components,
        cors=cors_extension(config),
    )
    log.info(
        "openapi_compiled",
        paths=list(paths),
        jwt=published_jwt is not None,
        cors=config.enable_cors,
    )
    return document


def render_gateway_document(
    config: APIConfig | None,
    *,
    identity_email: str | None = None,
    title: str | None = None,
) -> str:
    """
    Compile, downgrade to Swagger 2.0 and serialize to JSON.
    Downgrade errors propagate unchanged.
    """

    v3 = compile_openapi(config, identity_email=identity_email, title=title).to_dict()
    log.debug("openapi_v3_document", document=v3)

    v2 = downgrade_to_swagger2(v3)
    log.debug("openapi_v2_document", document=v2)

    return json.dumps(v2)


def _public_path(prefix: str) -> str:
    return f"{prefix.rstrip('/')}/{PROXY_CAPTURE}"


def _path_item(kind: UpstreamKind, route: Route, stem: str, *, secured: bool) -> PathItem:
    security = jwt_requirement() if secured else None

    def op_id(method: str) -> str:
        return stem + method.capitalize()

    if kind is UpstreamKind.UI:
        return PathItem(
            get=Operation(
                operation_id=op_id("get"),
                parameters=[_proxy_parameter()],
                responses=_ui_responses(),
                security=security,
                backend=route.backend,
            ),
            options=_preflight(op_id("options"), route.backend),
        )

    def api_operation(method: str, *, with_body: bool = False) -> Operation:
        return Operation(
            operation_id=op_id(method),
            parameters=[_proxy_parameter()],
            request_body=_json_body() if with_body else None,
            responses=_api_responses(),
            security=security,
            backend=route.backend,
        )

    return PathItem(
        get=api_operation("get"),
        post=api_operation("post", with_body=True),
        put=api_operation("put", with_body=True),
        delete=api_operation("delete"),
        options=_preflight(op_id("options"), route.backend),
    )


def _operation_stem(kind: UpstreamKind, public_path: str) -> str:
    # "/api/v1/{proxy}" -> "apiApiV1Proxy"
    words = [w for w in re.split(r"[^A-Za-z0-9]+", public_path) if w]
    return _OPERATION_ID_PREFIXES[kind] + "".join(w[:1].upper() + w[1:] for w in words)


def _unique_stem(stem: str, taken: set[str]) -> str:
    # "/api/v1" and "/apiV1" camel-case alike; later paths get a numeric suffix.
    candidate, n = stem, 1
    while candidate in taken:
        n += 1
        candidate = f"{stem}{n}"
    return candidate


def _proxy_parameter() -> Parameter:
    return Parameter(name=PROXY_PARAM, in_="path", required=True, schema_=Schema(type="string"))


def _json_body() -> RequestBody:
    return RequestBody(
        required=False,
        content={"application/json": MediaType(schema_=Schema(type="object"))},
    )


def _api_responses() -> dict[str, Response]:
    return {
        "200": Response(
            description="Successful response",
            content={"application/json": MediaType(schema_=Schema(type="object"))},
        ),
        "400": Response(description="Client error"),
        "500": Response(description="Server error"),
        "default": Response(description="Unexpected error"),
    }


def _ui_responses() -> dict[str, Response]:
    return {
        "200": Response(
            description="Successful response",
            content={"text/html": MediaType(schema_=Schema(type="string"))},
        ),
        "404": Response(description="Not found"),
        "default": Response(description="Unexpected error"),
    }


def _preflight(operation_id: str, backend: BackendDirective) -> Operation:
    # Browsers cannot attach credentials to preflight requests: never gated.
    cors_headers = {
        name: Header(schema_=Schema(type="string"))
        for name in (
            "Access-Control-Allow-Origin",
            "Access-Control-Allow-Methods",
            "Access-Control-Allow-Headers",
        )
    }
    return Operation(
        operation_id=operation_id,
        parameters=[_proxy_parameter()],
        responses={"200": Response(description="CORS preflight response", headers=cors_headers)},
        backend=backend,
    )
