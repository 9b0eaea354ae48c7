"""
apigw_synth.routing.models

Declarative routing configuration consumed by the route compiler.

Responsibilities:
- Describe upstream services, their path rules and JWT policy.
- Describe the gateway-wide CORS policy and document location.
- Describe the gateway arguments used by the planning layer.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from apigw_synth.routing.errors import ConfigurationError

DEFAULT_CORS_ORIGINS = ("*",)
DEFAULT_CORS_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
DEFAULT_CORS_HEADERS = ("*",)
DEFAULT_OPENAPI_SPEC_PATH = "/openapi.yaml"


class UpstreamKind(str, Enum):
    # API: arbitrary service (full verb set). UI: browser-facing service (GET only).
    API = "API"
    UI = "UI"


class APIPath(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Public path prefix. Empty means the upstream's default prefix.
    path: str = ""
    # Upstream path prefix. Empty or equal to `path` means no rewrite.
    upstream_path: str = ""


class JWTAuth(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Blank values are derived from the companion identity at compile time.
    issuer: str = ""
    jwks_uri: str = ""


class Upstream(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_url: str = ""
    api_paths: list[APIPath] = Field(default_factory=list)
    jwt_auth: JWTAuth | None = None


class APIConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    backend: Upstream | None = None
    frontend: Upstream | None = None

    enable_cors: bool = True
    cors_allowed_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    cors_allowed_methods: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_METHODS))
    cors_allowed_headers: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_HEADERS))
    # Off: only the first value of each CORS list is published (gateway-compatible form).
    cors_join_values: bool = False

    openapi_spec_path: str = DEFAULT_OPENAPI_SPEC_PATH

    def upstreams(self) -> list[tuple[UpstreamKind, Upstream]]:
        """
        Upstreams in compilation order (backend first). Both are required.
        """

        if self.backend is None:
            raise ConfigurationError("backend upstream configuration is required")
        if self.frontend is None:
            raise ConfigurationError("frontend upstream configuration is required")
        return [(UpstreamKind.API, self.backend), (UpstreamKind.UI, self.frontend)]


class GatewayArgs(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Name of the gateway and its resources. Defaulted by the planning layer.
    name: str = ""
    config: APIConfig | None = None
    disabled: bool = False
    regions: list[str] = Field(default_factory=list)


# --- Module Notes -----------------------------------------------------------
# Models are frozen; defaulting always produces copies via `model_copy(update=...)`
# so a config object can be compiled repeatedly with different identities.
