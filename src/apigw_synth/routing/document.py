"""
apigw_synth.routing.document

Typed OpenAPI 3 document produced by the route compiler.

Responsibilities:
- Model the subset of OpenAPI 3.0 the gateway routes need (paths, operations,
  parameters, responses, security schemes).
- Model the gateway extensions as named fields (`x-google-backend`, `x-google-issuer`,
  `x-google-jwks_uri`, `x-cors`) instead of open-ended maps.
- Serialize to the plain JSON shape the schema downgrade consumes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

OPENAPI_VERSION = "3.0.1"


class PathTranslation(str, Enum):
    # Append the unmatched request path to the backend address.
    APPEND_PATH_TO_ADDRESS = "APPEND_PATH_TO_ADDRESS"
    # Always forward to the backend address as-is.
    CONSTANT_ADDRESS = "CONSTANT_ADDRESS"


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Schema(_Node):
    type: str
    format: str | None = None


class Parameter(_Node):
    name: str
    in_: str = Field(alias="in")
    required: bool = False
    schema_: Schema = Field(alias="schema")


class MediaType(_Node):
    schema_: Schema = Field(alias="schema")


class RequestBody(_Node):
    required: bool = False
    content: dict[str, MediaType]


class Header(_Node):
    schema_: Schema = Field(alias="schema")


class Response(_Node):
    description: str
    headers: dict[str, Header] | None = None
    content: dict[str, MediaType] | None = None


class BackendDirective(_Node):
    address: str
    path_translation: PathTranslation
    protocol: str = "http/1.1"


class Operation(_Node):
    operation_id: str = Field(alias="operationId")
    summary: str | None = None
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response]
    security: list[dict[str, list[str]]] | None = None
    backend: BackendDirective = Field(alias="x-google-backend")


class PathItem(_Node):
    get: Operation | None = None
    post: Operation | None = None
    put: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None

    def operations(self) -> dict[str, Operation]:
        """
        Declared operations keyed by lowercase HTTP method, in declaration order.
        """

        ops = {
            "get": self.get,
            "post": self.post,
            "put": self.put,
            "delete": self.delete,
            "options": self.options,
        }
        return {method: op for method, op in ops.items() if op is not None}


class OAuthFlow(_Node):
    # The gateway validates bearer JWTs itself; no interactive authorization endpoint.
    authorization_url: str = Field(default="", alias="authorizationUrl")
    scopes: dict[str, str] = Field(default_factory=dict)


class OAuthFlows(_Node):
    implicit: OAuthFlow = Field(default_factory=OAuthFlow)


class SecurityScheme(_Node):
    type: str = "oauth2"
    description: str | None = None
    flows: OAuthFlows = Field(default_factory=OAuthFlows)
    issuer: str | None = Field(default=None, alias="x-google-issuer")
    jwks_uri: str | None = Field(default=None, alias="x-google-jwks_uri")


class Components(_Node):
    security_schemes: dict[str, SecurityScheme] = Field(
        default_factory=dict, alias="securitySchemes"
    )


class CorsExtension(_Node):
    allow_origin: str = Field(alias="allowOrigin")
    allow_methods: str = Field(alias="allowMethods")
    allow_headers: str = Field(alias="allowHeaders")
    expose_headers: str = Field(alias="exposeHeaders")
    max_age: int = Field(alias="maxAge")


class Info(_Node):
    title: str
    description: str | None = None
    version: str = "1.0.0"


class OpenAPIDocument(_Node):
    openapi: str = OPENAPI_VERSION
    info: Info
    paths: dict[str, PathItem]
    components: Components | None = None
    cors: CorsExtension | None = Field(default=None, alias="x-cors")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


# --- Module Notes -----------------------------------------------------------
# Serialization drops unset optional fields (`exclude_none`), so a document without
# JWT has no `components` block and a document without CORS has no `x-cors` key.
