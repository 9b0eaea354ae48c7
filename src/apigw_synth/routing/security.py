"""
apigw_synth.routing.security

JWT and CORS helpers for the route compiler.

Responsibilities:
- Resolve JWT policy defaults from the companion identity (service account email).
- Build the single JWT security scheme published by the gateway.
- Build the top-level CORS extension from the configured policy.
"""

from __future__ import annotations

from apigw_synth.observability.logging import get_logger
from apigw_synth.routing.document import CorsExtension, SecurityScheme
from apigw_synth.routing.models import (
    DEFAULT_CORS_HEADERS,
    DEFAULT_CORS_METHODS,
    DEFAULT_CORS_ORIGINS,
    APIConfig,
    JWTAuth,
)

log = get_logger(__name__)

JWT_SCHEME_NAME = "jwt_auth"
JWKS_URI_TEMPLATE = "https://www.googleapis.com/service_accounts/v1/metadata/x509/{email}"

CORS_EXPOSE_HEADERS = "Content-Length,Content-Range"
CORS_MAX_AGE_SECONDS = 3600


def apply_jwt_defaults(jwt_auth: JWTAuth, identity_email: str | None) -> JWTAuth:
    """
    Fill a blank issuer / JWKS URI from the identity that signs service-to-service tokens.
    Returns a copy; the given policy is never modified.
    """

    if not identity_email:
        return jwt_auth

    update: dict[str, str] = {}
    if not jwt_auth.issuer:
        update["issuer"] = identity_email
    if not jwt_auth.jwks_uri:
        update["jwks_uri"] = JWKS_URI_TEMPLATE.format(email=identity_email)
    if not update:
        return jwt_auth
    return jwt_auth.model_copy(update=update)


def jwt_security_scheme(jwt_auth: JWTAuth) -> SecurityScheme:
    if not jwt_auth.issuer or not jwt_auth.jwks_uri:
        # No identity to derive from; the gateway will reject the config on publish.
        log.warning(
            "jwt_policy_incomplete",
            issuer_set=bool(jwt_auth.issuer),
            jwks_uri_set=bool(jwt_auth.jwks_uri),
        )
    return SecurityScheme(
        description="Bearer JWT validated by the gateway",
        issuer=jwt_auth.issuer or None,
        jwks_uri=jwt_auth.jwks_uri or None,
    )


def jwt_requirement() -> list[dict[str, list[str]]]:
    return [{JWT_SCHEME_NAME: []}]


def cors_extension(config: APIConfig) -> CorsExtension | None:
    if not config.enable_cors:
        return None

    origins = config.cors_allowed_origins or list(DEFAULT_CORS_ORIGINS)
    methods = config.cors_allowed_methods or list(DEFAULT_CORS_METHODS)
    headers = config.cors_allowed_headers or list(DEFAULT_CORS_HEADERS)
    return CorsExtension(
        allow_origin=_cors_value(origins, join=config.cors_join_values),
        allow_methods=_cors_value(methods, join=config.cors_join_values),
        allow_headers=_cors_value(headers, join=config.cors_join_values),
        expose_headers=CORS_EXPOSE_HEADERS,
        max_age=CORS_MAX_AGE_SECONDS,
    )


def _cors_value(values: list[str], *, join: bool) -> str:
    if join:
        return ",".join(values)
    return values[0]


# --- Module Notes -----------------------------------------------------------
# Gateway consumers have historically received single CORS values; `cors_join_values`
# is opt-in so published documents do not change shape for existing configs.
