"""
apigw_synth.routing.downgrade

OpenAPI 3.0 -> Swagger 2.0 conversion.

Responsibilities:
- Produce the legacy document version required by the gateway from the richer
  document the compiler builds.
- Preserve paths, operations, security schemes and every `x-*` extension.

Note:
- Only constructs that have a Swagger 2.0 equivalent are converted; anything else
  raises `DowngradeError` rather than being dropped silently.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

SWAGGER_VERSION = "2.0"
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")

# Schema keywords a non-body Swagger 2.0 parameter or header carries inline.
_INLINE_SCHEMA_KEYS = (
    "type",
    "format",
    "items",
    "collectionFormat",
    "default",
    "enum",
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "minLength",
    "maxLength",
    "pattern",
    "minItems",
    "maxItems",
    "uniqueItems",
    "multipleOf",
)
_REF_PREFIXES = {
    "#/components/schemas/": "#/definitions/",
    "#/components/parameters/": "#/parameters/",
    "#/components/responses/": "#/responses/",
}
_OAUTH2_FLOWS = {
    "implicit": "implicit",
    "password": "password",
    "clientCredentials": "application",
    "authorizationCode": "accessCode",
}


class DowngradeError(ValueError):
    pass


def downgrade_to_swagger2(document: Mapping[str, Any]) -> dict[str, Any]:
    doc = _mapping(document, "document")
    version = str(doc.get("openapi", ""))
    if not version.startswith("3."):
        raise DowngradeError(f"expected an OpenAPI 3.x document, got openapi={version!r}")

    out: dict[str, Any] = {
        "swagger": SWAGGER_VERSION,
        "info": copy.deepcopy(_mapping(doc.get("info", {}), "info")),
    }
    out.update(_server_fields(doc.get("servers") or []))

    paths = _mapping(doc.get("paths", {}), "paths")
    out["paths"] = {path: _path_item(path, item) for path, item in paths.items()}

    components = _mapping(doc.get("components") or {}, "components")
    schemas = _mapping(components.get("schemas") or {}, "components.schemas")
    if schemas:
        out["definitions"] = {name: _schema(s) for name, s in schemas.items()}
    parameters = _mapping(components.get("parameters") or {}, "components.parameters")
    if parameters:
        out["parameters"] = {name: _parameter(p) for name, p in parameters.items()}
    responses = _mapping(components.get("responses") or {}, "components.responses")
    if responses:
        out["responses"] = {name: _response(r)[0] for name, r in responses.items()}
    schemes = _mapping(components.get("securitySchemes") or {}, "components.securitySchemes")
    if schemes:
        out["securityDefinitions"] = {
            name: _security_definition(name, s) for name, s in schemes.items()
        }

    if "security" in doc:
        out["security"] = copy.deepcopy(doc["security"])
    out.update(_extensions(doc))

    return _rewrite_refs(out)


def _server_fields(servers: list[Any]) -> dict[str, Any]:
    if not servers:
        return {"schemes": ["https"]}

    server = _mapping(servers[0], "servers[0]")
    parts = urlsplit(str(server.get("url", "")))
    fields: dict[str, Any] = {}
    if parts.netloc:
        fields["host"] = parts.netloc
    if parts.path and parts.path != "/":
        fields["basePath"] = parts.path
    fields["schemes"] = [parts.scheme] if parts.scheme else ["https"]
    return fields


def _path_item(path: str, item: Any) -> dict[str, Any]:
    node = _mapping(item, f"paths[{path}]")
    out: dict[str, Any] = {}
    if "parameters" in node:
        out["parameters"] = [_parameter(p) for p in node["parameters"]]
    for method in HTTP_METHODS:
        if method in node:
            out[method] = _operation(f"{method.upper()} {path}", node[method])
    if "trace" in node:
        raise DowngradeError(f"TRACE operations have no Swagger 2.0 form: {path}")
    out.update(_extensions(node))
    return out


def _operation(where: str, op: Any) -> dict[str, Any]:
    node = _mapping(op, where)
    out: dict[str, Any] = {}
    for key in ("tags", "summary", "description", "operationId", "deprecated"):
        if key in node:
            out[key] = copy.deepcopy(node[key])

    parameters = [_parameter(p) for p in node.get("parameters", [])]
    if "requestBody" in node:
        body, consumes = _body_parameter(node["requestBody"])
        parameters.append(body)
        if consumes:
            out["consumes"] = consumes

    responses: dict[str, Any] = {}
    produces: list[str] = []
    for code, resp in _mapping(node.get("responses", {}), f"{where} responses").items():
        converted, media_types = _response(resp)
        responses[str(code)] = converted
        produces.extend(m for m in media_types if m not in produces)
    if produces:
        out["produces"] = produces

    if parameters:
        out["parameters"] = parameters
    out["responses"] = responses
    if "security" in node:
        out["security"] = copy.deepcopy(node["security"])
    out.update(_extensions(node))
    return out


def _parameter(param: Any) -> dict[str, Any]:
    node = _mapping(param, "parameter")
    if "$ref" in node:
        return {"$ref": node["$ref"]}
    if node.get("in") == "cookie":
        raise DowngradeError(f"cookie parameter {node.get('name')!r} has no Swagger 2.0 form")

    out = {k: copy.deepcopy(node[k]) for k in ("name", "in", "description", "required") if k in node}
    schema = _mapping(node.get("schema") or {}, f"parameter {node.get('name')!r} schema")
    out.update({k: copy.deepcopy(schema[k]) for k in _INLINE_SCHEMA_KEYS if k in schema})
    out.update(_extensions(node))
    return out


def _body_parameter(body: Any) -> tuple[dict[str, Any], list[str]]:
    node = _mapping(body, "requestBody")
    if "$ref" in node:
        raise DowngradeError("requestBody references are not supported")

    content = _mapping(node.get("content") or {}, "requestBody.content")
    out: dict[str, Any] = {"name": node.get("x-originalParamName", "body"), "in": "body"}
    if "description" in node:
        out["description"] = node["description"]
    out["required"] = bool(node.get("required", False))
    out["schema"] = _schema(_first_schema(content) or {})
    return out, list(content)


def _response(resp: Any) -> tuple[dict[str, Any], list[str]]:
    node = _mapping(resp, "response")
    if "$ref" in node:
        return {"$ref": node["$ref"]}, []

    out: dict[str, Any] = {"description": node.get("description", "")}
    content = _mapping(node.get("content") or {}, "response.content")
    schema = _first_schema(content)
    if schema is not None:
        out["schema"] = _schema(schema)

    headers = _mapping(node.get("headers") or {}, "response.headers")
    if headers:
        out["headers"] = {name: _header(h) for name, h in headers.items()}
    out.update(_extensions(node))
    return out, list(content)


def _header(header: Any) -> dict[str, Any]:
    node = _mapping(header, "header")
    schema = _mapping(node.get("schema") or {}, "header.schema")
    out = {k: copy.deepcopy(schema[k]) for k in _INLINE_SCHEMA_KEYS if k in schema}
    if "description" in node:
        out["description"] = node["description"]
    out.setdefault("type", "string")
    return out


def _first_schema(content: Mapping[str, Any]) -> dict[str, Any] | None:
    for media_type, media in content.items():
        schema = _mapping(media, f"content[{media_type}]").get("schema")
        if schema is not None:
            return _mapping(schema, f"content[{media_type}].schema")
    return None


def _schema(schema: Any) -> Any:
    # Swagger 2.0 has no `nullable`; the vendor extension carries it instead.
    if isinstance(schema, list):
        return [_schema(s) for s in schema]
    if not isinstance(schema, Mapping):
        return copy.deepcopy(schema)
    for keyword in ("oneOf", "anyOf", "not"):
        if keyword in schema:
            raise DowngradeError(f"schema keyword {keyword!r} has no Swagger 2.0 form")

    out: dict[str, Any] = {}
    for key, value in schema.items():
        if key == "nullable":
            out["x-nullable"] = value
        elif key in ("properties", "patternProperties"):
            out[key] = {name: _schema(s) for name, s in _mapping(value, key).items()}
        elif key in ("items", "additionalProperties", "allOf"):
            out[key] = _schema(value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def _security_definition(name: str, scheme: Any) -> dict[str, Any]:
    node = _mapping(scheme, f"securitySchemes[{name}]")
    kind = node.get("type")

    if kind == "oauth2":
        out = _oauth2_definition(name, _mapping(node.get("flows") or {}, f"{name}.flows"))
    elif kind == "apiKey":
        if node.get("in") == "cookie":
            raise DowngradeError(f"cookie api keys have no Swagger 2.0 form: {name}")
        out = {"type": "apiKey", "name": node.get("name"), "in": node.get("in")}
    elif kind == "http" and str(node.get("scheme", "")).lower() == "basic":
        out = {"type": "basic"}
    elif kind == "http" and str(node.get("scheme", "")).lower() == "bearer":
        out = {"type": "apiKey", "name": "Authorization", "in": "header"}
    else:
        raise DowngradeError(f"security scheme {name!r} of type {kind!r} has no Swagger 2.0 form")

    if "description" in node:
        out["description"] = node["description"]
    out.update(_extensions(node))
    return out


def _oauth2_definition(name: str, flows: Mapping[str, Any]) -> dict[str, Any]:
    for flow_name, v2_flow in _OAUTH2_FLOWS.items():
        if flow_name not in flows:
            continue
        flow = _mapping(flows[flow_name], f"{name}.flows.{flow_name}")
        out: dict[str, Any] = {"type": "oauth2", "flow": v2_flow}
        if v2_flow in ("implicit", "accessCode"):
            out["authorizationUrl"] = flow.get("authorizationUrl", "")
        if v2_flow in ("password", "application", "accessCode"):
            out["tokenUrl"] = flow.get("tokenUrl", "")
        out["scopes"] = copy.deepcopy(flow.get("scopes") or {})
        return out
    raise DowngradeError(f"oauth2 scheme {name!r} declares no flows")


def _extensions(node: Mapping[str, Any]) -> dict[str, Any]:
    return {k: copy.deepcopy(v) for k, v in node.items() if k.startswith("x-")}


def _rewrite_refs(node: Any) -> Any:
    if isinstance(node, list):
        return [_rewrite_refs(n) for n in node]
    if not isinstance(node, dict):
        return node

    out: dict[str, Any] = {}
    for key, value in node.items():
        if key == "$ref" and isinstance(value, str):
            out[key] = _rewrite_ref(value)
        else:
            out[key] = _rewrite_refs(value)
    return out


def _rewrite_ref(ref: str) -> str:
    for old, new in _REF_PREFIXES.items():
        if ref.startswith(old):
            return new + ref[len(old) :]
    return ref


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DowngradeError(f"{where} must be a mapping, got {type(value).__name__}")
    return value


# --- Module Notes -----------------------------------------------------------
# Bearer schemes map to an `Authorization` api key (the closest 2.0 form). The route
# compiler publishes its JWT scheme as OAuth2 implicit instead, which is what the
# gateway expects together with `x-google-issuer` / `x-google-jwks_uri`.
