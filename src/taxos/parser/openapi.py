"""OpenAPI 3.x adapter -- translate a raw OpenAPI document into a :class:`~taxos.models.Spec`.

OpenAPI 3.x keeps reusable schemas under ``components/schemas``, lists
``servers`` instead of a host, and moves request payloads out of the
parameter list into ``requestBody``.  To keep a single normalizer, the
request body is translated back into parameters:

* a JSON (or other non-form) body becomes one ``body`` parameter, named by
  the ``x-codegen-request-body-name`` extension or ``body``;
* a ``multipart/form-data`` or ``application/x-www-form-urlencoded`` body
  becomes one ``formData`` parameter per property of its object schema (or
  a single ``body`` form field when the schema has no properties).

Response types are taken from the JSON media type of each response.

The single public entry point is :func:`parse_openapi`.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Any, Optional

from taxos.models import (
    Operation,
    Parameter,
    ParameterLocation,
    PathItem,
    Response,
    ServerInfo,
    Spec,
    SpecDialect,
)
from taxos.parser.common import (
    OperationIdAllocator,
    iter_operations,
    merge_parameters,
    parse_location,
)
from taxos.parser.resolver import deref
from taxos.parser.schema import parse_optional_schema, parse_schema

_FORM_MEDIA_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
_JSON_MEDIA_TYPE = "application/json"


def parse_openapi(raw: dict[str, Any]) -> Spec:
    """Build a :class:`~taxos.models.Spec` from an OpenAPI 3.0 / 3.1 document.

    Args:
        raw: The raw document as returned by :func:`~taxos.parser.loader.load_spec`.

    Returns:
        The dialect-neutral spec.

    Raises:
        SpecParseError: On unresolvable references or unknown parameter
            locations.
    """
    components = raw.get("components") or {}
    schemas_raw = components.get("schemas") or {}
    schema_names = frozenset(schemas_raw)
    info = raw.get("info") or {}

    return Spec(
        dialect=SpecDialect.OPENAPI_3,
        spec_version=str(raw.get("openapi", "3.0.0")),
        title=info.get("title", "Untitled API"),
        version=str(info.get("version", "0.0.0")),
        servers=_parse_servers(raw.get("servers") or []),
        paths=_parse_paths(raw, schema_names),
        schemas={
            name: parse_schema(schema, schema_names)
            for name, schema in schemas_raw.items()
        },
    )


def _parse_servers(servers: list[Any]) -> list[ServerInfo]:
    result: list[ServerInfo] = []
    for server in servers:
        if not isinstance(server, dict):
            continue
        variables = {
            name: str(variable.get("default", ""))
            for name, variable in (server.get("variables") or {}).items()
            if isinstance(variable, dict)
        }
        result.append(
            ServerInfo(
                url=server.get("url", "/"),
                description=server.get("description"),
                variables=variables,
            )
        )
    return result


def _parse_paths(raw: dict[str, Any], schema_names: Collection[str]) -> dict[str, PathItem]:
    paths: dict[str, PathItem] = {}
    operation_ids = OperationIdAllocator(raw)

    for path, path_item in (raw.get("paths") or {}).items():
        path_item = deref(path_item, raw)
        if not isinstance(path_item, dict):
            continue
        path_params = path_item.get("parameters") or []

        operations: dict[str, Operation] = {}
        for method, operation in iter_operations(path_item):
            params = merge_parameters(path_params, operation.get("parameters") or [], raw)
            parameters = [_parse_parameter(p, schema_names) for p in params]
            parameters.extend(
                _parse_request_body(
                    operation.get("requestBody"),
                    raw,
                    schema_names,
                    body_name=operation.get("x-codegen-request-body-name"),
                )
            )
            operations[method] = Operation(
                operation_id=operation_ids.allocate(operation, method, path),
                method=method,
                summary=operation.get("summary"),
                description=operation.get("description"),
                tags=operation.get("tags") or [],
                deprecated=bool(operation.get("deprecated")),
                parameters=parameters,
                responses=_parse_responses(operation.get("responses") or {}, raw, schema_names),
            )

        paths[path] = PathItem(operations=operations)

    return paths


def _media_schema(content: dict[str, Any]) -> Any:
    """Pick the schema of the first media type entry that declares one."""
    for media in content.values():
        if isinstance(media, dict) and "schema" in media:
            return media["schema"]
    return None


def _parse_parameter(param: dict[str, Any], schema_names: Collection[str]) -> Parameter:
    """Convert one raw OpenAPI parameter; path parameters are always required."""
    location = parse_location(param)

    raw_schema = param.get("schema")
    if raw_schema is None and isinstance(param.get("content"), dict):
        raw_schema = _media_schema(param["content"])

    return Parameter(
        name=param.get("name", ""),
        location=location,
        required=location == ParameterLocation.PATH or bool(param.get("required", False)),
        description=param.get("description"),
        schema=parse_optional_schema(raw_schema, schema_names),
    )


def _select_media_type(content: dict[str, Any]) -> Optional[str]:
    """Choose the media type a request body is sent as.

    JSON wins, then any ``+json`` / ``json`` media type, then the form types,
    then whatever is declared first.
    """
    if not content:
        return None
    if _JSON_MEDIA_TYPE in content:
        return _JSON_MEDIA_TYPE
    for media_type in content:
        if "json" in media_type:
            return media_type
    for media_type in _FORM_MEDIA_TYPES:
        if media_type in content:
            return media_type
    return next(iter(content))


def _parse_request_body(
    body: Any,
    raw: dict[str, Any],
    schema_names: Collection[str],
    body_name: Optional[str] = None,
) -> list[Parameter]:
    """Translate ``requestBody`` into ``body`` or ``formData`` parameters.

    *body_name* is the operation-level ``x-codegen-request-body-name``; the
    same extension on the request body itself is honoured as well.
    """
    body = deref(body, raw)
    if not isinstance(body, dict):
        return []

    content = body.get("content") or {}
    media_type = _select_media_type(content)
    media = content.get(media_type) if media_type is not None else None
    raw_schema = media.get("schema") if isinstance(media, dict) else None
    required = bool(body.get("required", False))

    if media_type in _FORM_MEDIA_TYPES:
        resolved = deref(raw_schema, raw) if raw_schema is not None else None
        properties = resolved.get("properties") if isinstance(resolved, dict) else None
        if properties:
            required_fields = set(resolved.get("required", []))
            return [
                Parameter(
                    name=prop_name,
                    location=ParameterLocation.FORM_DATA,
                    required=prop_name in required_fields,
                    description=prop_schema.get("description")
                    if isinstance(prop_schema, dict)
                    else None,
                    schema=parse_schema(prop_schema, schema_names),
                )
                for prop_name, prop_schema in properties.items()
            ]
        return [
            Parameter(
                name="body",
                location=ParameterLocation.FORM_DATA,
                required=required,
                description=body.get("description"),
                schema=parse_optional_schema(raw_schema, schema_names),
            )
        ]

    return [
        Parameter(
            name=body_name or body.get("x-codegen-request-body-name", "body"),
            location=ParameterLocation.BODY,
            required=required,
            description=body.get("description"),
            schema=parse_optional_schema(raw_schema, schema_names),
        )
    ]


def _parse_responses(
    responses: dict[str, Any],
    raw: dict[str, Any],
    schema_names: Collection[str],
) -> dict[str, Response]:
    result: dict[str, Response] = {}
    for status_code, response in responses.items():
        response = deref(response, raw)
        if not isinstance(response, dict):
            continue
        content = response.get("content") or {}
        raw_schema = None
        json_media = _JSON_MEDIA_TYPE if _JSON_MEDIA_TYPE in content else next(
            (media_type for media_type in content if "json" in media_type), None
        )
        if json_media is not None and isinstance(content[json_media], dict):
            raw_schema = content[json_media].get("schema")
        result[str(status_code)] = Response(
            description=response.get("description"),
            schema=parse_optional_schema(raw_schema, schema_names),
        )
    return result
