"""Swagger 2.0 adapter -- translate a raw Swagger document into a :class:`~taxos.models.Spec`.

Swagger 2.0 keeps reusable schemas under ``definitions``, describes the server
with ``host`` / ``schemes`` / ``basePath``, and types non-body parameters
inline (``type``, ``items``, ``enum`` on the parameter itself) while ``body``
parameters carry a ``schema``.  This module folds those differences away so
that :mod:`taxos.normalizer` never sees them.

The single public entry point is :func:`parse_swagger`.
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
    Schema,
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

# Keys of a non-body parameter that describe its value the way a schema would.
_INLINE_SCHEMA_KEYS = ("type", "format", "items", "enum")


def parse_swagger(raw: dict[str, Any]) -> Spec:
    """Build a :class:`~taxos.models.Spec` from a Swagger 2.0 document.

    Args:
        raw: The raw document as returned by :func:`~taxos.parser.loader.load_spec`.

    Returns:
        The dialect-neutral spec.

    Raises:
        SpecParseError: On unresolvable references or unknown parameter
            locations.
    """
    definitions = raw.get("definitions") or {}
    schema_names = frozenset(definitions)
    info = raw.get("info") or {}

    return Spec(
        dialect=SpecDialect.SWAGGER_2,
        spec_version=str(raw.get("swagger", "2.0")),
        title=info.get("title", "Untitled API"),
        version=str(info.get("version", "0.0.0")),
        host=raw.get("host"),
        schemes=list(raw.get("schemes") or []),
        base_path=raw.get("basePath"),
        paths=_parse_paths(raw, schema_names),
        schemas={
            name: parse_schema(definition, schema_names)
            for name, definition in definitions.items()
        },
    )


def _parse_paths(raw: dict[str, Any], schema_names: Collection[str]) -> dict[str, PathItem]:
    paths: dict[str, PathItem] = {}
    operation_ids = OperationIdAllocator(raw)

    for path, path_item in (raw.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        path_params = path_item.get("parameters") or []

        operations: dict[str, Operation] = {}
        for method, operation in iter_operations(path_item):
            params = merge_parameters(path_params, operation.get("parameters") or [], raw)
            operations[method] = Operation(
                operation_id=operation_ids.allocate(operation, method, path),
                method=method,
                summary=operation.get("summary"),
                description=operation.get("description"),
                tags=operation.get("tags") or [],
                deprecated=bool(operation.get("deprecated")),
                parameters=[_parse_parameter(p, schema_names) for p in params],
                responses=_parse_responses(operation.get("responses") or {}, raw, schema_names),
            )

        paths[path] = PathItem(operations=operations)

    return paths


def _parse_parameter(param: dict[str, Any], schema_names: Collection[str]) -> Parameter:
    """Convert one raw Swagger parameter.

    ``body`` parameters keep their ``schema``; all others are typed from their
    inline keys.  Path parameters are always required.
    """
    location = parse_location(param)

    schema: Optional[Schema]
    if location == ParameterLocation.BODY:
        schema = parse_optional_schema(param.get("schema"), schema_names)
    elif "type" in param:
        inline = {key: param[key] for key in _INLINE_SCHEMA_KEYS if key in param}
        schema = parse_schema(inline, schema_names)
    else:
        schema = None

    return Parameter(
        name=param.get("name", ""),
        location=location,
        required=location == ParameterLocation.PATH or bool(param.get("required", False)),
        description=param.get("description"),
        schema=schema,
    )


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
        result[str(status_code)] = Response(
            description=response.get("description"),
            schema=parse_optional_schema(response.get("schema"), schema_names),
        )
    return result
