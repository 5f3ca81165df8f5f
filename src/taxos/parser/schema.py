"""Translate raw JSON Schema dicts into the closed :data:`~taxos.models.Schema` variant.

Both dialect adapters share this module, so the case analysis on ``type``
lives in exactly one place.  Shapes the normalizer does not model
(``allOf``, ``oneOf``, ``type: file``, ``type: null`` ...) become an
:class:`~taxos.models.UnknownSchema` instead of failing, which later projects
to the untyped sentinel.

Schema references are validated here: a ``$ref`` must name a key of the
document's reusable-schema table, otherwise the whole run is aborted with
:class:`~taxos.exceptions.UnresolvedReferenceError`.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import Any, Optional

from taxos.exceptions import UnresolvedReferenceError
from taxos.models import (
    ArraySchema,
    BooleanSchema,
    IntegerSchema,
    NumberSchema,
    ObjectSchema,
    RefSchema,
    Schema,
    StringSchema,
    UnknownSchema,
)
from taxos.parser.resolver import schema_ref_name

logger = logging.getLogger(__name__)

_SCALARS = {
    "number": NumberSchema,
    "integer": IntegerSchema,
    "string": StringSchema,
}


def _schema_type(raw: dict[str, Any]) -> Optional[str]:
    """Extract the type string, inferring it from structural keywords when absent.

    OpenAPI 3.1 allows ``type`` to be an array (e.g., ``["string", "null"]``);
    the first non-null entry wins.
    """
    type_value = raw.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        type_value = non_null[0] if non_null else None
    if type_value is not None:
        return str(type_value)
    if "properties" in raw or "additionalProperties" in raw:
        return "object"
    if "items" in raw:
        return "array"
    return None


def parse_schema(raw: Any, schema_names: Collection[str]) -> Schema:
    """Convert a raw schema dict into a :data:`~taxos.models.Schema` variant.

    Args:
        raw: The schema as it appears in the document.
        schema_names: Keys of the document's reusable-schema table, used to
            validate ``$ref`` targets.

    Returns:
        Exactly one variant of the closed schema union.

    Raises:
        MalformedReferenceError: If a ``$ref`` is not a schema pointer.
        UnresolvedReferenceError: If a ``$ref`` names an undeclared schema.
    """
    if not isinstance(raw, dict):
        logger.debug("Non-object schema %r treated as untyped", raw)
        return UnknownSchema()

    description = raw.get("description")

    if "$ref" in raw:
        ref = raw["$ref"]
        name = schema_ref_name(ref)
        if name not in schema_names:
            raise UnresolvedReferenceError(
                f"Cannot resolve $ref '{ref}': no schema named '{name}'"
            )
        return RefSchema(ref=ref, name=name, description=description)

    schema_type = _schema_type(raw)

    if schema_type == "boolean" or schema_type in _SCALARS:
        enum_values = raw.get("enum")
        enum_list = list(enum_values) if isinstance(enum_values, list) else None
        if schema_type == "boolean":
            return BooleanSchema(description=description, enum=enum_list)
        return _SCALARS[schema_type](
            description=description, enum=enum_list, format=raw.get("format")
        )

    if schema_type == "array":
        items = raw.get("items")
        return ArraySchema(
            description=description,
            items=parse_schema(items, schema_names) if items is not None else UnknownSchema(),
        )

    if schema_type == "object":
        properties = {
            prop_name: parse_schema(prop_schema, schema_names)
            for prop_name, prop_schema in (raw.get("properties") or {}).items()
        }
        additional = raw.get("additionalProperties")
        if isinstance(additional, dict):
            additional_schema: Optional[Schema] = parse_schema(additional, schema_names)
        elif additional is True:
            additional_schema = UnknownSchema()
        else:
            additional_schema = None
        required = raw.get("required")
        return ObjectSchema(
            description=description,
            properties=properties,
            additional_properties=additional_schema,
            required=list(required) if isinstance(required, list) else [],
        )

    logger.debug("Unsupported schema shape (type=%r) treated as untyped", schema_type)
    return UnknownSchema(description=description, raw=raw)


def parse_optional_schema(raw: Any, schema_names: Collection[str]) -> Optional[Schema]:
    """Like :func:`parse_schema`, but maps an absent schema to ``None``."""
    if raw is None:
        return None
    return parse_schema(raw, schema_names)
