"""Project schemas to TypeScript type expressions and collect their references.

:func:`project_type` and :func:`collect_refs` walk the closed
:data:`~taxos.models.Schema` variant with the same recursion shape: arrays
descend into ``items``, objects into ``additionalProperties``, and references
stop at the referenced name.  Named ``properties`` are not
visited here; callers project each property on its own.

Both functions match every member of the variant and end with
:func:`typing.assert_never`, so adding a new schema kind without handling it
is a type-checker error.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, assert_never

from taxos.models import (
    ArraySchema,
    BooleanSchema,
    ConverterContext,
    IntegerSchema,
    NumberSchema,
    ObjectSchema,
    RefSchema,
    Schema,
    StringSchema,
    UnknownSchema,
)
from taxos.parser.resolver import resolve_reference

logger = logging.getLogger(__name__)

#: The untyped sentinel every unmodelled shape projects to.
ANY = "any"


def format_enum_value(value: Any) -> str:
    """Render one enum member the way it appears inside a string literal.

    Example::

        >>> format_enum_value(True), format_enum_value(None), format_enum_value(2.0)
        ('true', 'null', '2')
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_enum(values: list[Any]) -> str:
    """Join enum members into a union of string literals, in declared order.

    Quotes and backslashes inside a member are escaped.
    """
    return " | ".join(json.dumps(format_enum_value(v), ensure_ascii=False) for v in values)


def project_type(schema: Optional[Schema]) -> str:
    """Map a schema to a TypeScript type expression.

    Args:
        schema: The schema to project; ``None`` stands for an absent schema.

    Returns:
        The type expression, e.g. ``"number"``, ``"(Pet)[]"``,
        ``'"available" | "sold"'`` or ``"{[k: string]: (string)}"``.

    Example::

        >>> project_type(ArraySchema(items=IntegerSchema()))
        '(number)[]'
    """
    if schema is None:
        return ANY
    if isinstance(schema, IntegerSchema):
        return "number"
    if isinstance(schema, (BooleanSchema, NumberSchema, StringSchema)):
        if schema.enum:
            return format_enum(schema.enum)
        return schema.kind
    if isinstance(schema, ArraySchema):
        return f"({project_type(schema.items)})[]"
    if isinstance(schema, ObjectSchema):
        if schema.additional_properties is not None:
            return f"{{[k: string]: ({project_type(schema.additional_properties)})}}"
        return f"{{[k: string]: {ANY}}}"
    if isinstance(schema, RefSchema):
        return schema.name
    if isinstance(schema, UnknownSchema):
        logger.debug("Projecting unsupported schema %r as '%s'", schema.raw, ANY)
        return ANY
    assert_never(schema)


def collect_refs(schema: Optional[Schema], ctx: ConverterContext) -> dict[str, str]:
    """Return the references a schema depends on, as ``{name: import_path}``.

    Example::

        >>> collect_refs(ArraySchema(items=RefSchema(ref="#/definitions/Tag", name="Tag")), ctx)
        {'Tag': '@/api/api/definitions/Tag'}
    """
    if schema is None:
        return {}
    if isinstance(schema, (BooleanSchema, NumberSchema, IntegerSchema, StringSchema)):
        return {}
    if isinstance(schema, ArraySchema):
        return collect_refs(schema.items, ctx)
    if isinstance(schema, ObjectSchema):
        return collect_refs(schema.additional_properties, ctx)
    if isinstance(schema, RefSchema):
        resolved = resolve_reference(schema.ref, ctx)
        return {resolved.name: resolved.import_path}
    if isinstance(schema, UnknownSchema):
        return {}
    assert_never(schema)


def merge_refs(*dicts: dict[str, str]) -> dict[str, str]:
    """Union reference dictionaries into a new dict.

    The same name always maps to the same import path, so the result does
    not depend on argument order beyond key iteration order.
    """
    merged: dict[str, str] = {}
    for refs in dicts:
        merged.update(refs)
    return merged
