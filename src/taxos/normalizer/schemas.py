"""Normalize reusable schema definitions into declaration-ready records."""

from __future__ import annotations

from taxos.models import (
    ConverterContext,
    NormalizedProperty,
    NormalizedSchema,
    ObjectSchema,
    Schema,
)
from taxos.normalizer.types import collect_refs, merge_refs, project_type


def normalize_schema(name: str, schema: Schema, ctx: ConverterContext) -> NormalizedSchema:
    """Project every property of schema *name* and gather what it imports.

    Object schemas have each property typed on its own; the reference
    dictionary is the union of the property contributions and the schema's
    own top-level references (array ``items``, ``additionalProperties`` or an
    alias ``$ref``), with *name* itself removed so a self-referential schema
    never imports itself.

    Args:
        name: Key of the schema in the document's reusable-schema table.
        schema: The parsed schema.
        ctx: Converter context supplying the import prefix.

    Returns:
        A :class:`~taxos.models.NormalizedSchema`.

    Example::

        >>> item = normalize_schema("Item", parse_schema(raw_item, {"Tag"}), ctx)
        >>> item.properties["tag"].ts_type, item.ts_refs
        ('Tag', {'Tag': '@/api/api/definitions/Tag'})
    """
    properties: dict[str, NormalizedProperty] = {}
    property_refs: list[dict[str, str]] = []

    if isinstance(schema, ObjectSchema):
        required = set(schema.required)
        for prop_name, prop_schema in schema.properties.items():
            refs = collect_refs(prop_schema, ctx)
            properties[prop_name] = NormalizedProperty(
                name=prop_name,
                ts_type=project_type(prop_schema),
                required=prop_name in required,
                description=prop_schema.description,
                refs=refs,
                schema=prop_schema,
            )
            property_refs.append(refs)

    ts_refs = merge_refs(*property_refs, collect_refs(schema, ctx))
    ts_refs.pop(name, None)

    return NormalizedSchema(
        key=name,
        ts_type=project_type(schema),
        is_interface=isinstance(schema, ObjectSchema) and bool(schema.properties),
        description=schema.description,
        properties=properties,
        ts_refs=ts_refs,
    )
