"""Partition an operation's parameters by transport location."""

from __future__ import annotations

from collections.abc import Iterable

from taxos.models import (
    ClassifiedParameters,
    ConverterContext,
    NormalizedParameter,
    Parameter,
    ParameterFlags,
    ParameterLocation,
)
from taxos.normalizer.types import collect_refs, project_type

# ParameterFlags field for each location.
_FLAG_FIELDS = {
    ParameterLocation.PATH: "path",
    ParameterLocation.QUERY: "query",
    ParameterLocation.BODY: "body",
    ParameterLocation.FORM_DATA: "form_data",
    ParameterLocation.HEADER: "header",
    ParameterLocation.COOKIE: "cookie",
}


def normalize_parameter(param: Parameter, ctx: ConverterContext) -> NormalizedParameter:
    """Attach the projected type and reference dictionary to one parameter."""
    return NormalizedParameter(
        name=param.name,
        location=param.location,
        required=param.required,
        description=param.description,
        ts_type=project_type(param.schema_),
        has_schema=param.schema_ is not None,
        refs=collect_refs(param.schema_, ctx),
        schema=param.schema_,
    )


def classify_parameters(
    params: Iterable[Parameter], ctx: ConverterContext
) -> ClassifiedParameters:
    """Group parameters by location in a single pass.

    Every parameter lands in exactly one bucket, keyed by the location's
    wire value (``"path"``, ``"query"``, ``"body"``, ``"formData"`` ...),
    preserving declaration order within each bucket.  ``flags`` records which
    buckets are non-empty.

    Args:
        params: The operation's merged parameters.
        ctx: Converter context supplying the import prefix.

    Returns:
        A :class:`~taxos.models.ClassifiedParameters`.
    """
    by_location: dict[str, list[NormalizedParameter]] = {}
    seen: set[str] = set()

    for param in params:
        normalized = normalize_parameter(param, ctx)
        by_location.setdefault(param.location.value, []).append(normalized)
        seen.add(_FLAG_FIELDS[param.location])

    flags = ParameterFlags(**{field: field in seen for field in _FLAG_FIELDS.values()})
    return ClassifiedParameters(by_location=by_location, flags=flags)
