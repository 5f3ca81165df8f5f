"""Build call descriptors for single operations.

A descriptor carries the code fragments a template pastes into one generated
axios call:

* ``path_code`` -- the request URL, a template literal interpolating
  ``params.path.<name>`` when the path has parameters, otherwise a quoted
  string literal.
* ``data_code`` -- the request payload: ``objectToFormData(params.formData)``
  for form fields, ``params.data`` for a body, ``undefined`` otherwise.
  Form fields win when an operation declares both.
* ``config_code`` -- ``{ params: params.query }`` when query parameters exist.

Path placeholders have a second, unrelated consumer: the splitter names
output directories after URL paths and rewrites ``{name}`` with the
configurable ``path_param_replace_value`` (see :func:`path_directory`).
"""

from __future__ import annotations

import re

from taxos.models import (
    ConverterContext,
    HTTPMethod,
    NormalizedParameter,
    NormalizedResponse,
    Operation,
    OperationDescriptor,
    ParameterLocation,
    RequestData,
)
from taxos.normalizer.parameters import classify_parameters
from taxos.normalizer.types import collect_refs, merge_refs, project_type

PATH_PARAM_RE = re.compile(r"\{([a-zA-Z0-9\-_]+)\}")

# JavaScript String.replace tokens: "$$", "$&" and "$1".."$99".
_REPLACEMENT_TOKEN_RE = re.compile(r"\$(\$|&|\d{1,2})")

# Methods whose generated call takes a payload argument.
_BODY_METHODS = frozenset({HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH})

FORM_DATA_CODE = "objectToFormData(params.formData)"
BODY_DATA_CODE = "params.data"
NO_DATA_CODE = "undefined"
QUERY_CONFIG_CODE = "{ params: params.query }"


def capitalize(s: str) -> str:
    """Upper-case the first character only (``"getPet"`` -> ``"GetPet"``)."""
    return s[:1].upper() + s[1:]


def safe_method_name(method: HTTPMethod) -> str:
    """Method name usable as a TypeScript identifier; ``delete`` is reserved."""
    return "delete_" if method == HTTPMethod.DELETE else method.value


def api_context_import(ctx: ConverterContext) -> str:
    return f"{ctx.package_root}/{ctx.api_root}/{ctx.api_name}/utils/apiContext"


def form_data_import(ctx: ConverterContext) -> str:
    return f"{ctx.package_root}/{ctx.api_root}/utils/objectToFormData"


def build_path_code(path_key: str, has_path_params: bool) -> str:
    """Return the URL expression of a generated call.

    Example::

        >>> build_path_code("/pets/{petId}", True)
        '`/pets/${params.path.petId}`'
        >>> build_path_code("/pets", False)
        '"/pets"'
    """
    if not has_path_params:
        return f'"{path_key}"'
    inner = PATH_PARAM_RE.sub(lambda m: "${params.path." + m.group(1) + "}", path_key)
    return f"`{inner}`"


def _expand_replacement(template: str, match: re.Match[str]) -> str:
    def token(m: re.Match[str]) -> str:
        value = m.group(1)
        if value == "$":
            return "$"
        if value == "&":
            return match.group(0)
        index = int(value)
        if 0 < index <= (match.re.groups or 0):
            return match.group(index) or ""
        return m.group(0)

    return _REPLACEMENT_TOKEN_RE.sub(token, template)


def path_directory(path_key: str, ctx: ConverterContext, base_path: str | None = None) -> str:
    """Return the directory-safe form of a URL path, relative to ``paths/``.

    *base_path* is prepended first, then every ``{name}`` placeholder is
    rewritten with ``ctx.path_param_replace_value``, where ``$1`` stands for
    the parameter name, ``$&`` for the whole placeholder and ``$$`` for a
    literal dollar sign.

    Example::

        >>> path_directory("/pets/{petId}", ConverterContext())
        'pets/_petId'
        >>> path_directory("/pets", ConverterContext(), base_path="/v1")
        'v1/pets'
    """
    full_path = path_key
    if base_path:
        full_path = base_path.rstrip("/") + "/" + path_key.lstrip("/")
    replaced = PATH_PARAM_RE.sub(
        lambda m: _expand_replacement(ctx.path_param_replace_value, m), full_path
    )
    return "/".join(segment for segment in replaced.split("/") if segment not in ("", "."))


def normalize_operation(
    operation: Operation, path_key: str, ctx: ConverterContext
) -> OperationDescriptor:
    """Turn one operation into the descriptor its generated call is rendered from.

    Args:
        operation: The parsed operation.
        path_key: The URL path the operation is declared under.
        ctx: Converter context supplying import prefixes.

    Returns:
        An :class:`~taxos.models.OperationDescriptor` whose ``ts_refs`` holds
        every schema touched by a parameter, the body or a response, plus the
        shared ``apiContext`` module (and ``objectToFormData`` for form
        uploads).
    """
    method = operation.method
    classified = classify_parameters(operation.parameters, ctx)
    flags = classified.flags

    responses: dict[str, NormalizedResponse] = {}
    for status, response in operation.responses.items():
        responses[status] = NormalizedResponse(
            status=status,
            ts_type=project_type(response.schema_),
            default=status == "default",
            description=response.description,
            refs=collect_refs(response.schema_, ctx),
        )

    data: RequestData | None = None
    structured: dict[str, list[NormalizedParameter]] = {}
    for location, params in classified.by_location.items():
        if location == ParameterLocation.BODY.value:
            body = params[0]
            data = RequestData(
                name=body.name,
                required=body.required,
                ts_type=body.ts_type,
                description=body.description,
            )
            continue
        structured[location] = params

    # Buckets preserve declaration order, so drawing from them in the
    # operation's parameter order rebuilds the flat list.
    buckets = {location: iter(params) for location, params in structured.items()}
    parameters = [
        next(buckets[param.location.value])
        for param in operation.parameters
        if param.location != ParameterLocation.BODY
    ]

    if flags.form_data:
        data_code = FORM_DATA_CODE
    elif flags.body:
        data_code = BODY_DATA_CODE
    else:
        data_code = NO_DATA_CODE

    synthetic = {"apiContext": api_context_import(ctx)}
    if flags.form_data:
        synthetic["objectToFormData"] = form_data_import(ctx)

    ts_refs = merge_refs(
        synthetic,
        *(r.refs for r in responses.values()),
        *(p.refs for bucket in classified.by_location.values() for p in bucket),
    )

    return OperationDescriptor(
        operation_id=operation.operation_id,
        path_key=path_key,
        method=method,
        method_safe=safe_method_name(method),
        capitalized_operation_id=capitalize(operation.operation_id),
        capitalized_method=capitalize(method.value),
        path_code=build_path_code(path_key, flags.path),
        data_code=data_code,
        config_code=QUERY_CONFIG_CODE if flags.query else None,
        can_send_request_body=method in _BODY_METHODS,
        summary=operation.summary,
        description=operation.description,
        tags=operation.tags,
        deprecated=operation.deprecated,
        parameters=parameters,
        structured_parameters=structured,
        parameter_exists=flags,
        data=data,
        responses=responses,
        ts_refs=ts_refs,
    )
