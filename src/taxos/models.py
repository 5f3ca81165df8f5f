"""Canonical Pydantic models shared across all taxos modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into four groups:

**Configuration models** -- resolved by :mod:`taxos.config`:
    :class:`ConverterContext` and :class:`Settings`.

**Schema variant** -- a closed, discriminated union over the shapes a type
schema can take: :class:`BooleanSchema`, :class:`NumberSchema`,
:class:`IntegerSchema`, :class:`StringSchema`, :class:`ArraySchema`,
:class:`ObjectSchema`, :class:`RefSchema`, and :class:`UnknownSchema`.
Consumers match on every member and close the chain with
:func:`typing.assert_never`.

**Input models** -- produced by the dialect adapters in :mod:`taxos.parser`
so that the normalizer is written once for both Swagger 2.0 and OpenAPI 3.x:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`Response`, :class:`Operation`, :class:`PathItem`,
    :class:`ServerInfo`, and :class:`Spec`.

**IR models** -- produced by :mod:`taxos.normalizer`, serialised to JSON by
:mod:`taxos.writer` and read back by :mod:`taxos.renderer`. They use
camelCase aliases so the JSON files read naturally from the TypeScript
templates:
    :class:`NormalizedProperty`, :class:`NormalizedSchema`,
    :class:`NormalizedParameter`, :class:`RequestData`,
    :class:`ParameterFlags`, :class:`ClassifiedParameters`,
    :class:`NormalizedResponse`, :class:`OperationDescriptor`,
    :class:`NormalizedPath`, and :class:`NormalizedSpec`.

Input and IR models are frozen: they are created once per run and never
mutated afterwards.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# --- Configuration ---


class ConverterContext(BaseModel):
    """Settings that influence the generated IR.

    Passed explicitly to every normalizer function. ``package_root``,
    ``api_root`` and ``api_name`` together form the import prefix of every
    generated module (``@/api/petstore/definitions/Pet``).

    Example::

        ConverterContext(api_name="petstore", package_root="~")
    """

    model_config = ConfigDict(frozen=True)

    api_root: str = Field(default="api", description="Directory holding all generated APIs")
    api_name: str = Field(default="api", description="Name of this API's directory")
    package_root: str = Field(default="@", description="Import alias of the source root")
    path_param_replace_value: str = Field(
        default="_$1",
        description="Replacement for {param} placeholders in output directory names "
        "($1 is the parameter name)",
    )
    base_path: Optional[str] = Field(
        default=None, description="Override for the document's basePath"
    )


class Settings(BaseModel):
    """Fully resolved settings for one CLI invocation.

    Built by :func:`~taxos.config.resolve_settings` from CLI flags,
    ``TAXOS_*`` environment variables, the project-local ``taxos.json`` and
    the defaults declared here.
    """

    context: ConverterContext = Field(default_factory=ConverterContext)
    swagger_out_dir: str = Field(default="swagger", description="IR JSON output directory")
    src_out_dir: str = Field(default="src", description="TypeScript output directory")
    out_filter: list[str] = Field(
        default_factory=list, description="Only write these output paths (empty = all)"
    )


# --- Schema variant ---


class _SchemaBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    description: Optional[str] = None


class BooleanSchema(_SchemaBase):
    kind: Literal["boolean"] = "boolean"
    enum: Optional[list[Any]] = None


class NumberSchema(_SchemaBase):
    kind: Literal["number"] = "number"
    format: Optional[str] = None
    enum: Optional[list[Any]] = None


class IntegerSchema(_SchemaBase):
    kind: Literal["integer"] = "integer"
    format: Optional[str] = None
    enum: Optional[list[Any]] = None


class StringSchema(_SchemaBase):
    kind: Literal["string"] = "string"
    format: Optional[str] = None
    enum: Optional[list[Any]] = None


class ArraySchema(_SchemaBase):
    """A homogeneous sequence; ``items`` is always present."""

    kind: Literal["array"] = "array"
    items: Schema


class ObjectSchema(_SchemaBase):
    """An object with named properties, a string-keyed mapping, both, or neither."""

    kind: Literal["object"] = "object"
    properties: dict[str, Schema] = Field(default_factory=dict)
    additional_properties: Optional[Schema] = None
    required: list[str] = Field(default_factory=list)


class RefSchema(_SchemaBase):
    """A pointer to a reusable schema.

    ``name`` is the target's key in the document's schema table; the parser
    only builds a ``RefSchema`` after checking that the key exists.
    """

    kind: Literal["ref"] = "ref"
    ref: str
    name: str


class UnknownSchema(_SchemaBase):
    """Any shape the projector does not model (``allOf``, ``null``, ``file``...)."""

    kind: Literal["unknown"] = "unknown"
    raw: dict[str, Any] = Field(default_factory=dict)


Schema = Annotated[
    Union[
        BooleanSchema,
        NumberSchema,
        IntegerSchema,
        StringSchema,
        ArraySchema,
        ObjectSchema,
        RefSchema,
        UnknownSchema,
    ],
    Field(discriminator="kind"),
]


# --- Input models ---


class SpecDialect(str, enum.Enum):
    """The two document dialects accepted by the adapters."""

    SWAGGER_2 = "swagger2"
    OPENAPI_3 = "openapi3"


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised on a path item."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Transport locations a parameter can travel in, per its ``in`` field.

    ``body`` and ``formData`` only occur natively in Swagger 2.0; the
    OpenAPI 3.x adapter translates request bodies into them.
    """

    PATH = "path"
    QUERY = "query"
    BODY = "body"
    FORM_DATA = "formData"
    HEADER = "header"
    COOKIE = "cookie"


class Parameter(BaseModel):
    """A single operation parameter with its (possibly absent) schema."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class Response(BaseModel):
    """A response declaration for one status code (or ``default``)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: Optional[str] = None
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class Operation(BaseModel):
    """One method under one URL path."""

    model_config = ConfigDict(frozen=True)

    operation_id: str
    method: HTTPMethod
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    deprecated: bool = False
    parameters: list[Parameter] = Field(default_factory=list)
    responses: dict[str, Response] = Field(default_factory=dict)

    @property
    def request_body(self) -> Optional[Parameter]:
        """The body parameter, if the operation declares one."""
        for param in self.parameters:
            if param.location == ParameterLocation.BODY:
                return param
        return None


class PathItem(BaseModel):
    """All operations declared under one URL path, keyed by method name."""

    model_config = ConfigDict(frozen=True)

    operations: dict[str, Operation] = Field(default_factory=dict)


class ServerInfo(BaseModel):
    """A ``servers`` entry; ``variables`` maps each variable to its default."""

    model_config = ConfigDict(frozen=True)

    url: str
    description: Optional[str] = None
    variables: dict[str, str] = Field(default_factory=dict)


class Spec(BaseModel):
    """The dialect-neutral form of an input document.

    Swagger 2.0 documents populate ``host``, ``schemes`` and ``base_path``;
    OpenAPI 3.x documents populate ``servers``.
    """

    model_config = ConfigDict(frozen=True)

    dialect: SpecDialect
    spec_version: str
    title: str = "Untitled API"
    version: str = "0.0.0"
    servers: list[ServerInfo] = Field(default_factory=list)
    host: Optional[str] = None
    schemes: list[str] = Field(default_factory=list)
    base_path: Optional[str] = None
    paths: dict[str, PathItem] = Field(default_factory=dict)
    schemas: dict[str, Schema] = Field(default_factory=dict)


# --- IR models ---


class _IRModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class NormalizedProperty(_IRModel):
    name: str
    ts_type: str
    required: bool = False
    description: Optional[str] = None
    refs: dict[str, str] = Field(default_factory=dict)
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class NormalizedSchema(_IRModel):
    """A reusable schema ready to be rendered as a declaration file.

    Object schemas with properties render as an interface; every other
    shape renders as a type alias of ``ts_type``.
    """

    key: str
    ts_type: str
    is_interface: bool = False
    description: Optional[str] = None
    properties: dict[str, NormalizedProperty] = Field(default_factory=dict)
    ts_refs: dict[str, str] = Field(default_factory=dict)


class NormalizedParameter(_IRModel):
    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    ts_type: str
    has_schema: bool = True
    refs: dict[str, str] = Field(default_factory=dict)
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class RequestData(_IRModel):
    """The request body as the generated call sees it (``params.data``)."""

    name: str = "body"
    required: bool = False
    ts_type: str
    description: Optional[str] = None


class ParameterFlags(_IRModel):
    path: bool = False
    query: bool = False
    body: bool = False
    form_data: bool = False
    header: bool = False
    cookie: bool = False


class ClassifiedParameters(_IRModel):
    by_location: dict[str, list[NormalizedParameter]] = Field(default_factory=dict)
    flags: ParameterFlags = Field(default_factory=ParameterFlags)


class NormalizedResponse(_IRModel):
    status: str
    ts_type: str
    default: bool = False
    description: Optional[str] = None
    refs: dict[str, str] = Field(default_factory=dict)


class OperationDescriptor(_IRModel):
    """Everything a template needs to emit one API call."""

    operation_id: str
    path_key: str
    method: HTTPMethod
    method_safe: str
    capitalized_operation_id: str
    capitalized_method: str
    path_code: str
    data_code: str = "undefined"
    config_code: Optional[str] = None
    can_send_request_body: bool = False
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    deprecated: bool = False
    parameters: list[NormalizedParameter] = Field(default_factory=list)
    structured_parameters: dict[str, list[NormalizedParameter]] = Field(default_factory=dict)
    parameter_exists: ParameterFlags = Field(default_factory=ParameterFlags)
    data: Optional[RequestData] = None
    responses: dict[str, NormalizedResponse] = Field(default_factory=dict)
    ts_refs: dict[str, str] = Field(default_factory=dict)


class NormalizedPath(_IRModel):
    key: str
    base_path: Optional[str] = None
    operations: dict[str, OperationDescriptor] = Field(default_factory=dict)
    ts_refs: dict[str, str] = Field(default_factory=dict)


class NormalizedSpec(_IRModel):
    """The complete IR for one document."""

    dialect: SpecDialect
    title: str
    version: str
    base_url: str
    paths: dict[str, NormalizedPath] = Field(default_factory=dict)
    schemas: dict[str, NormalizedSchema] = Field(default_factory=dict)


for _model in (
    ArraySchema,
    ObjectSchema,
    Parameter,
    Response,
    Operation,
    PathItem,
    Spec,
    NormalizedProperty,
    NormalizedParameter,
    NormalizedPath,
    NormalizedSpec,
):
    _model.model_rebuild()
