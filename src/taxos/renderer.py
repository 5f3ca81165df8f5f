"""Render TypeScript + axios sources from the IR JSON files.

The renderer is the second stage of the pipeline and only reads what
:mod:`taxos.writer` produced, so the two stages can run separately
(``taxos convert`` then ``taxos generate``).  For an API it writes::

    <src>/<api_root>/utils/objectToFormData.ts
    <src>/<api_root>/<api_name>/utils/apiContext.ts
    <src>/<api_root>/<api_name>/definitions/<Name>/index.d.ts
    <src>/<api_root>/<api_name>/paths/<url path>/index.ts

Every file starts with :data:`HEADER`.  Templates live in ``templates/``
next to this module and are rendered with Jinja2.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import NamedTuple, TypeVar

from jinja2 import Environment, FileSystemLoader
from pydantic import BaseModel, ValidationError

from taxos.exceptions import OutputError
from taxos.models import (
    NormalizedPath,
    NormalizedSchema,
    NormalizedSpec,
    OperationDescriptor,
    Settings,
)
from taxos.normalizer.types import ANY
from taxos.writer import SPEC_FILENAME, atomic_write, matches_filter

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``taxos/templates/``)."""

HEADER = "// Generated by taxos\n\n"

# axios helpers taking (url, config) rather than (url, data, config).
AXIOS_URL_METHODS = ("get", "delete", "head", "options")

_TS_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_M = TypeVar("_M", bound=BaseModel)


class RenderedFile(NamedTuple):
    """One generated file and the IR file it was rendered from."""

    source: str
    target: Path


# ------------------------------------------------------------------ #
# Template filters
# ------------------------------------------------------------------ #


def ts_key(name: str) -> str:
    """Quote an object key unless it is a plain TypeScript identifier."""
    if _TS_IDENTIFIER_RE.match(name):
        return name
    return json.dumps(name)


def jsdoc(text: str, indent: str = "") -> str:
    """Format text as a ``/** ... */`` comment block."""
    lines = str(text).replace("*/", "*\\/").splitlines() or [""]
    if len(lines) == 1:
        return f"{indent}/** {lines[0]} */"
    body = "\n".join(f"{indent} * {line}".rstrip() for line in lines)
    return f"{indent}/**\n{body}\n{indent} */"


def response_type(op: OperationDescriptor) -> str:
    """Type of the first 2xx response, else of ``default``, else ``any``."""
    for status, response in op.responses.items():
        if status.startswith("2"):
            return response.ts_type
    default = op.responses.get("default")
    return default.ts_type if default is not None else ANY


def request_config(op: OperationDescriptor) -> str:
    """The axios config object literal passed to the generated call.

    Cookie parameters are typed in the generated ``Params`` interface but are
    not sent: the browser attaches cookies itself and axios cannot set a
    ``Cookie`` header there.
    """
    parts: list[str] = []
    if op.config_code is not None:
        parts.append(f"...{op.config_code}")
    if op.parameter_exists.header:
        parts.append("headers: params.header")
    if not op.can_send_request_body and op.data_code != "undefined":
        parts.append(f"data: {op.data_code}")
    parts.append("...config")
    return "{ " + ", ".join(parts) + " }"


def create_environment() -> Environment:
    """Create the Jinja2 environment for the TypeScript templates.

    Autoescape stays off since the output is TypeScript, not HTML.  Block
    trimming and lstrip keep the control tags out of the generated code.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["ts_key"] = ts_key
    env.filters["jsdoc"] = jsdoc
    env.filters["response_type"] = response_type
    env.filters["request_config"] = request_config
    env.globals["axios_url_methods"] = AXIOS_URL_METHODS
    return env


# ------------------------------------------------------------------ #
# Rendering
# ------------------------------------------------------------------ #


def render_object_to_form_data(env: Environment) -> str:
    return HEADER + env.get_template("objectToFormData.ts.j2").render()


def render_api_context(env: Environment, base_url: str) -> str:
    return HEADER + env.get_template("apiContext.ts.j2").render(base_url=base_url)


def render_definition(env: Environment, schema: NormalizedSchema) -> str:
    return HEADER + env.get_template("definition.d.ts.j2").render(schema=schema)


def render_path(env: Environment, path: NormalizedPath) -> str:
    return HEADER + env.get_template("path.ts.j2").render(path=path)


def _read_model(path: Path, model: type[_M]) -> _M:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return model.model_validate(data)
    except OSError as exc:
        raise OutputError(f"Failed to read {path}: {exc}") from exc
    except (json.JSONDecodeError, ValidationError) as exc:
        raise OutputError(f"Invalid IR file {path}: {exc}") from exc


def generate_sources(settings: Settings) -> list[RenderedFile]:
    """Render every TypeScript file for one API from its IR JSON files.

    Args:
        settings: Resolved settings naming the IR directory, the source
            output directory and the optional output filter.

    Returns:
        The files written, each paired with the IR file it came from.

    Raises:
        OutputError: If the IR is missing or unreadable, or a file cannot
            be written.
    """
    ctx = settings.context
    swagger_root = Path(settings.swagger_out_dir)
    api_dir = swagger_root / ctx.api_name
    src_root = Path(settings.src_out_dir) / ctx.api_root
    whole_spec = api_dir / SPEC_FILENAME

    if not whole_spec.is_file():
        raise OutputError(
            f"IR not found at {whole_spec}. Run 'taxos convert' first."
        )

    env = create_environment()
    ir = _read_model(whole_spec, NormalizedSpec)

    jobs: list[tuple[str, Path, str]] = [
        (
            "objectToFormData",
            src_root / "utils" / "objectToFormData.ts",
            render_object_to_form_data(env),
        ),
        (
            str(whole_spec),
            src_root / ctx.api_name / "utils" / "apiContext.ts",
            render_api_context(env, ir.base_url),
        ),
    ]

    for spec_file in sorted((api_dir / "definitions").glob(f"**/{SPEC_FILENAME}")):
        target = src_root / spec_file.parent.relative_to(swagger_root) / "index.d.ts"
        if matches_filter(target, settings.out_filter):
            schema = _read_model(spec_file, NormalizedSchema)
            jobs.append((str(spec_file), target, render_definition(env, schema)))

    for spec_file in sorted((api_dir / "paths").glob(f"**/{SPEC_FILENAME}")):
        target = src_root / spec_file.parent.relative_to(swagger_root) / "index.ts"
        if matches_filter(target, settings.out_filter):
            path = _read_model(spec_file, NormalizedPath)
            jobs.append((str(spec_file), target, render_path(env, path)))

    rendered: list[RenderedFile] = []
    for source, target, content in jobs:
        if not matches_filter(target, settings.out_filter):
            logger.debug("Skipping %s (not in filter)", target)
            continue
        try:
            atomic_write(target, content)
        except OSError as exc:
            raise OutputError(f"Failed to write {target}: {exc}") from exc
        logger.debug("Rendered %s -> %s", source, target)
        rendered.append(RenderedFile(source=source, target=target))
    return rendered
