"""Entry point of the normalizer: turn a parsed :class:`~taxos.models.Spec` into the IR."""

from __future__ import annotations

import logging
import re
from typing import Optional

from taxos.exceptions import SpecParseError
from taxos.models import ConverterContext, NormalizedSpec, ServerInfo, Spec
from taxos.normalizer.paths import normalize_path
from taxos.normalizer.schemas import normalize_schema

logger = logging.getLogger(__name__)

_SERVER_VARIABLE_RE = re.compile(r"\{([^{}]+)\}")


def _server_url(server: ServerInfo) -> str:
    """Substitute server variables with their default values."""
    return _SERVER_VARIABLE_RE.sub(
        lambda m: server.variables.get(m.group(1), m.group(0)), server.url
    )


def effective_base_path(spec: Spec, ctx: ConverterContext) -> Optional[str]:
    """The configured base path override, else the document's ``basePath``."""
    return ctx.base_path if ctx.base_path is not None else spec.base_path


def build_base_url(spec: Spec, ctx: ConverterContext) -> str:
    """Compute the service base URL.

    The first ``servers`` entry wins.  Otherwise the URL is synthesised from
    ``host``, ``schemes`` and ``basePath``: the scheme is ``https`` only when
    declared, the base path defaults to ``/`` and always starts with a
    slash.  Without a host the base path alone is returned.

    Example::

        >>> spec = Spec(dialect="swagger2", spec_version="2.0", host="api.example.com",
        ...             schemes=["https"], base_path="/v1")
        >>> build_base_url(spec, ConverterContext())
        'https://api.example.com/v1'
    """
    if spec.servers:
        return _server_url(spec.servers[0])

    base_path = effective_base_path(spec, ctx) or "/"
    if not base_path.startswith("/"):
        base_path = "/" + base_path

    if spec.host is None:
        return base_path
    scheme = "https" if "https" in spec.schemes else "http"
    return f"{scheme}://{spec.host}{base_path}"


def _check_unique_operation_ids(spec: Spec) -> None:
    seen: dict[str, str] = {}
    for path_key, path_item in spec.paths.items():
        for method, operation in path_item.operations.items():
            where = f"{method.upper()} {path_key}"
            if operation.operation_id in seen:
                raise SpecParseError(
                    f"Duplicate operationId '{operation.operation_id}' "
                    f"({seen[operation.operation_id]} and {where})"
                )
            seen[operation.operation_id] = where


def normalize(spec: Spec, ctx: ConverterContext) -> NormalizedSpec:
    """Normalize a whole document into the IR.

    Every path and every schema is normalized independently of the others;
    the result is built completely before it is returned, so a fatal error
    leaves nothing half-written.

    Args:
        spec: The dialect-neutral spec from :func:`~taxos.parser.parse_spec`.
        ctx: Converter context threaded through every step.

    Returns:
        The complete :class:`~taxos.models.NormalizedSpec`.

    Raises:
        SpecParseError: If two operations share an ``operationId`` or a
            schema reference cannot be resolved.
    """
    _check_unique_operation_ids(spec)

    base_url = build_base_url(spec, ctx)
    base_path = effective_base_path(spec, ctx)
    logger.debug("Base URL for '%s' is %s", spec.title, base_url)

    paths = {
        path_key: normalize_path(path_key, path_item, ctx, base_path=base_path)
        for path_key, path_item in spec.paths.items()
    }
    schemas = {
        name: normalize_schema(name, schema, ctx) for name, schema in spec.schemas.items()
    }
    logger.debug("Normalized %d paths and %d schemas", len(paths), len(schemas))

    return NormalizedSpec(
        dialect=spec.dialect,
        title=spec.title,
        version=spec.version,
        base_url=base_url,
        paths=paths,
        schemas=schemas,
    )
