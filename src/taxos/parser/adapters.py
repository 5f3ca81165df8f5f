"""Dispatch a raw document to the adapter for its dialect."""

from __future__ import annotations

import logging
from typing import Any

from taxos.models import Spec, SpecDialect
from taxos.parser.loader import detect_dialect
from taxos.parser.openapi import parse_openapi
from taxos.parser.swagger import parse_swagger

logger = logging.getLogger(__name__)


def parse_spec(raw: dict[str, Any]) -> Spec:
    """Translate a raw Swagger 2.0 or OpenAPI 3.x document into a :class:`~taxos.models.Spec`.

    Raises:
        SpecParseError: If the dialect is unsupported or the document is
            malformed.
    """
    dialect, version = detect_dialect(raw)
    logger.debug("Detected %s document (version %s)", dialect.value, version)

    if dialect is SpecDialect.SWAGGER_2:
        spec = parse_swagger(raw)
    else:
        spec = parse_openapi(raw)

    logger.debug(
        "Parsed %d paths and %d schemas from '%s'",
        len(spec.paths),
        len(spec.schemas),
        spec.title,
    )
    return spec
