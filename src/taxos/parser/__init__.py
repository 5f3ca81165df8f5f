"""Document parser -- load, detect the dialect, and adapt to the internal spec.

This sub-package is responsible for the first half of the taxos pipeline:
turning a raw Swagger 2.0 or OpenAPI 3.x document (JSON or YAML, local file
or remote URL) into a dialect-neutral :class:`~taxos.models.Spec` that the
normalizer can consume.

Typical usage::

    from taxos.parser import load_spec, parse_spec

    raw = load_spec("https://petstore.swagger.io/v2/swagger.json")
    spec = parse_spec(raw)

Sub-modules:

* :mod:`~taxos.parser.loader` -- I/O layer (URL, file, stdin) plus format
  and dialect detection.
* :mod:`~taxos.parser.resolver` -- Schema reference resolution and JSON
  pointer lookup for component references.
* :mod:`~taxos.parser.schema` -- Raw schema dicts to the closed
  :data:`~taxos.models.Schema` variant.
* :mod:`~taxos.parser.swagger` / :mod:`~taxos.parser.openapi` -- The two
  dialect adapters.
"""

from taxos.parser.adapters import parse_spec
from taxos.parser.loader import detect_dialect, load_spec
from taxos.parser.resolver import ResolvedReference, resolve_reference

__all__ = [
    "load_spec",
    "detect_dialect",
    "parse_spec",
    "resolve_reference",
    "ResolvedReference",
]
