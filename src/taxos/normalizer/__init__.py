"""Normalizer -- project a parsed spec into the IR consumed by the writer and renderer.

Data flows bottom-up: type projection (:mod:`~taxos.normalizer.types`),
schema normalization (:mod:`~taxos.normalizer.schemas`), parameter
classification (:mod:`~taxos.normalizer.parameters`), operation descriptors
(:mod:`~taxos.normalizer.operations`), path records
(:mod:`~taxos.normalizer.paths`) and finally the whole document
(:mod:`~taxos.normalizer.spec`).

Typical usage::

    from taxos.models import ConverterContext
    from taxos.normalizer import normalize
    from taxos.parser import load_spec, parse_spec

    ir = normalize(parse_spec(load_spec("swagger.json")), ConverterContext(api_name="shop"))
"""

from taxos.normalizer.operations import normalize_operation, path_directory
from taxos.normalizer.parameters import classify_parameters
from taxos.normalizer.paths import normalize_path
from taxos.normalizer.schemas import normalize_schema
from taxos.normalizer.spec import build_base_url, normalize
from taxos.normalizer.types import collect_refs, merge_refs, project_type

__all__ = [
    "normalize",
    "build_base_url",
    "normalize_path",
    "normalize_operation",
    "path_directory",
    "classify_parameters",
    "normalize_schema",
    "project_type",
    "collect_refs",
    "merge_refs",
]
