"""Aggregate the operations of one URL path into a path record."""

from __future__ import annotations

from typing import Optional

from taxos.models import ConverterContext, NormalizedPath, PathItem
from taxos.normalizer.operations import normalize_operation
from taxos.normalizer.types import merge_refs


def normalize_path(
    path_key: str,
    path_item: PathItem,
    ctx: ConverterContext,
    base_path: Optional[str] = None,
) -> NormalizedPath:
    """Normalize every operation under *path_key* and union their references.

    Operations keep the document's method order.  *base_path* is recorded on
    the record so the splitter can nest the output directory under it.
    """
    operations = {
        method: normalize_operation(operation, path_key, ctx)
        for method, operation in path_item.operations.items()
    }
    return NormalizedPath(
        key=path_key,
        base_path=base_path,
        operations=operations,
        ts_refs=merge_refs(*(op.ts_refs for op in operations.values())),
    )
