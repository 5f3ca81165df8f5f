"""Split the IR into per-path and per-schema JSON files.

Layout under ``swagger_out_dir``::

    <api_name>/spec.json                          the whole IR
    <api_name>/paths/<url path>/spec.json         one NormalizedPath each
    <api_name>/definitions/<Name>/spec.json       one NormalizedSchema each

URL path placeholders are rewritten for the file system with
:func:`~taxos.normalizer.operations.path_directory`.  Files are written as
key-sorted, two-space-indented JSON, so the same input always yields
byte-identical output, and each file is replaced atomically.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Collection
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

from taxos.exceptions import OutputError
from taxos.models import NormalizedSpec, Settings
from taxos.normalizer.operations import path_directory

logger = logging.getLogger(__name__)

SPEC_FILENAME = "spec.json"


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.  On any failure the
    temp file is removed and the error re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def dump_model(model: BaseModel) -> str:
    """Serialise an IR model to stable JSON (camelCase keys, sorted, indent 2)."""
    data: Any = model.model_dump(mode="json", by_alias=True)
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def matches_filter(path: Path, out_filter: Collection[str]) -> bool:
    """``True`` when *out_filter* is empty or names *path*."""
    if not out_filter:
        return True
    wanted = {os.path.normpath(p) for p in out_filter}
    return os.path.normpath(str(path)) in wanted


def plan_ir_files(ir: NormalizedSpec, settings: Settings) -> dict[Path, BaseModel]:
    """Map every output file to the model it will hold.

    Raises:
        OutputError: If two URL paths rewrite to the same directory.
    """
    ctx = settings.context
    api_dir = Path(settings.swagger_out_dir) / ctx.api_name

    plan: dict[Path, BaseModel] = {api_dir / SPEC_FILENAME: ir}
    owners: dict[Path, str] = {}

    for path_key, path in ir.paths.items():
        target = api_dir / "paths" / path_directory(path_key, ctx, path.base_path) / SPEC_FILENAME
        if target in owners:
            raise OutputError(
                f"Paths '{owners[target]}' and '{path_key}' both map to {target}; "
                "choose a different --path-param-replace value"
            )
        owners[target] = path_key
        plan[target] = path

    for name, schema in ir.schemas.items():
        plan[api_dir / "definitions" / name / SPEC_FILENAME] = schema

    return plan


def write_ir(ir: NormalizedSpec, settings: Settings) -> list[Path]:
    """Write the IR files for one API.

    The whole-spec file is always written; per-path and per-schema files are
    skipped unless they pass ``settings.out_filter``.

    Args:
        ir: The normalized document.
        settings: Resolved settings (output directory, API name, filter).

    Returns:
        The paths written, in write order.

    Raises:
        OutputError: On directory collisions or file-system failures.
    """
    plan = plan_ir_files(ir, settings)
    whole_spec = Path(settings.swagger_out_dir) / settings.context.api_name / SPEC_FILENAME

    written: list[Path] = []
    for target, model in plan.items():
        if target != whole_spec and not matches_filter(target, settings.out_filter):
            logger.debug("Skipping %s (not in filter)", target)
            continue
        try:
            atomic_write(target, dump_model(model))
        except OSError as exc:
            raise OutputError(f"Failed to write {target}: {exc}") from exc
        logger.debug("Wrote %s", target)
        written.append(target)
    return written
