"""``taxos generate`` -- render TypeScript sources from existing IR JSON files."""

from __future__ import annotations

from typing import Optional

import typer

from taxos.commands.common import (
    API_NAME_OPTION,
    API_ROOT_OPTION,
    FILTER_OPTION,
    SRC_OUT_DIR_OPTION,
    SWAGGER_OUT_DIR_OPTION,
    build_settings,
)
from taxos.exceptions import TaxosError
from taxos.models import Settings
from taxos.output import error, success, written
from taxos.renderer import generate_sources


def run_generate(settings: Settings) -> int:
    """Render all sources for the configured API; return the number of files written."""
    rendered = generate_sources(settings)
    for item in rendered:
        written(item.source, str(item.target))
    return len(rendered)


def generate_command(
    api_name: Optional[str] = API_NAME_OPTION,
    api_root: Optional[str] = API_ROOT_OPTION,
    swagger_out_dir: Optional[str] = SWAGGER_OUT_DIR_OPTION,
    src_out_dir: Optional[str] = SRC_OUT_DIR_OPTION,
    out_filter: Optional[list[str]] = FILTER_OPTION,
) -> None:
    """Generate TypeScript + axios client code from IR JSON files.

    Example::

        taxos generate --api-name petstore --src-out-dir src
    """
    try:
        settings = build_settings(
            api_name=api_name,
            api_root=api_root,
            swagger_out_dir=swagger_out_dir,
            src_out_dir=src_out_dir,
            out_filter=out_filter,
        )
        count = run_generate(settings)
    except TaxosError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Generated {count} file(s) under {settings.src_out_dir}/{settings.context.api_root}")
