"""``taxos build`` -- convert and generate in one step."""

from __future__ import annotations

from typing import Optional

import typer

from taxos.commands.common import (
    API_NAME_OPTION,
    API_ROOT_OPTION,
    BASE_PATH_OPTION,
    DEFAULT_SPEC_PATH,
    FILTER_OPTION,
    PACKAGE_ROOT_OPTION,
    PATH_PARAM_REPLACE_OPTION,
    SRC_OUT_DIR_OPTION,
    SWAGGER_OUT_DIR_OPTION,
    build_settings,
)
from taxos.commands.convert import run_convert
from taxos.commands.generate import run_generate
from taxos.exceptions import TaxosError
from taxos.output import error, success


def build_command(
    spec: str = typer.Argument(
        DEFAULT_SPEC_PATH, help="Swagger/OpenAPI document: file path, URL, or '-' for stdin."
    ),
    api_name: Optional[str] = API_NAME_OPTION,
    api_root: Optional[str] = API_ROOT_OPTION,
    package_root: Optional[str] = PACKAGE_ROOT_OPTION,
    swagger_out_dir: Optional[str] = SWAGGER_OUT_DIR_OPTION,
    src_out_dir: Optional[str] = SRC_OUT_DIR_OPTION,
    out_filter: Optional[list[str]] = FILTER_OPTION,
    path_param_replace: Optional[str] = PATH_PARAM_REPLACE_OPTION,
    base_path: Optional[str] = BASE_PATH_OPTION,
) -> None:
    """Write the IR JSON files and render the TypeScript sources from them.

    The filter applies to both stages, so a filter naming only TypeScript
    files still needs the matching IR files on disk from an earlier run.

    Example::

        taxos build swagger.json -n petstore -S swagger -r src
    """
    try:
        settings = build_settings(
            api_name=api_name,
            api_root=api_root,
            package_root=package_root,
            swagger_out_dir=swagger_out_dir,
            src_out_dir=src_out_dir,
            out_filter=out_filter,
            path_param_replace_value=path_param_replace,
            base_path=base_path,
        )
        ir_count = run_convert(spec, settings)
        src_count = run_generate(settings)
    except TaxosError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Wrote {ir_count} IR file(s) and {src_count} source file(s)")
