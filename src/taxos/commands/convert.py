"""``taxos convert`` -- normalize a document and split the IR into JSON files."""

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
    SWAGGER_OUT_DIR_OPTION,
    build_settings,
    convert_document,
)
from taxos.exceptions import TaxosError
from taxos.models import Settings
from taxos.output import error, print_json, success, written
from taxos.writer import write_ir


def run_convert(source: str, settings: Settings) -> int:
    """Convert *source* and write its IR files; return the number of files written."""
    ir = convert_document(source, settings)
    paths = write_ir(ir, settings)
    for path in paths:
        written(source, str(path))
    return len(paths)


def convert_command(
    spec: str = typer.Argument(
        DEFAULT_SPEC_PATH, help="Swagger/OpenAPI document: file path, URL, or '-' for stdin."
    ),
    api_name: Optional[str] = API_NAME_OPTION,
    api_root: Optional[str] = API_ROOT_OPTION,
    package_root: Optional[str] = PACKAGE_ROOT_OPTION,
    swagger_out_dir: Optional[str] = SWAGGER_OUT_DIR_OPTION,
    out_filter: Optional[list[str]] = FILTER_OPTION,
    path_param_replace: Optional[str] = PATH_PARAM_REPLACE_OPTION,
    base_path: Optional[str] = BASE_PATH_OPTION,
    stdout: bool = typer.Option(
        False, "--stdout", help="Print the whole IR to stdout instead of writing files."
    ),
) -> None:
    """Normalize a Swagger 2.0 / OpenAPI 3.x document into IR JSON files.

    Example::

        taxos convert swagger.json --api-name petstore
        taxos convert https://petstore.swagger.io/v2/swagger.json -S build/swagger
    """
    try:
        settings = build_settings(
            api_name=api_name,
            api_root=api_root,
            package_root=package_root,
            swagger_out_dir=swagger_out_dir,
            out_filter=out_filter,
            path_param_replace_value=path_param_replace,
            base_path=base_path,
        )
        if stdout:
            ir = convert_document(spec, settings)
            print_json(ir.model_dump(mode="json", by_alias=True))
            return
        count = run_convert(spec, settings)
    except TaxosError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Wrote {count} IR file(s) to {settings.swagger_out_dir}/{settings.context.api_name}")
