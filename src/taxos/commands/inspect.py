"""Inspect commands -- examine what a document normalizes to.

Provides the ``taxos inspect`` sub-command group with read-only commands
for viewing a document's operations, schemas and general info as the
normalizer sees them.  Nothing is written to disk.
"""

from __future__ import annotations

from typing import Optional

import typer

from taxos.commands.common import (
    API_NAME_OPTION,
    BASE_PATH_OPTION,
    DEFAULT_SPEC_PATH,
    build_settings,
    convert_document,
)
from taxos.exceptions import TaxosError
from taxos.models import NormalizedSpec
from taxos.output import error, get_output, info, print_json

inspect_app = typer.Typer(no_args_is_help=True)

SPEC_ARGUMENT = typer.Argument(
    DEFAULT_SPEC_PATH, help="Swagger/OpenAPI document: file path, URL, or '-' for stdin."
)


def _load_ir(spec: str, api_name: Optional[str], base_path: Optional[str] = None) -> NormalizedSpec:
    """Normalize *spec*, exiting with the error's code on failure."""
    try:
        settings = build_settings(api_name=api_name, base_path=base_path)
        return convert_document(spec, settings)
    except TaxosError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@inspect_app.command("paths")
def inspect_paths(
    spec: str = SPEC_ARGUMENT,
    api_name: Optional[str] = API_NAME_OPTION,
) -> None:
    """List every operation with its call name and payload strategy.

    Example::

        taxos inspect paths swagger.json
    """
    ir = _load_ir(spec, api_name)

    headers = ["Method", "Path", "Operation", "Function", "Data", "Response"]
    rows: list[list[str]] = []
    for path_key, path in sorted(ir.paths.items()):
        for op in path.operations.values():
            success = next(
                (r.ts_type for s, r in op.responses.items() if s.startswith("2")), "-"
            )
            rows.append([
                op.method.value.upper(),
                path_key,
                op.operation_id,
                op.method_safe,
                op.data_code,
                success,
            ])

    get_output().print_table(headers, rows, title=f"{ir.title} -- Operations ({len(rows)})")


@inspect_app.command("schemas")
def inspect_schemas(
    spec: str = SPEC_ARGUMENT,
    api_name: Optional[str] = API_NAME_OPTION,
) -> None:
    """List every reusable schema with its projected type and imports.

    Example::

        taxos inspect schemas swagger.json
    """
    ir = _load_ir(spec, api_name)

    if not ir.schemas:
        info("No schemas defined in this spec.")
        return

    headers = ["Schema", "Type", "Properties", "Imports"]
    rows: list[list[str]] = []
    for name, schema in sorted(ir.schemas.items()):
        prop_names = list(schema.properties)
        props = ", ".join(prop_names[:5])
        if len(prop_names) > 5:
            props += "..."
        rows.append([
            name,
            "interface" if schema.is_interface else schema.ts_type,
            props or "-",
            ", ".join(sorted(schema.ts_refs)) or "-",
        ])

    get_output().print_table(headers, rows, title=f"Schemas ({len(rows)})")


@inspect_app.command("info")
def inspect_info(
    spec: str = SPEC_ARGUMENT,
    api_name: Optional[str] = API_NAME_OPTION,
    base_path: Optional[str] = BASE_PATH_OPTION,
) -> None:
    """Show the document's title, dialect, base URL and counts.

    Example::

        taxos inspect info openapi.yaml
    """
    ir = _load_ir(spec, api_name, base_path)
    print_json({
        "title": ir.title,
        "version": ir.version,
        "dialect": ir.dialect.value,
        "base_url": ir.base_url,
        "paths": len(ir.paths),
        "operations": sum(len(p.operations) for p in ir.paths.values()),
        "schemas": len(ir.schemas),
    })
