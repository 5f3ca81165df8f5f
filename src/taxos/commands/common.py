"""Options and helpers shared by the pipeline commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer

from taxos.config import resolve_settings
from taxos.models import NormalizedSpec, Settings, Spec
from taxos.normalizer import normalize
from taxos.output import debug
from taxos.parser import load_spec, parse_spec

DEFAULT_SPEC_PATH = "swagger.json"

# Typer option declarations, reused by several commands.  ``None`` defaults
# let values fall through to the environment and taxos.json.
API_NAME_OPTION = typer.Option(None, "--api-name", "-n", help="API name (output sub-directory).")
API_ROOT_OPTION = typer.Option(None, "--api-root", help="Directory holding all generated APIs.")
PACKAGE_ROOT_OPTION = typer.Option(
    None, "--package-root", help="Import alias of the source root (e.g. '@')."
)
SWAGGER_OUT_DIR_OPTION = typer.Option(
    None, "--swagger-out-dir", "-S", help="Directory for the IR JSON files."
)
SRC_OUT_DIR_OPTION = typer.Option(
    None, "--src-out-dir", "-r", help="Directory for the generated TypeScript."
)
FILTER_OPTION = typer.Option(
    None, "--filter", "-f", help="Only write this output file (repeatable)."
)
PATH_PARAM_REPLACE_OPTION = typer.Option(
    None,
    "--path-param-replace",
    help="Replacement for {param} in directory names ($1 = parameter name).",
)
BASE_PATH_OPTION = typer.Option(
    None, "--base-path", help="Base path prefixed to output paths (overrides basePath)."
)


def build_settings(
    *,
    api_name: Optional[str] = None,
    api_root: Optional[str] = None,
    package_root: Optional[str] = None,
    swagger_out_dir: Optional[str] = None,
    src_out_dir: Optional[str] = None,
    out_filter: Optional[list[str]] = None,
    path_param_replace_value: Optional[str] = None,
    base_path: Optional[str] = None,
    cwd: Optional[Path] = None,
) -> Settings:
    """Resolve settings with CLI values layered on top of env and ``taxos.json``."""
    overrides: dict[str, Any] = {
        "api_name": api_name,
        "api_root": api_root,
        "package_root": package_root,
        "swagger_out_dir": swagger_out_dir,
        "src_out_dir": src_out_dir,
        "out_filter": out_filter or None,
        "path_param_replace_value": path_param_replace_value,
        "base_path": base_path,
    }
    settings = resolve_settings(overrides, cwd=cwd)
    debug(f"Settings: {settings.model_dump()}")
    return settings


def load_document(source: str) -> Spec:
    """Load and adapt a document from a file, URL or stdin."""
    return parse_spec(load_spec(source))


def convert_document(source: str, settings: Settings) -> NormalizedSpec:
    """Load, adapt and normalize a document into the IR."""
    spec = load_document(source)
    debug(f"Loaded {spec.dialect.value} document '{spec.title}' ({len(spec.paths)} paths)")
    return normalize(spec, settings.context)
