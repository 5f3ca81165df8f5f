"""Shared test fixtures for taxos.

Provides reusable fixtures for loading document fixtures, building parsed
specs and IR, isolating configuration, managing output state, and running
CLI commands.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any

import pytest

from taxos.models import ConverterContext, NormalizedSpec, Settings, Spec
from taxos.normalizer import normalize
from taxos.output import OutputFormat, OutputManager, reset_output, set_output
from taxos.parser import parse_spec

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner replaces those streams per invocation.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def swagger2_raw() -> dict[str, Any]:
    """Raw Swagger 2.0 petstore document."""
    with open(FIXTURES_DIR / "petstore_swagger2.json") as f:
        return json.load(f)


@pytest.fixture
def openapi3_raw() -> dict[str, Any]:
    """Raw OpenAPI 3.0 petstore document."""
    with open(FIXTURES_DIR / "petstore_openapi3.json") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Parsed and normalized fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def ctx() -> ConverterContext:
    """Converter context with the default import prefix ``@/api/api``."""
    return ConverterContext()


@pytest.fixture
def swagger2_spec(swagger2_raw: dict[str, Any]) -> Spec:
    return parse_spec(swagger2_raw)


@pytest.fixture
def openapi3_spec(openapi3_raw: dict[str, Any]) -> Spec:
    return parse_spec(openapi3_raw)


@pytest.fixture
def swagger2_ir(swagger2_spec: Spec, ctx: ConverterContext) -> NormalizedSpec:
    return normalize(swagger2_spec, ctx)


@pytest.fixture
def openapi3_ir(openapi3_spec: Spec, ctx: ConverterContext) -> NormalizedSpec:
    return normalize(openapi3_spec, ctx)


# ---------------------------------------------------------------------------
# Workspace fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory with no TAXOS_* variables set.

    Copies both document fixtures into the directory so CLI tests can refer
    to them by relative path.
    """
    for var in (
        "TAXOS_API_ROOT",
        "TAXOS_API_NAME",
        "TAXOS_PACKAGE_ROOT",
        "TAXOS_PATH_PARAM_REPLACE",
        "TAXOS_BASE_PATH",
        "TAXOS_SWAGGER_OUT_DIR",
        "TAXOS_SRC_OUT_DIR",
    ):
        monkeypatch.delenv(var, raising=False)

    shutil.copy(FIXTURES_DIR / "petstore_swagger2.json", tmp_path / "swagger.json")
    shutil.copy(FIXTURES_DIR / "petstore_openapi3.json", tmp_path / "openapi.json")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings writing under tmp_path with absolute output directories."""
    return Settings(
        swagger_out_dir=str(tmp_path / "swagger"),
        src_out_dir=str(tmp_path / "src"),
    )


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN OutputManager for tests that ignore diagnostics."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
