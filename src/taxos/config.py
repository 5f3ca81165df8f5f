"""Configuration resolution with project-local config and precedence rules.

Settings that shape the generated IR and output locations come from four
layers (high to low):

    1. CLI flags
    2. Environment variables (``TAXOS_API_NAME``, ``TAXOS_SWAGGER_OUT_DIR`` ...)
    3. Project config (``./taxos.json``)
    4. Defaults declared on :class:`~taxos.models.Settings` and
       :class:`~taxos.models.ConverterContext`

:func:`resolve_settings` merges them into one :class:`~taxos.models.Settings`.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from taxos.exceptions import ConfigError
from taxos.models import ConverterContext, Settings

logger = logging.getLogger(__name__)

_PROJECT_CONFIG_FILENAME = "taxos.json"
_ENV_PREFIX = "TAXOS_"

# Keys that belong to ConverterContext rather than Settings itself.
_CONTEXT_KEYS = frozenset(ConverterContext.model_fields)
_SETTINGS_KEYS = frozenset(Settings.model_fields) - {"context"}

# Environment variable suffix -> setting key.
_ENV_KEYS = {
    "API_ROOT": "api_root",
    "API_NAME": "api_name",
    "PACKAGE_ROOT": "package_root",
    "PATH_PARAM_REPLACE": "path_param_replace_value",
    "BASE_PATH": "base_path",
    "SWAGGER_OUT_DIR": "swagger_out_dir",
    "SRC_OUT_DIR": "src_out_dir",
}


def project_config_path(cwd: Optional[Path] = None) -> Path:
    return (cwd or Path.cwd()) / _PROJECT_CONFIG_FILENAME


def load_project_config(cwd: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./taxos.json``.

    Keys are the snake_case setting names (``api_name``, ``swagger_out_dir``,
    ``out_filter`` ...).

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object, or names
            an unknown setting.
    """
    path = project_config_path(cwd)
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")

    unknown = set(data) - _CONTEXT_KEYS - _SETTINGS_KEYS
    if unknown:
        raise ConfigError(
            f"Unknown setting(s) in {path}: {', '.join(sorted(unknown))}"
        )
    logger.debug("Loaded project config from %s", path)
    return data


def load_env_config() -> dict[str, Any]:
    """Collect settings from ``TAXOS_*`` environment variables (empty values ignored)."""
    values: dict[str, Any] = {}
    for suffix, key in _ENV_KEYS.items():
        value = os.environ.get(_ENV_PREFIX + suffix)
        if value:
            values[key] = value
    return values


def resolve_settings(
    overrides: Optional[dict[str, Any]] = None,
    cwd: Optional[Path] = None,
) -> Settings:
    """Resolve settings with the full precedence chain.

    Args:
        overrides: Values given on the command line; ``None`` values (flags
            not passed) and empty lists fall through to the next layer.
        cwd: Directory searched for ``taxos.json`` (defaults to the current
            working directory).

    Returns:
        The effective :class:`~taxos.models.Settings`.

    Raises:
        ConfigError: If a layer contains an invalid value.
    """
    merged: dict[str, Any] = {}
    merged.update(load_project_config(cwd) or {})
    merged.update(load_env_config())
    for key, value in (overrides or {}).items():
        if value is None or value == []:
            continue
        merged[key] = value

    context_values = {k: v for k, v in merged.items() if k in _CONTEXT_KEYS}
    settings_values = {k: v for k, v in merged.items() if k in _SETTINGS_KEYS}

    try:
        return Settings(context=ConverterContext(**context_values), **settings_values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
