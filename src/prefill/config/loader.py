"""
prefill.config.loader - Layered configuration loading.

Precedence, lowest to highest:
1. DEFAULT_CONFIG
2. ``.prefill.toml`` (found by walking up from the start directory)
3. ``PREFILL_<SECTION>_<KEY>`` environment variables
"""

from __future__ import annotations

import copy
import json
import os
import re
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError

from prefill.config.defaults import DEFAULT_CONFIG
from prefill.errors import ConfigError

CONFIG_FILENAME = ".prefill.toml"
ENV_PREFIX = "PREFILL_"

_DECIMAL_RE = re.compile(r"^-?\d+\.\d+$")


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find .prefill.toml in start_path or any parent directory.

    Args:
        start_path: Directory to start from (defaults to cwd).

    Returns:
        Path to the config file, or None if not found.
    """
    current = (start_path or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def load_config(config_path: Path) -> dict[str, Any]:
    """Parse a TOML config file into a plain dict.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e
    try:
        return tomlkit.parse(content).unwrap()
    except ParseError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment variable value into a typed value.

    JSON arrays/objects become lists/dicts, ``true``/``false`` become
    booleans, all-digit strings become ints and decimals like ``2.5``
    become floats. Everything else (including malformed JSON) is returned
    unchanged.
    """
    stripped = value.strip()
    if stripped[:1] in ("[", "{"):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    lowered = stripped.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if stripped.isdigit():
        return int(stripped)
    if _DECIMAL_RE.match(stripped):
        return float(stripped)
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply PREFILL_<SECTION>_<KEY> environment overrides in place.

    ``PREFILL_API_BASE_URL`` sets ``config["api"]["base_url"]``.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        parts = name[len(ENV_PREFIX) :].lower().split("_", 1)
        if len(parts) != 2 or not all(parts):
            continue
        section, key = parts
        target = config.setdefault(section, {})
        if not isinstance(target, dict):
            raise ConfigError(f"{name} overrides a non-table config value '{section}'")
        target[key] = _try_parse_env_value(raw)
    return config


def get_config(
    config_path: Path | None = None,
    start_path: Path | None = None,
) -> dict[str, Any]:
    """Build the effective configuration.

    Args:
        config_path: Explicit config file; skips discovery when given.
        start_path: Directory to start discovery from (defaults to cwd).

    Returns:
        Merged configuration dict.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    path = config_path or find_config_file(start_path)
    if path is not None:
        config = merge_configs(config, load_config(path))
    return _apply_env_overrides(config)
