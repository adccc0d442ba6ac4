"""
prefill.config - Configuration loading and defaults
"""

from prefill.config.defaults import DEFAULT_CONFIG
from prefill.config.loader import (
    CONFIG_FILENAME,
    ENV_PREFIX,
    _apply_env_overrides,
    _try_parse_env_value,
    find_config_file,
    get_config,
    load_config,
    merge_configs,
)

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "_apply_env_overrides",
    "_try_parse_env_value",
    "find_config_file",
    "get_config",
    "load_config",
    "merge_configs",
]
