from __future__ import annotations

"""
Configuration Domain Management.

Provides the default run configuration and loads optional overrides from
a JSON file. The CLI layers its own overrides on top and hands the result
to the validator.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from qdir.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_OPEN_DIRS,
    DEFAULT_QUEUE_NAME,
    DEFAULT_REDIS_HOST,
    DEFAULT_REDIS_PORT,
)
from qdir.infra.fs import get_default_config_path

logger = logging.getLogger(__name__)

# Keys a configuration file or the CLI may set
CONFIG_KEYS = (
    "root_paths",
    "queue_name",
    "include_hidden",
    "verbose",
    "redis_host",
    "redis_port",
    "timeout",
    "best_effort",
    "max_open_dirs",
    "dry_run",
)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default run configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Traversal
        "root_paths": [],
        "include_hidden": False,
        "verbose": False,
        "best_effort": False,
        "max_open_dirs": DEFAULT_MAX_OPEN_DIRS,

        # Queue backend
        "queue_name": DEFAULT_QUEUE_NAME,
        "redis_host": DEFAULT_REDIS_HOST,
        "redis_port": DEFAULT_REDIS_PORT,
        "timeout": DEFAULT_CONNECT_TIMEOUT,
        "dry_run": False,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration file and merge it over the defaults.

    The file holds a flat JSON object using the keys in CONFIG_KEYS, plus an
    optional "version" stamp. Unknown keys are ignored with a warning.

    Args:
        path: Explicit file location. Defaults to ~/.qdir/config.json.

    Returns:
        Dict[str, Any]: The merged configuration, or the defaults if the file
                        is missing or unreadable.
    """
    config = get_default_config()
    config_path = path or get_default_config_path()

    if not os.path.exists(config_path):
        if path:
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
        else:
            logger.debug("No config file found. Using defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Corrupted config file {config_path}. Using defaults.")
        return config

    version = data.pop("version", CURRENT_CONFIG_VERSION)
    if version != CURRENT_CONFIG_VERSION:
        logger.debug(f"Config file version {version} differs from {CURRENT_CONFIG_VERSION}.")

    for key, value in data.items():
        if key in CONFIG_KEYS:
            config[key] = value
        else:
            logger.warning(f"Ignoring unknown config key '{key}' in {config_path}.")

    logger.debug(f"Configuration loaded from {config_path}")
    return config


def merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge known, non-None override values into a base configuration.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    out = dict(base)
    for k in CONFIG_KEYS:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out
