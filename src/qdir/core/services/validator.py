from __future__ import annotations

"""
Configuration Validation Service.

Turns the untrusted configuration dictionary (defaults, config file and CLI
overrides merged together) into the immutable models used by the run:
TraversalConfig and ConnectionSettings. Recoverable type mismatches are
coerced and reported as warnings; values that would make the run
meaningless raise InvalidArgumentError.
"""

import logging
from typing import Any, Dict, List, Tuple

from qdir.domain.config import get_default_config
from qdir.domain.errors import InvalidArgumentError
from qdir.domain.traversal_models import (
    ConnectionSettings,
    HiddenPolicy,
    PublishErrorPolicy,
    TraversalConfig,
)

logger = logging.getLogger(__name__)

_MAX_PORT = 65535


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[TraversalConfig, ConnectionSettings, bool, List[str]]:
    """
    Validate and normalize a raw configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise TypeError on type mismatch instead of coercing.

    Returns:
        Tuple[TraversalConfig, ConnectionSettings, bool, List[str]]: The run
        models, the dry-run flag and the warnings produced while coercing.

    Raises:
        InvalidArgumentError: On an empty root path or queue name, a port out
                              of range, a non-positive timeout, or a directory
                              handle budget below 1.
        TypeError: In strict mode, on any type mismatch.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        config = {}

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Field Processing & Normalization
    queue_name = _as_str(merged.get("queue_name"), defaults["queue_name"], "queue_name", warnings, strict)
    redis_host = _as_str(merged.get("redis_host"), defaults["redis_host"], "redis_host", warnings, strict)

    include_hidden = _as_bool(merged.get("include_hidden"), False, "include_hidden", warnings, strict)
    verbose = _as_bool(merged.get("verbose"), False, "verbose", warnings, strict)
    best_effort = _as_bool(merged.get("best_effort"), False, "best_effort", warnings, strict)
    dry_run = _as_bool(merged.get("dry_run"), False, "dry_run", warnings, strict)

    redis_port = _as_int(merged.get("redis_port"), defaults["redis_port"], "redis_port", warnings, strict)
    max_open_dirs = _as_int(
        merged.get("max_open_dirs"), defaults["max_open_dirs"], "max_open_dirs", warnings, strict
    )
    timeout = _as_float(merged.get("timeout"), defaults["timeout"], "timeout", warnings, strict)

    root_paths = _as_root_paths(merged.get("root_paths"), warnings, strict)

    # 3. Domain Constraints
    raw_queue_name = merged.get("queue_name")
    if isinstance(raw_queue_name, str) and not raw_queue_name.strip():
        raise InvalidArgumentError("Invalid queue name: the name is empty.")
    if not 0 < redis_port <= _MAX_PORT:
        raise InvalidArgumentError(f"Invalid Redis port: {redis_port}.")
    if timeout <= 0:
        raise InvalidArgumentError(f"Invalid connection timeout: {timeout}.")
    if max_open_dirs < 1:
        raise InvalidArgumentError(f"Invalid directory handle budget: {max_open_dirs}.")

    traversal = TraversalConfig(
        root_paths=tuple(root_paths),
        hidden_policy=HiddenPolicy.INCLUDE_HIDDEN if include_hidden else HiddenPolicy.SKIP_HIDDEN,
        verbose=verbose,
        queue_name=queue_name,
        publish_error_policy=(
            PublishErrorPolicy.BEST_EFFORT if best_effort else PublishErrorPolicy.FAIL_FAST
        ),
        max_open_dirs=max_open_dirs,
    )
    connection = ConnectionSettings(host=redis_host, port=redis_port, timeout=timeout)

    return traversal, connection, dry_run, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Coerce integers, accepting numeric strings in non-strict mode."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict and isinstance(value, str):
        try:
            converted = int(value.strip())
        except ValueError:
            pass
        else:
            warnings.append(f"Field '{field}' converted from '{value}' to {converted}.")
            return converted

    msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_float(value: Any, fallback: float, field: str, warnings: List[str], strict: bool) -> float:
    """Coerce numbers to float, accepting numeric strings in non-strict mode."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if value is None:
        return fallback

    if not strict and isinstance(value, str):
        try:
            converted = float(value.strip())
        except ValueError:
            pass
        else:
            warnings.append(f"Field '{field}' converted from '{value}' to {converted}.")
            return converted

    msg = f"Invalid field '{field}': expected number, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_root_paths(value: Any, warnings: List[str], strict: bool) -> List[str]:
    """
    Check the list of roots, keeping duplicates, order and spelling.

    Paths are used exactly as given: no stripping and no expansion of `~`
    or environment variables. A blank path is rejected.

    Raises:
        InvalidArgumentError: If any root is empty or not a string.
    """
    if value is None:
        return []

    if isinstance(value, str):
        if strict:
            raise TypeError("Invalid field 'root_paths': expected list[str], received str.")
        warnings.append("Field 'root_paths' converted from a single string to a list.")
        value = [value]

    if not isinstance(value, (list, tuple)):
        msg = f"Invalid field 'root_paths': expected list[str], received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return []

    out: List[str] = []
    for i, item in enumerate(value):
        if item is None or not isinstance(item, str):
            raise InvalidArgumentError(f"Invalid root path at position {i}: expected a path.")
        if not item.strip():
            raise InvalidArgumentError(f"Invalid root path at position {i}: the path is empty.")
        out.append(item)
    return out
