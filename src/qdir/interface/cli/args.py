from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides understood by the domain layer.
"""

import argparse
from typing import Any, Dict

from qdir.domain.constants import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_OPEN_DIRS,
    DEFAULT_QUEUE_NAME,
    DEFAULT_REDIS_HOST,
    DEFAULT_REDIS_PORT,
)

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the qdir CLI.

    Options left unset default to None so that values from a config file are
    only overridden by flags the operator actually passed.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Fast, recursive queueing of files from a directory tree to Redis.",
    )

    p.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Directory trees (or single files) to queue.",
    )

    # --- Traversal ---
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=None,
        help="Be verbose: report every scanned root, entered directory and queued file.",
    )
    p.add_argument(
        "-i", "--include-hidden",
        dest="include_hidden",
        action="store_true",
        default=None,
        help="Include hidden files and don't skip hidden directories.",
    )
    p.add_argument(
        "--max-open-dirs",
        dest="max_open_dirs",
        type=int,
        default=None,
        help=f"Maximum number of directory handles open at once. Defaults to {DEFAULT_MAX_OPEN_DIRS}.",
    )
    p.add_argument(
        "--best-effort",
        dest="best_effort",
        action="store_true",
        default=None,
        help="Log files that could not be queued and keep going instead of stopping.",
    )

    # --- Queue Backend ---
    p.add_argument(
        "-a", "--address",
        dest="redis_host",
        default=None,
        help=f"The Redis server's listen address. Defaults to {DEFAULT_REDIS_HOST}.",
    )
    p.add_argument(
        "-p", "--port",
        dest="redis_port",
        type=int,
        default=None,
        help=f"The Redis server port. Defaults to {DEFAULT_REDIS_PORT}.",
    )
    p.add_argument(
        "-q", "--queue",
        dest="queue_name",
        default=None,
        help=f'The name of the queue (list) in Redis. Defaults to "{DEFAULT_QUEUE_NAME}".',
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        help=f"Connection timeout in seconds. Defaults to {DEFAULT_CONNECT_TIMEOUT}.",
    )
    p.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=None,
        help="Print the paths that would be queued without connecting to Redis.",
    )

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="JSON configuration file. Defaults to ~/.qdir/config.json when present.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore any configuration file.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the resolved configuration as JSON and exit.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write diagnostics to this rotating log file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the run summary as JSON.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Override values; None means "not given".
    """
    overrides: Dict[str, Any] = {}

    overrides["root_paths"] = list(args.paths) if args.paths else None

    overrides["verbose"] = args.verbose
    overrides["include_hidden"] = args.include_hidden
    overrides["max_open_dirs"] = args.max_open_dirs
    overrides["best_effort"] = args.best_effort

    overrides["redis_host"] = args.redis_host
    overrides["redis_port"] = args.redis_port
    overrides["queue_name"] = args.queue_name
    overrides["timeout"] = args.timeout
    overrides["dry_run"] = args.dry_run

    return overrides
