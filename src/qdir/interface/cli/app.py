from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, resolution of the
configuration hierarchy (defaults, config file, command-line overrides),
validation, the traversal-and-enqueue run, and result rendering. The
process exit code is the only signal scripting callers need.
"""

import argparse
import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from qdir.core.engine import run
from qdir.core.services.validator import validate_config
from qdir.domain.config import get_default_config, load_config, merge_config
from qdir.domain.constants import EXIT_INTERRUPTED, EXIT_INVALID_ARGUMENT, EXIT_OK
from qdir.domain.errors import InvalidArgumentError
from qdir.domain.run_models import RunResult
from qdir.infra.logging import LoggingConfig, configure_logging, get_logger, shutdown_logging
from qdir.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 run failure, 2 invalid
             arguments, 130 interrupted).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (diagnostics go to stderr)
    configure_logging(LoggingConfig.for_cli(debug=args.debug, log_file=args.log_file), force=True)

    try:
        return _execute(parser, args)
    finally:
        shutdown_logging()


def _execute(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Run steps 3-7 of the workflow; logging is already configured."""
    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration (defaults vs config file)
    if args.use_defaults:
        base_conf = get_default_config()
    else:
        base_conf = load_config(args.config_file)

    # 4. Merge command-line overrides
    raw_conf = merge_config(base_conf, cli_args.args_to_overrides(args))

    # 5. Schema validation and normalization
    try:
        traversal, connection, dry_run, warnings = validate_config(raw_conf, strict=False)
    except InvalidArgumentError as e:
        logger.error(str(e))
        return EXIT_INVALID_ARGUMENT

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(
            {"traversal": asdict(traversal), "connection": asdict(connection), "dry_run": dry_run},
            ensure_ascii=False,
            indent=2,
        ))
        return EXIT_OK

    if not traversal.root_paths:
        parser.print_usage(sys.stderr)
        logger.error("At least one PATH is required.")
        return EXIT_INVALID_ARGUMENT

    # 6. Run phase
    try:
        result = run(traversal, connection, dry_run=dry_run)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return EXIT_INTERRUPTED

    # 7. Output rendering phase
    if args.json_output:
        print(json.dumps(_result_to_dict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return result.exit_code

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _result_to_dict(result: RunResult) -> Dict[str, Any]:
    payload = asdict(result)
    payload["summary"] = result.summary()
    return payload


def _print_human_summary(result: RunResult) -> None:
    """
    Print the run outcome.

    Failures go to stderr. A run that failed before reaching any root prints
    nothing else. In dry-run mode the summary also goes to stderr so that
    stdout carries nothing but the would-be queue entries.
    """
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        if not result.roots:
            return

    out = sys.stderr if result.dry_run else sys.stdout
    summary = result.summary()

    if result.dry_run:
        print(f"Dry run: {summary['queued']} path(s) would be queued on '{result.queue_name}'.", file=out)
    else:
        print(f"Queued {summary['queued']} path(s) on '{result.queue_name}'.", file=out)

    for root in result.roots:
        print(
            f"  - {root.root_path}: queued {root.queued}, hidden skipped {root.skipped_hidden}, "
            f"links {root.links}, errors {root.errors}, failed {len(root.failed_publishes)}",
            file=out,
        )

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
