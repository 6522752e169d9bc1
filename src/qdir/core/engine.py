from __future__ import annotations

"""
Core Run Orchestration.

Coordinates a complete qdir run:
1. Checks the root paths before any connection is attempted.
2. Opens the queue publisher (or a dry-run stand-in).
3. Traverses every root in order, pushing accepted files.
4. Closes the publisher exactly once, whatever the outcome.
"""

import logging
from typing import Callable, List, Optional

from qdir.core.services.traverser import traverse
from qdir.domain.constants import EXIT_FAILURE, EXIT_INVALID_ARGUMENT
from qdir.domain.errors import ConnectError, InvalidArgumentError, PublishError
from qdir.domain.run_models import RunResult, create_error_result, create_success_result
from qdir.domain.traversal_models import ConnectionSettings, TraversalConfig, TraversalResult
from qdir.infra.queue import DryRunPublisher, RedisPublisher

logger = logging.getLogger(__name__)

PublisherFactory = Callable[[ConnectionSettings], RedisPublisher]


def run(
        traversal: TraversalConfig,
        connection: ConnectionSettings,
        *,
        dry_run: bool = False,
        connect: Optional[PublisherFactory] = None,
) -> RunResult:
    """
    Execute a full traversal-and-enqueue run.

    Args:
        traversal: Validated traversal configuration.
        connection: Address of the queue backend.
        dry_run: If True, print the paths instead of connecting and pushing.
        connect: Factory opening the publisher. Defaults to
                 RedisPublisher.from_settings.

    Returns:
        RunResult: Status, exit code and per-root counters.
    """
    queue_name = traversal.queue_name

    # -------------------------------------------------------------------------
    # 1) Root Pre-flight
    # -------------------------------------------------------------------------
    if not traversal.root_paths:
        msg = "No root path given."
        logger.error(msg)
        return create_error_result(msg, queue_name, exit_code=EXIT_INVALID_ARGUMENT, dry_run=dry_run)

    for position, root in enumerate(traversal.root_paths):
        if not root:
            msg = f"Invalid root path at position {position}: the path is empty."
            logger.error(msg)
            return create_error_result(msg, queue_name, exit_code=EXIT_INVALID_ARGUMENT, dry_run=dry_run)

    # -------------------------------------------------------------------------
    # 2) Publisher Setup
    # -------------------------------------------------------------------------
    if dry_run:
        publisher = DryRunPublisher()
    else:
        factory = connect or RedisPublisher.from_settings
        try:
            publisher = factory(connection)
        except ConnectError as e:
            logger.error(str(e))
            return create_error_result(str(e), queue_name, exit_code=EXIT_FAILURE)

    # -------------------------------------------------------------------------
    # 3) Traversal
    # -------------------------------------------------------------------------
    roots: List[TraversalResult] = []
    problems: List[str] = []

    try:
        for root in traversal.root_paths:
            if traversal.verbose:
                logger.info(f'Scanning "{root}"...')

            result = TraversalResult(root_path=root)
            try:
                traverse(root, traversal, publisher, result)
            except InvalidArgumentError as e:
                logger.error(str(e))
                if traversal.fail_fast:
                    return create_error_result(
                        str(e), queue_name, roots, exit_code=EXIT_INVALID_ARGUMENT, dry_run=dry_run
                    )
                problems.append(str(e))
                continue
            except PublishError as e:
                msg = f"Failed to queue {e.item}: {e}"
                logger.error(msg)
                roots.append(result)
                return create_error_result(msg, queue_name, roots, exit_code=EXIT_FAILURE, dry_run=dry_run)

            roots.append(result)
            if not result.ok:
                problems.append(
                    f"{len(result.failed_publishes)} file(s) under {root} could not be queued."
                )
    finally:
        publisher.close()

    if problems:
        return create_error_result(" ".join(problems), queue_name, roots, exit_code=EXIT_FAILURE, dry_run=dry_run)

    logger.debug(f"Run finished: {sum(r.queued for r in roots)} path(s) queued on '{queue_name}'.")
    return create_success_result(queue_name, roots, dry_run=dry_run)
