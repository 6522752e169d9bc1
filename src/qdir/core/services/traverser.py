from __future__ import annotations

"""
Directory Traversal and Enqueue Service.

Walks directory trees depth-first without following symbolic links,
classifies every node, and pushes the path of each accepted regular file
to the queue publisher. Classification anomalies are logged and recovered
locally; publish failures follow the configured error policy.
"""

import logging
import os
from typing import Callable, Iterator, List, Optional

from qdir.domain.constants import DEFAULT_MAX_OPEN_DIRS
from qdir.domain.errors import (
    InvalidArgumentError,
    PublishError,
    UnknownEntryError,
    UnreadableDirectoryError,
)
from qdir.domain.traversal_models import (
    EntryKind,
    PublishFailure,
    TraversalConfig,
    TraversalResult,
    VisitedEntry,
)
from qdir.infra.fs import classify_entry, classify_path, is_hidden
from qdir.infra.queue.publisher import Publisher

logger = logging.getLogger(__name__)

PrunePredicate = Callable[[VisitedEntry], bool]


# ==============================================================================
# PUBLIC API (TRAVERSAL SERVICES)
# ==============================================================================

def traverse(
        root_path: Optional[str],
        config: TraversalConfig,
        sink: Publisher,
        result: Optional[TraversalResult] = None,
) -> TraversalResult:
    """
    Walk a single root and enqueue every accepted regular file.

    Args:
        root_path: Directory (or file) to walk. Must be non-empty.
        config: Immutable run configuration.
        sink: Publisher receiving one push per accepted file.
        result: Counters to update in place. Passing one in keeps the counts of
                a walk cut short by a PublishError. A fresh one is
                created if omitted.

    Returns:
        TraversalResult: Counters for the walked root.

    Raises:
        InvalidArgumentError: If the root is empty or does not exist. The
                              sink is not touched.
        PublishError: On the first failed push under the fail-fast policy.
                      Paths pushed before the failure stay queued.
    """
    if not root_path:
        raise InvalidArgumentError("Invalid root path: the path is empty.")

    if result is None:
        result = TraversalResult(root_path=root_path)

    def _prune_hidden(entry: VisitedEntry) -> bool:
        if config.skip_hidden and is_hidden(entry.path):
            logger.info(f'Skipping hidden directory "{entry.path}".')
            result.skipped_hidden += 1
            return True
        return False

    for entry in walk(root_path, prune=_prune_hidden, max_open_dirs=config.max_open_dirs):
        _handle_entry(entry, config, sink, result)

    return result


def walk(
        root_path: str,
        *,
        prune: Optional[PrunePredicate] = None,
        max_open_dirs: int = DEFAULT_MAX_OPEN_DIRS,
) -> Iterator[VisitedEntry]:
    """
    Lazily yield the classified nodes of a tree in pre-order.

    Symbolic links are reported, never followed. Every directory met during
    descent is offered to `prune` first; a True answer skips the whole
    subtree without opening it. The root itself is never offered.

    At most `max_open_dirs` directory handles are open at any time. When
    the budget is exhausted the shallowest open handle is closed and its
    position remembered; it is re-opened and fast-forwarded once the walk
    climbs back to it. Entries added to or removed from such a directory
    in the meantime may shift that position.

    Args:
        root_path: Starting point of the walk.
        prune: Optional per-directory predicate returning True to skip.
        max_open_dirs: Directory handle budget (>= 1).

    Yields:
        VisitedEntry: One classification per visited node. A directory that
                      cannot be opened is yielded as UNREADABLE_DIRECTORY
                      instead of DIRECTORY.

    Raises:
        InvalidArgumentError: If the root is empty, missing, or the budget
                              is below 1.
    """
    if not root_path:
        raise InvalidArgumentError("Invalid root path: the path is empty.")
    if max_open_dirs < 1:
        raise InvalidArgumentError(f"Invalid directory handle budget: {max_open_dirs}.")

    try:
        root_kind = classify_path(root_path)
    except OSError as e:
        raise InvalidArgumentError(f'"{root_path}": {_describe_os_error(e)}.') from e

    if root_kind is not EntryKind.DIRECTORY:
        yield VisitedEntry(root_path, root_kind, 0)
        return

    stack: List[_DirectoryFrame] = []
    try:
        root = _DirectoryFrame(root_path, 0)
        try:
            root.open()
        except OSError as e:
            yield VisitedEntry(root_path, EntryKind.UNREADABLE_DIRECTORY, 0, _describe_os_error(e))
            return
        stack.append(root)
        yield VisitedEntry(root_path, EntryKind.DIRECTORY, 0)

        while stack:
            frame = stack[-1]

            if not frame.is_open:
                _reserve_handle(stack, max_open_dirs)
                try:
                    frame.open()
                except OSError as e:
                    stack.pop()
                    yield VisitedEntry(
                        frame.path, EntryKind.UNREADABLE_DIRECTORY, frame.depth, _describe_os_error(e)
                    )
                    continue

            try:
                dir_entry = frame.next_entry()
            except OSError as e:
                frame.close()
                stack.pop()
                yield VisitedEntry(
                    frame.path, EntryKind.UNREADABLE_DIRECTORY, frame.depth, _describe_os_error(e)
                )
                continue

            if dir_entry is None:
                frame.close()
                stack.pop()
                continue

            depth = frame.depth + 1
            kind = classify_entry(dir_entry)

            if kind is not EntryKind.DIRECTORY:
                yield VisitedEntry(dir_entry.path, kind, depth)
                continue

            visited = VisitedEntry(dir_entry.path, EntryKind.DIRECTORY, depth)
            if prune is not None and prune(visited):
                continue

            child = _DirectoryFrame(dir_entry.path, depth)
            _reserve_handle(stack, max_open_dirs)
            try:
                child.open()
            except OSError as e:
                yield VisitedEntry(
                    dir_entry.path, EntryKind.UNREADABLE_DIRECTORY, depth, _describe_os_error(e)
                )
                continue

            stack.append(child)
            yield visited
    finally:
        for frame in stack:
            frame.close()


# ==============================================================================
# PRIVATE HELPERS (ENTRY POLICY)
# ==============================================================================

def _handle_entry(
        entry: VisitedEntry,
        config: TraversalConfig,
        sink: Publisher,
        result: TraversalResult,
) -> None:
    """Apply the visit policy to a single classified node."""
    kind = entry.kind

    if kind is EntryKind.REGULAR_FILE:
        _enqueue_file(entry, config, sink, result)

    elif kind is EntryKind.DIRECTORY:
        if config.verbose:
            logger.info(f'Entering directory "{entry.path}".')

    elif kind is EntryKind.SYMBOLIC_LINK:
        logger.warning(f'Ignoring link: "{entry.path}".')
        result.links += 1

    elif kind is EntryKind.DANGLING_SYMBOLIC_LINK:
        logger.warning(f"{entry.path} (dangling symlink)")
        result.links += 1

    elif kind is EntryKind.UNREADABLE_DIRECTORY:
        logger.error(str(UnreadableDirectoryError(entry.path, entry.error)))
        result.errors += 1

    else:
        logger.error(str(UnknownEntryError(entry.path)))
        result.errors += 1


def _enqueue_file(
        entry: VisitedEntry,
        config: TraversalConfig,
        sink: Publisher,
        result: TraversalResult,
) -> None:
    """Push an accepted file, honouring the hidden and publish-error policies."""
    if config.skip_hidden and not entry.is_root and is_hidden(entry.path):
        logger.info(f'Skipping hidden file "{entry.path}".')
        result.skipped_hidden += 1
        return

    if config.verbose:
        logger.info(f"Queueing {entry.path}...")

    try:
        sink.publish(config.queue_name, entry.path)
    except PublishError as e:
        if config.fail_fast:
            raise
        logger.error(f"Failed to queue {entry.path}: {e}")
        result.failed_publishes.append(PublishFailure(path=entry.path, error=str(e)))
        return

    result.queued += 1


def _describe_os_error(error: OSError) -> str:
    return error.strerror or str(error)


# ==============================================================================
# PRIVATE HELPERS (DIRECTORY HANDLE BUDGET)
# ==============================================================================

class _DirectoryFrame:
    """
    One level of the descent: a directory path and its (possibly closed) listing.

    The number of entries already consumed is kept so that a closed listing
    can be re-opened where it left off.
    """

    __slots__ = ("path", "depth", "handle", "consumed")

    def __init__(self, path: str, depth: int) -> None:
        self.path = path
        self.depth = depth
        self.handle: Optional[Iterator[os.DirEntry]] = None
        self.consumed = 0

    @property
    def is_open(self) -> bool:
        return self.handle is not None

    def open(self) -> None:
        handle = os.scandir(self.path)
        try:
            for _ in range(self.consumed):
                if next(handle, None) is None:
                    break
        except BaseException:
            handle.close()
            raise
        self.handle = handle

    def next_entry(self) -> Optional[os.DirEntry]:
        entry = next(self.handle, None)
        if entry is not None:
            self.consumed += 1
        return entry

    def close(self) -> None:
        if self.handle is not None:
            self.handle.close()
            self.handle = None


def _count_open_handles(stack: List[_DirectoryFrame]) -> int:
    return sum(1 for frame in stack if frame.is_open)


def _reserve_handle(stack: List[_DirectoryFrame], max_open_dirs: int) -> None:
    """Close the shallowest open listing if opening one more would exceed the budget."""
    if _count_open_handles(stack) < max_open_dirs:
        return
    for frame in stack:
        if frame.is_open:
            logger.debug(f'Directory handle budget reached; releasing "{frame.path}".')
            frame.close()
            return
