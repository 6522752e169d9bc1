from __future__ import annotations

"""
Traversal Domain Data Models.

Defines the immutable run configuration handed to the traverser, the
transient classification of every visited filesystem entry, and the
per-root outcome reported back to the CLI.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from qdir.domain.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_OPEN_DIRS,
    DEFAULT_QUEUE_NAME,
    DEFAULT_REDIS_HOST,
    DEFAULT_REDIS_PORT,
)

# -----------------------------------------------------------------------------
# POLICIES
# -----------------------------------------------------------------------------

class HiddenPolicy(str, Enum):
    """Whether dot-prefixed entries are skipped (and dot-directories pruned)."""
    SKIP_HIDDEN = "skip_hidden"
    INCLUDE_HIDDEN = "include_hidden"


class PublishErrorPolicy(str, Enum):
    """What the traverser does when a push to the backend fails."""
    FAIL_FAST = "fail_fast"
    BEST_EFFORT = "best_effort"


class EntryKind(str, Enum):
    """Classification of a visited node. Links are never followed."""
    REGULAR_FILE = "regular_file"
    DIRECTORY = "directory"
    SYMBOLIC_LINK = "symbolic_link"
    DANGLING_SYMBOLIC_LINK = "dangling_symbolic_link"
    UNREADABLE_DIRECTORY = "unreadable_directory"
    UNKNOWN = "unknown"

# -----------------------------------------------------------------------------
# CONFIGURATION MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TraversalConfig:
    """
    Immutable settings of a traversal run.

    Attributes:
        root_paths: Directory trees (or single files) to walk, in order.
        hidden_policy: Treatment of dot-prefixed entries.
        verbose: Log every queued file and entered directory.
        queue_name: Name of the remote list receiving the paths.
        publish_error_policy: Abort or continue on a failed push.
        max_open_dirs: Upper bound of simultaneously open directory handles.
    """
    root_paths: Tuple[str, ...] = ()
    hidden_policy: HiddenPolicy = HiddenPolicy.SKIP_HIDDEN
    verbose: bool = False
    queue_name: str = DEFAULT_QUEUE_NAME
    publish_error_policy: PublishErrorPolicy = PublishErrorPolicy.FAIL_FAST
    max_open_dirs: int = DEFAULT_MAX_OPEN_DIRS

    @property
    def skip_hidden(self) -> bool:
        return self.hidden_policy is HiddenPolicy.SKIP_HIDDEN

    @property
    def fail_fast(self) -> bool:
        return self.publish_error_policy is PublishErrorPolicy.FAIL_FAST


@dataclass(frozen=True)
class ConnectionSettings:
    """
    Address of the queue backend.

    Attributes:
        host: Redis server address.
        port: Redis server port.
        timeout: Connect (and per-socket-operation) timeout in seconds.
    """
    host: str = DEFAULT_REDIS_HOST
    port: int = DEFAULT_REDIS_PORT
    timeout: float = DEFAULT_CONNECT_TIMEOUT

# -----------------------------------------------------------------------------
# TRAVERSAL MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class VisitedEntry:
    """
    Classification result for a single filesystem node.

    Attributes:
        path: Path as built from the root (root + separator + names).
        kind: Node classification.
        depth: 0 for the root, incremented per directory level.
        error: OS error text when the directory could not be opened.
    """
    path: str
    kind: EntryKind
    depth: int = 0
    error: str = ""

    @property
    def is_root(self) -> bool:
        return self.depth == 0


@dataclass(frozen=True)
class PublishFailure:
    """A path that could not be pushed under the best-effort policy."""
    path: str
    error: str


@dataclass
class TraversalResult:
    """
    Outcome of traversing a single root path.

    Attributes:
        root_path: The walked root.
        queued: Number of paths pushed to the queue.
        skipped_hidden: Hidden files skipped plus hidden directories pruned.
        links: Symbolic links (dangling or not) left out.
        errors: Unreadable directories and unknown entries reported.
        failed_publishes: Pushes that failed under the best-effort policy.
    """
    root_path: str
    queued: int = 0
    skipped_hidden: int = 0
    links: int = 0
    errors: int = 0
    failed_publishes: List[PublishFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every accepted file reached the queue."""
        return not self.failed_publishes
