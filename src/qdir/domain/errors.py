from __future__ import annotations

"""
Domain Error Taxonomy.

Exceptions raised by the traversal engine and the queue publisher. Anomalies
that threaten completeness or connectivity propagate to the CLI; per-entry
classification anomalies are modelled here too but are only logged by the
traverser.
"""

from typing import Optional


class QdirError(Exception):
    """Base class for every error raised by qdir."""


class InvalidArgumentError(QdirError, ValueError):
    """An empty, missing or otherwise unusable argument (root path, config field)."""


class ConnectError(QdirError):
    """The queue backend could not be reached at start-up."""


class PublishError(QdirError):
    """
    A push to the queue backend failed.

    Attributes:
        queue_name: Target list on the backend.
        item: The path that could not be pushed.
    """

    def __init__(self, message: str, *, queue_name: str = "", item: str = "") -> None:
        super().__init__(message)
        self.queue_name = queue_name
        self.item = item


class TraversalError(QdirError):
    """
    A filesystem entry that could not be handled during descent.

    Attributes:
        path: Offending filesystem path.
    """

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        self.path = path
        self.reason = reason or ""
        super().__init__(self._describe())

    def _describe(self) -> str:
        return f"{self.path}: {self.reason}" if self.reason else self.path


class UnreadableDirectoryError(TraversalError):
    """A directory that cannot be opened for listing."""

    def _describe(self) -> str:
        suffix = f" ({self.reason})" if self.reason else ""
        return f"{self.path}/ (unreadable){suffix}"


class UnknownEntryError(TraversalError):
    """An entry that is neither a file, a directory nor a symbolic link."""

    def _describe(self) -> str:
        return f"{self.path} (unknown)"
