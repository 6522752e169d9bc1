from __future__ import annotations

"""
Queue Publisher Contract.

Declares the single capability the traverser needs from a queue backend and
provides a dry-run implementation that reports pushes instead of performing
them.
"""

import sys
from typing import Optional, Protocol, TextIO


class Publisher(Protocol):
    """Anything that can append a string to a named remote list."""

    def publish(self, queue_name: str, item: str) -> None:
        ...


class DryRunPublisher:
    """
    Publisher that writes '<queue>\\t<item>' lines to a stream.

    Never opens a network connection; used to preview what a run would queue.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream
        self.published = 0

    def publish(self, queue_name: str, item: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(f"{queue_name}\t{item}\n")
        self.published += 1

    def close(self) -> None:
        stream = self._stream or sys.stdout
        stream.flush()

    def __enter__(self) -> "DryRunPublisher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
