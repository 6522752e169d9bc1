from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. An in-memory publisher recording every push.
3. The reference directory tree used by the traversal scenarios.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from qdir.domain.errors import PublishError  # noqa: E402


# -----------------------------------------------------------------------------
# Test Doubles
# -----------------------------------------------------------------------------
class RecordingPublisher:
    """
    Publisher double keeping every push in memory.

    Pushing a path whose base name is listed in `fail_on` raises PublishError,
    simulating a backend error for that item only.
    """

    def __init__(self, fail_on: Optional[Iterable[str]] = None) -> None:
        self.pushed: List[Tuple[str, str]] = []
        self.fail_on = set(fail_on or ())
        self.close_calls = 0

    def publish(self, queue_name: str, item: str) -> None:
        if os.path.basename(item) in self.fail_on:
            raise PublishError("simulated backend error", queue_name=queue_name, item=item)
        self.pushed.append((queue_name, item))

    def close(self) -> None:
        self.close_calls += 1

    @property
    def items(self) -> List[str]:
        return [item for _, item in self.pushed]


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_publisher() -> Callable[..., RecordingPublisher]:
    """Return the RecordingPublisher class as a factory."""
    return RecordingPublisher


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    Create the reference tree:

    root/
      a.txt
      .hidden.txt
      sub/b.txt
      .hiddendir/c.txt
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_text("a", encoding="utf-8")
    (root / ".hidden.txt").write_text("hidden", encoding="utf-8")
    (root / "sub").mkdir()
    (root / "sub" / "b.txt").write_text("b", encoding="utf-8")
    (root / ".hiddendir").mkdir()
    (root / ".hiddendir" / "c.txt").write_text("c", encoding="utf-8")
    return root
