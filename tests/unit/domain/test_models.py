from __future__ import annotations

"""
Unit tests for Domain Models.

Verifies:
1. Result factories and aggregated counters.
2. Immutability of frozen dataclasses.
3. Error message formatting.
"""

import dataclasses

import pytest

from qdir.domain.errors import (
    InvalidArgumentError,
    QdirError,
    UnknownEntryError,
    UnreadableDirectoryError,
)
from qdir.domain.run_models import create_error_result, create_success_result
from qdir.domain.traversal_models import (
    EntryKind,
    PublishFailure,
    TraversalConfig,
    TraversalResult,
    VisitedEntry,
)


def test_success_result_aggregates_roots() -> None:
    roots = [
        TraversalResult("/a", queued=3, skipped_hidden=1, links=2),
        TraversalResult("/b", queued=4, errors=1),
    ]

    result = create_success_result("qdir", roots)

    assert result.ok is True
    assert result.exit_code == 0
    assert result.total_queued == 7
    assert result.summary() == {
        "queued": 7,
        "skipped_hidden": 1,
        "links": 2,
        "errors": 1,
        "failed_publishes": 0,
    }


def test_error_result_defaults() -> None:
    result = create_error_result("Can't connect to Redis", "qdir")

    assert result.ok is False
    assert result.exit_code == 1
    assert result.roots == []
    assert result.summary()["queued"] == 0


def test_traversal_result_ok_depends_on_failed_publishes() -> None:
    result = TraversalResult("/a", queued=1)
    assert result.ok

    result.failed_publishes.append(PublishFailure("/a/x", "boom"))
    assert not result.ok


def test_frozen_models_are_immutable() -> None:
    config = TraversalConfig()
    entry = VisitedEntry("/a", EntryKind.REGULAR_FILE)

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.queue_name = "other"  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.path = "/b"  # type: ignore[misc]


def test_visited_entry_root_flag() -> None:
    assert VisitedEntry("/a", EntryKind.DIRECTORY, depth=0).is_root
    assert not VisitedEntry("/a/b", EntryKind.DIRECTORY, depth=1).is_root


def test_traversal_error_messages() -> None:
    assert str(UnreadableDirectoryError("/data/locked", "Permission denied")) == (
        "/data/locked/ (unreadable) (Permission denied)"
    )
    assert str(UnknownEntryError("/data/pipe")) == "/data/pipe (unknown)"


def test_invalid_argument_is_a_value_error() -> None:
    err = InvalidArgumentError("empty")

    assert isinstance(err, QdirError)
    assert isinstance(err, ValueError)
