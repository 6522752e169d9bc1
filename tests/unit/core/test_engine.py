from __future__ import annotations

"""
Unit tests for the Core Run Orchestration.

Uses the recording publisher in place of Redis to verify connection
handling, per-root error policies and exit codes.
"""

import os
from pathlib import Path
from unittest.mock import MagicMock

from qdir.core.engine import run
from qdir.domain.errors import ConnectError
from qdir.domain.traversal_models import (
    ConnectionSettings,
    HiddenPolicy,
    PublishErrorPolicy,
    TraversalConfig,
)

SETTINGS = ConnectionSettings(host="queue.local", port=6390, timeout=0.5)


def test_run_queues_every_root(sample_tree: Path, tmp_path: Path, publisher) -> None:
    """TC-01: Roots are processed in order through one connection."""
    other = tmp_path / "other"
    other.mkdir()
    (other / "d.txt").write_text("d", encoding="utf-8")
    factory = MagicMock(return_value=publisher)
    config = TraversalConfig(root_paths=(str(sample_tree), str(other)), queue_name="jobs")

    result = run(config, SETTINGS, connect=factory)

    factory.assert_called_once_with(SETTINGS)
    assert result.ok
    assert result.exit_code == 0
    assert result.total_queued == 3
    assert [r.root_path for r in result.roots] == [str(sample_tree), str(other)]
    assert {q for q, _ in publisher.pushed} == {"jobs"}
    assert publisher.close_calls == 1


def test_run_connection_refused_performs_no_traversal(sample_tree: Path) -> None:
    """TC-02: A connect failure aborts before any traversal."""
    factory = MagicMock(side_effect=ConnectError("Can't connect to Redis: refused"))
    config = TraversalConfig(root_paths=(str(sample_tree),))

    result = run(config, SETTINGS, connect=factory)

    assert not result.ok
    assert result.exit_code == 1
    assert result.roots == []
    assert "refused" in result.error


def test_run_publish_failure_keeps_earlier_pushes(tmp_path: Path, make_publisher) -> None:
    """TC-03: One failed push fails the run without rolling back."""
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / "ok.txt").write_text("ok", encoding="utf-8")
    (second / "boom.txt").write_text("boom", encoding="utf-8")
    sink = make_publisher(fail_on={"boom.txt"})
    config = TraversalConfig(root_paths=(str(first), str(second)))

    result = run(config, SETTINGS, connect=MagicMock(return_value=sink))

    assert not result.ok
    assert result.exit_code == 1
    assert sink.items == [os.path.join(str(first), "ok.txt")]
    assert "boom.txt" in result.error
    assert sink.close_calls == 1


def test_run_fail_fast_reports_pushes_of_interrupted_root(tmp_path: Path, make_publisher) -> None:
    """TC-08: Files pushed before a mid-root failure are counted in the result."""
    for name in ("one.txt", "two.txt", "boom.txt", "three.txt"):
        (tmp_path / name).write_text(name, encoding="utf-8")
    sink = make_publisher(fail_on={"boom.txt"})
    config = TraversalConfig(root_paths=(str(tmp_path),))

    result = run(config, SETTINGS, connect=MagicMock(return_value=sink))

    assert result.exit_code == 1
    assert [r.root_path for r in result.roots] == [str(tmp_path)]
    assert result.total_queued == len(sink.items)
    assert result.summary()["queued"] == len(sink.items)


def test_run_best_effort_reports_failure_after_completing(tmp_path: Path, make_publisher) -> None:
    """TC-04: Best-effort runs visit everything but still exit non-zero."""
    (tmp_path / "boom.txt").write_text("boom", encoding="utf-8")
    (tmp_path / "fine.txt").write_text("fine", encoding="utf-8")
    sink = make_publisher(fail_on={"boom.txt"})
    config = TraversalConfig(
        root_paths=(str(tmp_path),),
        publish_error_policy=PublishErrorPolicy.BEST_EFFORT,
    )

    result = run(config, SETTINGS, connect=MagicMock(return_value=sink))

    assert not result.ok
    assert result.exit_code == 1
    assert sink.items == [os.path.join(str(tmp_path), "fine.txt")]
    assert result.summary()["failed_publishes"] == 1


def test_run_missing_root_stops_fail_fast_run(tmp_path: Path, sample_tree: Path, publisher) -> None:
    """TC-05: An invalid root ends a fail-fast run; earlier roots stay queued."""
    config = TraversalConfig(root_paths=(str(sample_tree), str(tmp_path / "absent"), str(sample_tree)))

    result = run(config, SETTINGS, connect=MagicMock(return_value=publisher))

    assert result.exit_code == 2
    assert len(result.roots) == 1
    assert len(publisher.items) == 2
    assert publisher.close_calls == 1


def test_run_missing_root_is_skipped_in_best_effort(tmp_path: Path, sample_tree: Path, publisher) -> None:
    config = TraversalConfig(
        root_paths=(str(tmp_path / "absent"), str(sample_tree)),
        publish_error_policy=PublishErrorPolicy.BEST_EFFORT,
        hidden_policy=HiddenPolicy.INCLUDE_HIDDEN,
    )

    result = run(config, SETTINGS, connect=MagicMock(return_value=publisher))

    assert result.exit_code == 1
    assert len(publisher.items) == 4
    assert "absent" in result.error


def test_run_empty_root_never_connects() -> None:
    """TC-06: An empty root is rejected before connecting."""
    factory = MagicMock()

    result = run(TraversalConfig(root_paths=("",)), SETTINGS, connect=factory)

    assert result.exit_code == 2
    factory.assert_not_called()


def test_run_without_roots_never_connects() -> None:
    factory = MagicMock()

    result = run(TraversalConfig(), SETTINGS, connect=factory)

    assert result.exit_code == 2
    factory.assert_not_called()


def test_run_dry_run_prints_instead_of_pushing(sample_tree: Path, capsys) -> None:
    """TC-07: Dry runs never call the connection factory."""
    factory = MagicMock()
    config = TraversalConfig(root_paths=(str(sample_tree),), queue_name="preview")

    result = run(config, SETTINGS, dry_run=True, connect=factory)

    factory.assert_not_called()
    assert result.ok
    assert result.dry_run
    lines = capsys.readouterr().out.splitlines()
    assert sorted(lines) == sorted([
        f"preview\t{os.path.join(str(sample_tree), 'a.txt')}",
        f"preview\t{os.path.join(str(sample_tree), 'sub', 'b.txt')}",
    ])


def test_run_duplicate_roots_are_queued_twice(sample_tree: Path, publisher) -> None:
    config = TraversalConfig(root_paths=(str(sample_tree), str(sample_tree)))

    result = run(config, SETTINGS, connect=MagicMock(return_value=publisher))

    assert result.ok
    assert len(publisher.items) == 4
