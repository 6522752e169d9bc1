from __future__ import annotations

"""
Unit tests for the Configuration Validation Service.

Verifies:
1. Defaults are applied for missing keys.
2. Type coercion in non-strict mode and TypeError in strict mode.
3. Domain constraints raise InvalidArgumentError.
"""

import pytest

from qdir.core.services.validator import validate_config
from qdir.domain.errors import InvalidArgumentError
from qdir.domain.traversal_models import HiddenPolicy, PublishErrorPolicy

# -----------------------------------------------------------------------------
# 1. Base Structure & Defaults
# -----------------------------------------------------------------------------

def test_validate_empty_dict_returns_defaults() -> None:
    traversal, connection, _, warnings = validate_config({})

    assert traversal.root_paths == ()
    assert traversal.queue_name == "qdir"
    assert traversal.hidden_policy is HiddenPolicy.SKIP_HIDDEN
    assert traversal.publish_error_policy is PublishErrorPolicy.FAIL_FAST
    assert traversal.max_open_dirs == 15
    assert traversal.verbose is False
    assert connection.host == "127.0.0.1"
    assert connection.port == 6379
    assert connection.timeout == 1.5
    assert warnings == []


def test_validate_non_dict_returns_defaults_with_warning() -> None:
    traversal, _, _, warnings = validate_config(None)

    assert traversal.queue_name == "qdir"
    assert len(warnings) == 1


def test_validate_maps_flags_to_policies() -> None:
    traversal, _, _, _ = validate_config({"include_hidden": True, "best_effort": True})

    assert traversal.hidden_policy is HiddenPolicy.INCLUDE_HIDDEN
    assert traversal.publish_error_policy is PublishErrorPolicy.BEST_EFFORT
    assert traversal.skip_hidden is False
    assert traversal.fail_fast is False


def test_validate_keeps_root_order_and_duplicates() -> None:
    traversal, _, _, _ = validate_config({"root_paths": ["b", "a", "b"]})

    assert traversal.root_paths == ("b", "a", "b")

# -----------------------------------------------------------------------------
# 2. Type Correction
# -----------------------------------------------------------------------------

def test_validate_converts_strings() -> None:
    raw = {
        "include_hidden": "yes",
        "verbose": "0",
        "redis_port": "6380",
        "timeout": "2.5",
        "max_open_dirs": "4",
    }
    traversal, connection, _, warnings = validate_config(raw, strict=False)

    assert traversal.hidden_policy is HiddenPolicy.INCLUDE_HIDDEN
    assert traversal.verbose is False
    assert traversal.max_open_dirs == 4
    assert connection.port == 6380
    assert connection.timeout == 2.5
    assert len(warnings) == 5


def test_validate_single_root_string_becomes_list() -> None:
    traversal, _, _, warnings = validate_config({"root_paths": "/data"})

    assert traversal.root_paths == ("/data",)
    assert any("root_paths" in w for w in warnings)


def test_validate_dry_run_defaults_to_false() -> None:
    _, _, dry_run, _ = validate_config({})

    assert dry_run is False


@pytest.mark.parametrize("raw, expected", [("false", False), ("0", False), ("off", False), ("true", True), (True, True)])
def test_validate_coerces_dry_run(raw, expected) -> None:
    """A config file value of "false" must not switch a run to dry-run."""
    _, _, dry_run, _ = validate_config({"dry_run": raw})

    assert dry_run is expected


def test_validate_invalid_type_falls_back() -> None:
    _, connection, _, warnings = validate_config({"redis_port": [1]})

    assert connection.port == 6379
    assert any("redis_port" in w for w in warnings)


def test_validate_strict_mode_raises_type_error() -> None:
    with pytest.raises(TypeError):
        validate_config({"verbose": "true"}, strict=True)

# -----------------------------------------------------------------------------
# 3. Domain Constraints
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("roots", [[""], ["ok", "  "], [None]])
def test_validate_rejects_empty_roots(roots) -> None:
    with pytest.raises(InvalidArgumentError):
        validate_config({"root_paths": roots})


@pytest.mark.parametrize(
    "raw",
    [
        {"queue_name": ""},
        {"redis_port": 0},
        {"redis_port": 70000},
        {"timeout": 0},
        {"max_open_dirs": 0},
    ],
)
def test_validate_rejects_out_of_range_values(raw) -> None:
    with pytest.raises(InvalidArgumentError):
        validate_config(raw)


def test_validate_keeps_roots_as_typed(monkeypatch: pytest.MonkeyPatch) -> None:
    """Roots are never stripped or expanded; the shell owns expansion."""
    monkeypatch.setenv("HOME", "/home/tester")
    monkeypatch.setenv("NAME", "expanded")

    traversal, _, _, _ = validate_config({"root_paths": ["~/docs", "data ", "reports/$NAME"]})

    assert traversal.root_paths == ("~/docs", "data ", "reports/$NAME")
