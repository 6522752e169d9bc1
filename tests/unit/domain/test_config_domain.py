from __future__ import annotations

"""
Unit tests for Configuration Domain Management.

Verifies default values, JSON file loading with fallback, and override
merging.
"""

import json
from pathlib import Path

from qdir.domain import config as config_domain
from qdir.domain.config import get_default_config, load_config, merge_config


def test_default_config_matches_reference_policy() -> None:
    cfg = get_default_config()

    assert cfg["queue_name"] == "qdir"
    assert cfg["redis_host"] == "127.0.0.1"
    assert cfg["redis_port"] == 6379
    assert cfg["timeout"] == 1.5
    assert cfg["include_hidden"] is False
    assert cfg["best_effort"] is False
    assert cfg["max_open_dirs"] == 15


def test_load_config_merges_file_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"version": "1.0.0", "queue_name": "ingest", "redis_port": 6380}), encoding="utf-8")

    cfg = load_config(str(path))

    assert cfg["queue_name"] == "ingest"
    assert cfg["redis_port"] == 6380
    assert cfg["redis_host"] == "127.0.0.1"
    assert "version" not in cfg


def test_load_config_ignores_unknown_keys(tmp_path: Path, caplog) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"colour": "blue"}), encoding="utf-8")

    cfg = load_config(str(path))

    assert "colour" not in cfg
    assert "Ignoring unknown config key 'colour'" in caplog.text


def test_load_config_corrupted_file_returns_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_config(str(path)) == get_default_config()


def test_load_config_non_object_returns_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    assert load_config(str(path)) == get_default_config()


def test_load_config_missing_default_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(config_domain, "get_default_config_path", lambda: str(tmp_path / "nope.json"))

    assert load_config() == get_default_config()


def test_merge_config_skips_none_and_unknown_keys() -> None:
    base = get_default_config()

    merged = merge_config(base, {"queue_name": None, "redis_host": "redis", "bogus": 1})

    assert merged["queue_name"] == "qdir"
    assert merged["redis_host"] == "redis"
    assert "bogus" not in merged
    assert base["redis_host"] == "127.0.0.1"
