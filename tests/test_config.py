"""Tests for YAML configuration loading."""

from __future__ import annotations

from full_feed.config import AppConfig, load_config


def test_defaults_without_file():
    cfg = load_config(None)

    assert cfg.cache.eviction_seconds == 6 * 3600
    assert cfg.cache.refresh_seconds == 211 * 60
    assert cfg.cache.maintenance_interval_seconds == 0.1
    assert cfg.cache.max_entries is None
    assert cfg.fetch.max_concurrency is None
    assert cfg.server.port == 8080


def test_defaults_are_not_shared_between_loads():
    first = load_config(None)
    first.server.port = 9999

    assert load_config(None).server.port == 8080


def test_yaml_overrides_merge_per_section(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "cache:\n"
        "  refresh_seconds: 60\n"
        "  max_entries: 500\n"
        "fetch:\n"
        "  max_concurrency: 4\n"
        "server:\n"
        "  port: 9000\n"
        "unknown_section:\n"
        "  anything: true\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.cache.refresh_seconds == 60
    assert cfg.cache.max_entries == 500
    assert cfg.cache.eviction_seconds == AppConfig().cache.eviction_seconds
    assert cfg.fetch.max_concurrency == 4
    assert cfg.fetch.retries == AppConfig().fetch.retries
    assert cfg.server.port == 9000


def test_unknown_keys_inside_a_section_are_ignored(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("logging:\n  level: DEBUG\n  colour: always\n", encoding="utf-8")

    cfg = load_config(str(path))

    assert cfg.logging.level == "DEBUG"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path)) == AppConfig()
