"""Consumer configuration from defaults, environment and YAML."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from remotequery.config import ConsumerConfig, load_config
from tests._helpers.expect import expect_equal

ENV_KEYS = (
    "REMOTEQUERY_BASE_URI",
    "REMOTEQUERY_DEFAULT_GRAMMAR",
    "REMOTEQUERY_DEFAULT_CONNECTION",
    "REMOTEQUERY_DEFAULT_ENDPOINT",
    "REMOTEQUERY_CACHE_ENABLED",
    "REMOTEQUERY_CACHE_DEFAULT_TTL",
    "REMOTEQUERY_CACHE_VERSION",
    "REMOTEQUERY_LOGGER",
    "REMOTEQUERY_TIMEOUT_SEC",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every REMOTEQUERY_* variable for the test."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults() -> None:
    config = ConsumerConfig()
    expect_equal(config.base_uri, None)
    expect_equal(config.default_grammar, "rest")
    expect_equal(config.default_connection, "default")
    expect_equal(config.cache_enabled, False)
    expect_equal(config.cache_default_ttl, 3600)
    expect_equal(config.cache_version, "1")
    expect_equal(config.timeout_seconds, 10.0)


def test_from_env_with_nothing_set(clean_env: pytest.MonkeyPatch) -> None:
    _ = clean_env
    expect_equal(ConsumerConfig.from_env(), ConsumerConfig())


def test_from_env_reads_every_variable(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("REMOTEQUERY_BASE_URI", "https://api.example.test")
    clean_env.setenv("REMOTEQUERY_DEFAULT_GRAMMAR", "search")
    clean_env.setenv("REMOTEQUERY_DEFAULT_ENDPOINT", "default")
    clean_env.setenv("REMOTEQUERY_CACHE_ENABLED", "yes")
    clean_env.setenv("REMOTEQUERY_CACHE_DEFAULT_TTL", "120")
    clean_env.setenv("REMOTEQUERY_CACHE_VERSION", "9")
    clean_env.setenv("REMOTEQUERY_LOGGER", "1")
    clean_env.setenv("REMOTEQUERY_TIMEOUT_SEC", "2.5")
    config = ConsumerConfig.from_env()
    expect_equal(config.base_uri, "https://api.example.test")
    expect_equal(config.default_grammar, "search")
    expect_equal(config.default_endpoint, "default")
    expect_equal(config.cache_enabled, True)
    expect_equal(config.cache_default_ttl, 120)
    expect_equal(config.cache_version, "9")
    expect_equal(config.logging_enabled, True)
    expect_equal(config.timeout_seconds, 2.5)


@pytest.mark.parametrize("raw", ["0", "false", "No", "OFF", ""])
def test_false_flags(clean_env: pytest.MonkeyPatch, raw: str) -> None:
    clean_env.setenv("REMOTEQUERY_CACHE_ENABLED", raw)
    expect_equal(ConsumerConfig.from_env().cache_enabled, False)


def test_negative_ttl_rejected() -> None:
    with pytest.raises(ValidationError):
        ConsumerConfig(cache_default_ttl=-1)


def test_non_positive_timeout_rejected() -> None:
    with pytest.raises(ValidationError):
        ConsumerConfig(timeout_seconds=0)


def test_load_config_top_level(tmp_path: Path) -> None:
    path = tmp_path / "remotequery.yaml"
    path.write_text(
        "base_uri: https://api.example.test\ncache_enabled: true\n"
        "default_headers:\n  X-Api-Key: secret\n",
        encoding="utf-8",
    )
    config = load_config(path)
    expect_equal(config.base_uri, "https://api.example.test")
    expect_equal(config.cache_enabled, True)
    expect_equal(config.default_headers, {"X-Api-Key": "secret"})


def test_load_config_nested_section(tmp_path: Path) -> None:
    path = tmp_path / "app.yaml"
    path.write_text(
        "remotequery:\n  default_grammar: search\n  cache_version: '3'\nother: 1\n",
        encoding="utf-8",
    )
    config = load_config(path)
    expect_equal(config.default_grammar, "search")
    expect_equal(config.cache_version, "3")


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    expect_equal(load_config(path), ConsumerConfig())


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must contain a mapping"):
        load_config(path)
