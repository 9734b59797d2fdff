"""Tests for settings resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from semsearch.config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MIN_SCORE,
    SearchSettings,
    resolve_db_path,
)


def test_resolve_db_path_precedence(tmp_path: Path, monkeypatch) -> None:
    env_path = tmp_path / "env" / "cache.duckdb"
    override = tmp_path / "override" / "cache.duckdb"
    monkeypatch.setenv("SEMSEARCH_DB_PATH", str(env_path))

    assert resolve_db_path(str(override)) == str(override.resolve())
    assert resolve_db_path() == str(env_path.resolve())
    assert env_path.parent.is_dir()


def test_settings_from_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("SEMSEARCH_DB_PATH", str(tmp_path / "cache.duckdb"))
    monkeypatch.setenv("SEMSEARCH_EMBEDDING_MODEL", "custom-model")
    monkeypatch.setenv("SEMSEARCH_TOP_K", "4")
    monkeypatch.setenv("SEMSEARCH_MIN_SCORE", "0.0")
    monkeypatch.setenv("SEMSEARCH_EMBED_TIMEOUT", "2.5")
    monkeypatch.delenv("SEMSEARCH_MAX_TOKENS", raising=False)

    settings = SearchSettings.from_env()

    assert settings.model_id == "custom-model"
    assert settings.top_k == 4
    assert settings.min_score == 0.0
    assert settings.max_tokens == DEFAULT_MAX_TOKENS
    assert settings.embed_timeout == 2.5


def test_explicit_overrides_beat_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("SEMSEARCH_TOP_K", "4")
    monkeypatch.delenv("SEMSEARCH_MIN_SCORE", raising=False)
    monkeypatch.delenv("SEMSEARCH_EMBED_TIMEOUT", raising=False)

    settings = SearchSettings.from_env(db_path=str(tmp_path / "c.duckdb"), top_k=9)

    assert settings.top_k == 9
    assert settings.min_score == DEFAULT_MIN_SCORE
    assert settings.embed_timeout is None


def test_settings_validate_limits(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        SearchSettings(db_path=str(tmp_path / "c.duckdb"), max_tokens=0)
    with pytest.raises(ValueError):
        SearchSettings(db_path=str(tmp_path / "c.duckdb"), top_k=0)
