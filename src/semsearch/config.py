"""
Configuration helpers for the embedding cache, model and search defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


DEFAULT_DB_PATH = "~/.semsearch/embeddings.duckdb"
ENV_DB_PATH = "SEMSEARCH_DB_PATH"

DEFAULT_MODEL_ID = "gemini-embedding-001"
DEFAULT_EMBEDDING_DIM = 768
DEFAULT_MAX_TOKENS = 512
DEFAULT_TOP_K = 10
DEFAULT_MIN_SCORE = 0.2

ENV_MODEL_ID = "SEMSEARCH_EMBEDDING_MODEL"
ENV_EMBEDDING_DIM = "SEMSEARCH_EMBEDDING_DIM"
ENV_MAX_TOKENS = "SEMSEARCH_MAX_TOKENS"
ENV_TOP_K = "SEMSEARCH_TOP_K"
ENV_MIN_SCORE = "SEMSEARCH_MIN_SCORE"
ENV_EMBED_TIMEOUT = "SEMSEARCH_EMBED_TIMEOUT"


def resolve_db_path(override_path: str | None = None) -> str:
    """
    Resolve the DuckDB cache path from CLI override, env var, or default.

    Precedence:
    1) explicit override_path
    2) SEMSEARCH_DB_PATH
    3) default path
    """
    raw_path = override_path or os.getenv(ENV_DB_PATH) or DEFAULT_DB_PATH
    resolved = Path(raw_path).expanduser().resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return str(resolved)


def _env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


@dataclass(frozen=True)
class SearchSettings:
    """Runtime settings shared by the CLI, the server and the session."""

    db_path: str
    model_id: str = DEFAULT_MODEL_ID
    embedding_dim: int = DEFAULT_EMBEDDING_DIM
    max_tokens: int = DEFAULT_MAX_TOKENS
    top_k: int = DEFAULT_TOP_K
    min_score: float = DEFAULT_MIN_SCORE
    embed_timeout: float | None = None

    @property
    def cache_model_id(self) -> str:
        """Model identity for cache keys; vectors of another size never share it."""
        return f"{self.model_id}@{self.embedding_dim}"

    def __post_init__(self) -> None:
        if self.embedding_dim <= 0:
            raise ValueError("embedding_dim must be > 0")
        if self.max_tokens <= 0:
            raise ValueError("max_tokens must be > 0")
        if self.top_k <= 0:
            raise ValueError("top_k must be > 0")
        if self.embed_timeout is not None and self.embed_timeout <= 0:
            raise ValueError("embed_timeout must be > 0 when set")

    @classmethod
    def from_env(
        cls,
        *,
        db_path: str | None = None,
        model_id: str | None = None,
        max_tokens: int | None = None,
        top_k: int | None = None,
        min_score: float | None = None,
    ) -> SearchSettings:
        """Build settings from explicit overrides, then env vars, then defaults."""
        env_min_score = _env_float(ENV_MIN_SCORE)
        return cls(
            db_path=resolve_db_path(db_path),
            model_id=model_id or os.getenv(ENV_MODEL_ID, DEFAULT_MODEL_ID),
            embedding_dim=int(os.getenv(ENV_EMBEDDING_DIM, str(DEFAULT_EMBEDDING_DIM))),
            max_tokens=max_tokens
            or int(os.getenv(ENV_MAX_TOKENS, str(DEFAULT_MAX_TOKENS))),
            top_k=top_k or int(os.getenv(ENV_TOP_K, str(DEFAULT_TOP_K))),
            min_score=(
                min_score
                if min_score is not None
                else env_min_score
                if env_min_score is not None
                else DEFAULT_MIN_SCORE
            ),
            embed_timeout=_env_float(ENV_EMBED_TIMEOUT),
        )
