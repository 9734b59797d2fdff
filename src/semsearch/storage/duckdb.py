"""
DuckDB storage backend for embedding persistence.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path

import duckdb
import numpy as np

from ..errors import CacheStoreError
from .base import CacheEntry, CacheKey


class DuckDBStorage:
    """DuckDB-backed durable store mapping cache keys to embeddings."""

    def __init__(
        self,
        db_path: str,
        *,
        read_only: bool = False,
        initialize: bool = True,
    ) -> None:
        self.db_path = str(Path(db_path).expanduser().resolve())
        self.read_only = read_only
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        # One connection is shared by the event loop's worker threads.
        self._lock = threading.Lock()
        try:
            self._conn = duckdb.connect(self.db_path, read_only=read_only)
        except duckdb.Error as exc:
            raise CacheStoreError(f"Could not open cache at {self.db_path}: {exc}") from exc
        if initialize and not read_only:
            self.initialize()

    def close(self) -> None:
        """Close the underlying DuckDB connection."""
        with self._lock:
            self._conn.close()

    def initialize(self) -> None:
        self._execute(
            """
            CREATE TABLE IF NOT EXISTS embeddings (
                cache_key VARCHAR PRIMARY KEY,
                model_id VARCHAR NOT NULL,
                content_sha256 VARCHAR NOT NULL,
                embedding FLOAT[] NOT NULL,
                metadata_json VARCHAR NOT NULL DEFAULT '{}',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            """
        )

    def get_entry(self, key: CacheKey) -> CacheEntry | None:
        row = self._fetchone(
            """
            SELECT model_id, content_sha256, embedding, metadata_json
            FROM embeddings
            WHERE cache_key = ?
            LIMIT 1
            """,
            [str(key)],
        )
        if row is None:
            return None
        return CacheEntry(
            key=CacheKey(model_id=str(row[0]), content_sha256=str(row[1])),
            embedding=np.asarray(row[2], dtype=np.float32),
            metadata=json.loads(str(row[3])),
        )

    def upsert_entry(self, entry: CacheEntry) -> None:
        embedding = np.asarray(entry.embedding, dtype=np.float32)
        self._execute(
            """
            INSERT INTO embeddings (cache_key, model_id, content_sha256, embedding, metadata_json)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(cache_key) DO UPDATE SET
                model_id = excluded.model_id,
                content_sha256 = excluded.content_sha256,
                embedding = excluded.embedding,
                metadata_json = excluded.metadata_json,
                created_at = now()
            """,
            [
                str(entry.key),
                entry.model_id,
                entry.content_sha256,
                embedding.tolist(),
                json.dumps(entry.metadata, sort_keys=True),
            ],
        )

    def count_entries(self) -> int:
        row = self._fetchone("SELECT COUNT(*) FROM embeddings", [])
        return int(row[0]) if row else 0

    def _execute(self, sql: str, params: list | None = None) -> None:
        with self._lock:
            try:
                self._conn.execute(sql, params or [])
            except duckdb.Error as exc:
                raise CacheStoreError(str(exc)) from exc

    def _fetchone(self, sql: str, params: list) -> tuple | None:
        with self._lock:
            try:
                return self._conn.execute(sql, params).fetchone()
            except duckdb.Error as exc:
                raise CacheStoreError(str(exc)) from exc
