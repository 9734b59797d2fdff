"""
Async embedding cache over a lazily opened durable store.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from .base import CacheEntry, CacheKey, StorageBackend
from .duckdb import DuckDBStorage

logger = logging.getLogger(__name__)


class EmbeddingCache:
    """
    Content-addressed embedding cache.

    The backing store is opened on first access and then shared for the
    lifetime of the cache. Blocking store calls run in a worker thread so
    callers suspend instead of blocking the event loop.
    """

    def __init__(
        self,
        db_path: str | None = None,
        *,
        storage_factory: Callable[[], StorageBackend] | None = None,
    ) -> None:
        if db_path is None and storage_factory is None:
            raise ValueError("Provide db_path or storage_factory.")
        self.db_path = db_path
        self._storage_factory = storage_factory or (lambda: DuckDBStorage(str(db_path)))
        self._storage: StorageBackend | None = None
        self._open_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._storage is not None

    async def _store(self) -> StorageBackend:
        if self._storage is not None:
            return self._storage
        async with self._open_lock:
            if self._storage is None:
                self._storage = await asyncio.to_thread(self._storage_factory)
                logger.info("Opened embedding cache at %s", self.db_path or "<custom>")
        return self._storage

    async def get(self, key: CacheKey) -> CacheEntry | None:
        store = await self._store()
        return await asyncio.to_thread(store.get_entry, key)

    async def put(self, entry: CacheEntry) -> None:
        store = await self._store()
        await asyncio.to_thread(store.upsert_entry, entry)

    async def count(self) -> int:
        store = await self._store()
        return await asyncio.to_thread(store.count_entries)

    def close(self) -> None:
        """Close the store if it was opened. Safe to call more than once."""
        if self._storage is not None:
            self._storage.close()
            self._storage = None
