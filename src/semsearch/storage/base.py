"""
Cache record types and the storage protocol for durable embedding persistence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

import numpy as np


@dataclass(frozen=True)
class CacheKey:
    """Identity of a cached embedding: model identity plus content fingerprint."""

    model_id: str
    content_sha256: str

    def __str__(self) -> str:
        return f"{self.model_id}:{self.content_sha256}"


@dataclass(frozen=True)
class CacheEntry:
    """An embedding computed once for a (model, normalized text) pair."""

    key: CacheKey
    embedding: np.ndarray = field(repr=False)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def model_id(self) -> str:
        return self.key.model_id

    @property
    def content_sha256(self) -> str:
        return self.key.content_sha256


class StorageBackend(Protocol):
    """Protocol for the blocking key-value operations behind the embedding cache."""

    def initialize(self) -> None:
        """Create required tables."""

    def get_entry(self, key: CacheKey) -> CacheEntry | None:
        """Return the stored entry for a key, or None."""

    def upsert_entry(self, entry: CacheEntry) -> None:
        """Insert or replace the entry stored under its key."""

    def count_entries(self) -> int:
        """Return the number of stored entries."""

    def close(self) -> None:
        """Release the underlying connection."""
