"""Storage backends for the embedding cache."""

from .base import CacheEntry, CacheKey, StorageBackend
from .cache import EmbeddingCache
from .duckdb import DuckDBStorage

__all__ = [
    "CacheEntry",
    "CacheKey",
    "StorageBackend",
    "EmbeddingCache",
    "DuckDBStorage",
]
