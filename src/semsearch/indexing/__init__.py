"""Indexing components for semsearch."""

from .normalizer import fingerprint, normalize_text
from .pipeline import IndexBuilder, IndexEntry, IndexingResult, IndexProgress

__all__ = [
    "fingerprint",
    "normalize_text",
    "IndexBuilder",
    "IndexEntry",
    "IndexingResult",
    "IndexProgress",
]
