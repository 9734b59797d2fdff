"""
semsearch - semantic search over documents with cached embeddings.

Documents are normalised, fingerprinted and embedded by a single background
worker; embeddings are cached in DuckDB by (model, content hash), and queries
are ranked by cosine similarity against the in-memory index.

Example usage:
    >>> from semsearch import SearchSession, SearchSettings
    >>> session = SearchSession(SearchSettings.from_env())
    >>> await session.run_quick_demo()
    >>> response = await session.run_search("how do I make coffee?")
"""

from .config import SearchSettings, resolve_db_path
from .errors import (
    CacheStoreError,
    InferenceError,
    IngestError,
    RequestTimeoutError,
    SemsearchError,
)
from .gateway import EmbeddingWorker, InferenceGateway
from .indexing import IndexBuilder, IndexEntry, IndexingResult, fingerprint, normalize_text
from .models import Document
from .search import SearchResponse, SearchResult, SemanticSearchEngine, highlight
from .session import SearchSession
from .storage import CacheEntry, CacheKey, EmbeddingCache

__all__ = [
    # Config
    "SearchSettings",
    "resolve_db_path",
    # Errors
    "CacheStoreError",
    "InferenceError",
    "IngestError",
    "RequestTimeoutError",
    "SemsearchError",
    # Pipeline
    "Document",
    "normalize_text",
    "fingerprint",
    "CacheKey",
    "CacheEntry",
    "EmbeddingCache",
    "EmbeddingWorker",
    "InferenceGateway",
    "IndexBuilder",
    "IndexEntry",
    "IndexingResult",
    "SemanticSearchEngine",
    "SearchResponse",
    "SearchResult",
    "highlight",
    # Session
    "SearchSession",
]
