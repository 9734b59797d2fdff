"""
Exception types raised by the embedding cache, the inference gateway and ingestion.
"""

from __future__ import annotations


class SemsearchError(Exception):
    """Base class for errors raised by semsearch."""


class CacheStoreError(SemsearchError):
    """Raised when the durable embedding store cannot be opened, read or written."""


class InferenceError(SemsearchError):
    """Raised when the embedding worker reports a failure for a request."""

    def __init__(self, request_id: str, message: str) -> None:
        super().__init__(f"Embedding request {request_id} failed: {message}")
        self.request_id = request_id


class RequestTimeoutError(SemsearchError, TimeoutError):
    """Raised when an embedding request exceeds the configured gateway timeout."""

    def __init__(self, request_id: str, timeout: float) -> None:
        super().__init__(
            f"Embedding request {request_id} did not complete within {timeout:.1f}s"
        )
        self.request_id = request_id
        self.timeout = timeout


class IngestError(SemsearchError, ValueError):
    """Raised when structured document input cannot be parsed."""


class DimensionMismatchError(SemsearchError, ValueError):
    """Raised when two embeddings being compared have different lengths."""


class IndexingInProgressError(SemsearchError):
    """Raised when documents are replaced while an index build is running."""
