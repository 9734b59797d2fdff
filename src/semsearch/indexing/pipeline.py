"""
Index building orchestration.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable

import numpy as np

from ..gateway import InferenceGateway
from ..models import Document
from ..storage import CacheEntry, CacheKey, EmbeddingCache
from .normalizer import fingerprint, normalize_text

logger = logging.getLogger(__name__)


@dataclass
class IndexEntry:
    """In-memory pairing of a document with its embedding."""

    embedding: np.ndarray
    document: Document


@dataclass(frozen=True)
class IndexProgress:
    """Progress event emitted after each document is indexed."""

    indexed_count: int
    total_docs: int
    progress_percent: int
    average_latency_ms: int | None = None


@dataclass(frozen=True)
class IndexingResult:
    """Summary output for an indexing run."""

    index: dict[str, IndexEntry]
    indexed_count: int
    total_docs: int
    cache_hits: int
    cache_misses: int
    average_latency_ms: int | None
    cache_count: int


ProgressCallback = Callable[[IndexProgress], None]


def progress_percent(indexed_count: int, total_docs: int) -> int:
    if total_docs <= 0:
        return 0
    return round(indexed_count / total_docs * 100)


class IndexBuilder:
    """Build the in-memory embedding index, reusing cached embeddings."""

    def __init__(
        self,
        cache: EmbeddingCache,
        gateway: InferenceGateway,
        *,
        model_id: str | None = None,
        cache_model_id: str | None = None,
    ) -> None:
        self.cache = cache
        self.gateway = gateway
        self.model_id = model_id or gateway.model_id
        self.cache_model_id = cache_model_id or self.model_id
        self.index: dict[str, IndexEntry] = {}
        self.indexed_count = 0
        self.total_docs = 0
        self._is_indexing = False

    @property
    def is_indexing(self) -> bool:
        return self._is_indexing

    def reset(self) -> None:
        """Drop the current index and progress counters."""
        self.index.clear()
        self.indexed_count = 0
        self.total_docs = 0

    async def build_index(
        self,
        documents: Iterable[Document],
        max_tokens: int,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> IndexingResult | None:
        """
        Embed and index documents one at a time, in input order.

        Returns None without doing anything when a build is already running.
        """
        if self._is_indexing:
            logger.debug("Index build already in progress; ignoring request")
            return None

        self._is_indexing = True
        try:
            return await self._build(list(documents), max_tokens, on_progress)
        finally:
            self._is_indexing = False

    async def _build(
        self,
        documents: list[Document],
        max_tokens: int,
        on_progress: ProgressCallback | None,
    ) -> IndexingResult:
        self.indexed_count = 0
        self.total_docs = len(documents)
        durations: list[int] = []
        hits = 0

        for doc in documents:
            text = normalize_text(doc.text, max_tokens)
            if text != doc.text:
                doc = doc.with_text(text)
            key = CacheKey(model_id=self.cache_model_id, content_sha256=fingerprint(text))

            cached = await self.cache.get(key)
            if cached is not None:
                hits += 1
                logger.debug("Cache hit for %s (%s)", doc.id, key.content_sha256[:12])
            else:
                start = time.perf_counter()
                embedding = await self.gateway.embed(text, self.model_id)
                durations.append(round((time.perf_counter() - start) * 1000))
                cached = CacheEntry(key=key, embedding=embedding, metadata=doc.metadata())
                await self.cache.put(cached)
                logger.debug("Embedded %s in %d ms", doc.id, durations[-1])

            self.index[doc.id] = IndexEntry(embedding=cached.embedding, document=doc)
            self.indexed_count += 1
            if on_progress is not None:
                on_progress(
                    IndexProgress(
                        indexed_count=self.indexed_count,
                        total_docs=self.total_docs,
                        progress_percent=progress_percent(
                            self.indexed_count, self.total_docs
                        ),
                        average_latency_ms=_mean_ms(durations),
                    )
                )

        average_latency_ms = _mean_ms(durations)
        cache_count = await self.cache.count()
        logger.info(
            "Indexed %d documents (%d cached, %d embedded, avg %s ms)",
            self.indexed_count,
            hits,
            len(durations),
            average_latency_ms if average_latency_ms is not None else "n/a",
        )
        return IndexingResult(
            index=self.index,
            indexed_count=self.indexed_count,
            total_docs=self.total_docs,
            cache_hits=hits,
            cache_misses=len(durations),
            average_latency_ms=average_latency_ms,
            cache_count=cache_count,
        )


def _mean_ms(durations: list[int]) -> int | None:
    if not durations:
        return None
    return round(sum(durations) / len(durations))
