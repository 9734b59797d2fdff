"""
Stateful search session shared by the CLI and the HTTP server.

Holds the prepared documents, the live index and the observability values a
presentation layer displays: model load time, indexing latency, query time,
cache size and progress.
"""

from __future__ import annotations

import logging
from typing import Callable

from .config import SearchSettings
from .embeddings import EmbeddingProvider
from .errors import IndexingInProgressError
from .gateway import EmbeddingWorker, InferenceGateway, Worker
from .indexing import IndexBuilder, IndexingResult, IndexProgress, normalize_text
from .ingest import SourceMode, to_document_list
from .models import Document
from .search import SearchResponse, SearchResult, SemanticSearchEngine
from .storage import EmbeddingCache

logger = logging.getLogger(__name__)


def default_worker(settings: SearchSettings) -> EmbeddingWorker:
    """Worker backed by the Google GenAI embedding provider."""
    return EmbeddingWorker(
        lambda model_id: EmbeddingProvider(model=model_id, dim=settings.embedding_dim)
    )


class SearchSession:
    """Prepare documents, index them and run queries against the index."""

    def __init__(
        self,
        settings: SearchSettings,
        *,
        worker: Worker | None = None,
        cache: EmbeddingCache | None = None,
    ) -> None:
        self.settings = settings
        self.cache = cache or EmbeddingCache(settings.db_path)
        self.gateway = InferenceGateway(
            worker or default_worker(settings),
            model_id=settings.model_id,
            timeout=settings.embed_timeout,
        )
        self.builder = IndexBuilder(
            self.cache, self.gateway, cache_model_id=settings.cache_model_id
        )
        self.engine = SemanticSearchEngine(self.gateway)

        self.documents: list[Document] = []
        self.results: list[SearchResult] = []
        self.average_index_ms: int | None = None
        self.query_time_ms: int | None = None
        self.cache_count = 0
        self.progress_percent = 0

    @property
    def model_load_ms(self) -> int | None:
        return self.gateway.model_load_ms

    @property
    def is_indexing(self) -> bool:
        return self.builder.is_indexing

    @property
    def indexed_count(self) -> int:
        return self.builder.indexed_count

    @property
    def total_docs(self) -> int:
        return len(self.documents)

    async def start(self) -> None:
        """Start the worker, warm up the model and read the cache size."""
        await self.gateway.warm_up()
        await self.refresh_cache_count()

    def close(self) -> None:
        self.gateway.close()
        self.cache.close()

    async def refresh_cache_count(self) -> int:
        self.cache_count = await self.cache.count()
        return self.cache_count

    def prepare_documents(
        self,
        source_mode: SourceMode = "builtin",
        content: str | None = None,
        *,
        documents: list[Document] | None = None,
    ) -> list[Document]:
        """Load and normalise documents, resetting the index and counters."""
        if self.is_indexing:
            raise IndexingInProgressError(
                "Cannot replace documents while an index build is running"
            )
        docs = documents if documents is not None else to_document_list(source_mode, content)
        self.documents = [
            doc.with_text(normalize_text(doc.text, self.settings.max_tokens))
            for doc in docs
        ]
        self.builder.reset()
        self.progress_percent = 0
        self.results = []
        logger.info("Prepared %d documents", len(self.documents))
        return self.documents

    async def index_documents(
        self,
        *,
        on_progress: Callable[[IndexProgress], None] | None = None,
    ) -> IndexingResult | None:
        """Index the prepared documents (builtin ones if none were prepared)."""
        if self.is_indexing:
            return None
        if not self.documents:
            self.prepare_documents()

        def _track(progress: IndexProgress) -> None:
            self.progress_percent = progress.progress_percent
            if on_progress is not None:
                on_progress(progress)

        result = await self.builder.build_index(
            self.documents, self.settings.max_tokens, on_progress=_track
        )
        if result is None:
            return None
        self.cache_count = result.cache_count
        if result.average_latency_ms is not None:
            self.average_index_ms = result.average_latency_ms
        return result

    def can_search(self, query: str) -> bool:
        return bool(query.strip()) and bool(self.builder.index)

    async def run_search(
        self,
        query: str,
        *,
        top_k: int | None = None,
        min_score: float | None = None,
    ) -> SearchResponse:
        """Search the current index; an empty query or index yields no results."""
        if not self.can_search(query):
            return SearchResponse(query=query)
        response = await self.engine.search(
            query,
            self.builder.index,
            top_k=top_k or self.settings.top_k,
            min_score=self.settings.min_score if min_score is None else min_score,
        )
        self.results = response.results
        self.query_time_ms = response.latency_ms
        return response

    async def run_quick_demo(self) -> IndexingResult | None:
        """Prepare and index the builtin corpus."""
        if self.is_indexing:
            return None
        self.prepare_documents("builtin")
        return await self.index_documents()
