"""
Vector-based semantic search over the in-memory embedding index.

Embeds a query through the inference gateway and ranks every indexed
document by cosine similarity.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Mapping

from ..gateway import InferenceGateway
from ..indexing.pipeline import IndexEntry
from .highlight import highlight
from .ranker import ScoredItem, cosine_similarity, rank_scored

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """Ranked document hit."""

    id: str
    title: str
    text: str
    tags: list[str]
    score: float
    highlighted: str


@dataclass(frozen=True)
class SearchResponse:
    """Results of one query plus its end-to-end latency."""

    query: str
    results: list[SearchResult] = field(default_factory=list)
    latency_ms: int | None = None


class SemanticSearchEngine:
    """Embed a query and search indexed document embeddings."""

    def __init__(self, gateway: InferenceGateway) -> None:
        self.gateway = gateway

    async def search(
        self,
        query: str,
        index: Mapping[str, IndexEntry],
        *,
        top_k: int,
        min_score: float,
    ) -> SearchResponse:
        """Return up to ``top_k`` hits scoring at least ``min_score``, best first."""
        if top_k <= 0:
            raise ValueError("top_k must be > 0")
        if not query.strip() or not index:
            return SearchResponse(query=query)

        start = time.perf_counter()
        query_vector = await self.gateway.embed(query)

        # Snapshot so a build running concurrently cannot change the dict mid-iteration.
        entries = list(index.items())
        scored = [
            ScoredItem(
                key=doc_id,
                score=cosine_similarity(query_vector, entry.embedding),
                position=position,
            )
            for position, (doc_id, entry) in enumerate(entries)
        ]
        lookup = dict(entries)
        results: list[SearchResult] = []
        for item in rank_scored(scored, min_score=min_score, top_k=top_k):
            doc = lookup[item.key].document
            results.append(
                SearchResult(
                    id=doc.id,
                    title=doc.title,
                    text=doc.text,
                    tags=list(doc.tags),
                    score=item.score,
                    highlighted=highlight(doc.text, query),
                )
            )

        latency_ms = round((time.perf_counter() - start) * 1000)
        logger.info(
            "Query matched %d of %d documents in %d ms",
            len(results),
            len(entries),
            latency_ms,
        )
        return SearchResponse(query=query, results=results, latency_ms=latency_ms)
