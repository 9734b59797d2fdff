"""Search helpers for the in-memory embedding index."""

from .highlight import highlight, query_terms
from .ranker import ScoredItem, cosine_similarity, rank_scored
from .semantic import SearchResponse, SearchResult, SemanticSearchEngine

__all__ = [
    "highlight",
    "query_terms",
    "ScoredItem",
    "cosine_similarity",
    "rank_scored",
    "SearchResponse",
    "SearchResult",
    "SemanticSearchEngine",
]
