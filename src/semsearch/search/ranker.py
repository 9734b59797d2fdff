"""
Similarity scoring and ranking helpers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from ..errors import DimensionMismatchError


def cosine_similarity(a: Any, b: Any) -> float:
    """
    Cosine similarity of two equal-length vectors.

    A zero-norm or non-finite result scores ``-inf`` and is never ranked.
    """
    va = np.asarray(a, dtype=np.float32)
    vb = np.asarray(b, dtype=np.float32)
    if va.shape != vb.shape:
        raise DimensionMismatchError(
            f"Embedding shapes differ: {va.shape} vs {vb.shape}"
        )
    denom = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if denom == 0.0:
        return -math.inf
    score = float(np.dot(va, vb)) / denom
    if not math.isfinite(score):
        return -math.inf
    return score


@dataclass(frozen=True)
class ScoredItem:
    """An index key paired with its similarity score and iteration position."""

    key: str
    score: float
    position: int


def rank_scored(
    items: list[ScoredItem], *, min_score: float, top_k: int
) -> list[ScoredItem]:
    """Keep scores at or above ``min_score``, order by score descending, cut to ``top_k``."""
    kept = [
        item
        for item in items
        if math.isfinite(item.score) and item.score >= min_score
    ]
    ordered = sorted(kept, key=lambda item: (-item.score, item.position))
    return ordered[: max(top_k, 0)]
