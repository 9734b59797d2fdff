"""Tests for the embedding provider."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

import numpy as np
import pytest

from semsearch.embeddings import EmbeddingProvider, unit_normalize


# ---------------------------------------------------------------------------
# Mock helpers
# ---------------------------------------------------------------------------


@dataclass
class _FakeEmbedding:
    values: list[float]


@dataclass
class _FakeEmbedResult:
    embeddings: list[_FakeEmbedding]


class _FakeModels:
    """Records calls and returns deterministic embeddings."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    def embed_content(
        self, *, model: str, contents: list[str], config: dict
    ) -> _FakeEmbedResult:
        self.calls.append({"model": model, "contents": contents, "config": config})
        dim = config.get("output_dimensionality", 768)
        return _FakeEmbedResult(
            embeddings=[_FakeEmbedding(values=[2.0] * dim) for _ in contents]
        )


class _FakeClient:
    def __init__(self) -> None:
        self.models = _FakeModels()


# ---------------------------------------------------------------------------
# Unit tests (mock-based, no API key needed)
# ---------------------------------------------------------------------------


def test_embed_returns_unit_length_float32_vector() -> None:
    client = _FakeClient()
    provider = EmbeddingProvider(client=client, dim=4)

    vector = provider.embed("hello")

    assert vector.dtype == np.float32
    assert vector.shape == (4,)
    assert float(np.linalg.norm(vector)) == pytest.approx(1.0, abs=1e-6)
    assert vector.tolist() == pytest.approx([0.5, 0.5, 0.5, 0.5])


def test_embed_sends_single_text_with_similarity_task_type() -> None:
    client = _FakeClient()
    provider = EmbeddingProvider(client=client, dim=4)

    provider.embed("search query")

    call = client.models.calls[0]
    assert call["contents"] == ["search query"]
    assert call["config"]["task_type"] == "SEMANTIC_SIMILARITY"
    assert call["config"]["output_dimensionality"] == 4


def test_env_overrides(monkeypatch) -> None:
    client = _FakeClient()
    monkeypatch.setenv("SEMSEARCH_EMBEDDING_MODEL", "custom-model-001")
    monkeypatch.setenv("SEMSEARCH_EMBEDDING_DIM", "256")

    provider = EmbeddingProvider(client=client)

    assert provider.model == "custom-model-001"
    assert provider.dim == 256

    provider.embed("test")
    call = client.models.calls[0]
    assert call["model"] == "custom-model-001"
    assert call["config"]["output_dimensionality"] == 256


def test_missing_api_key_raises(monkeypatch) -> None:
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ValueError, match="GOOGLE_API_KEY"):
        EmbeddingProvider(api_key=None, client=None)


def test_unit_normalize_leaves_zero_vector_alone() -> None:
    assert unit_normalize([0.0, 0.0]).tolist() == [0.0, 0.0]
    assert unit_normalize([3.0, 4.0]).tolist() == pytest.approx([0.6, 0.8])


# ---------------------------------------------------------------------------
# Real API integration test (skipped unless GOOGLE_API_KEY is set)
# ---------------------------------------------------------------------------


@pytest.mark.skipif(
    not os.getenv("GOOGLE_API_KEY"),
    reason="GOOGLE_API_KEY not set; skipping real embedding test",
)
def test_real_embedding_api() -> None:
    provider = EmbeddingProvider(dim=128)

    vector = provider.embed("The purchase price is $45 million.")

    assert vector.shape == (128,)
    assert float(np.linalg.norm(vector)) == pytest.approx(1.0, abs=1e-4)
