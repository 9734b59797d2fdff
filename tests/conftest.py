from __future__ import annotations

import threading
from pathlib import Path

import pytest

from semsearch.config import SearchSettings
from semsearch.gateway import EmbeddingWorker
from semsearch.models import EmbedRequest, WorkerRequest

VOCAB = ["coffee", "bread", "marathon", "plant", "star", "backup", "water", "yeast"]


class KeywordEmbedder:
    """Deterministic bag-of-keywords embedder."""

    def __init__(self, model_id: str = "test-model") -> None:
        self.model_id = model_id
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        words = text.lower().split()
        vector = [float(sum(word.startswith(term) for word in words)) for term in VOCAB]
        vector.append(0.1)
        return vector


class EmbedderFactory:
    """Builds KeywordEmbedders and records which models were loaded."""

    def __init__(self) -> None:
        self.created: list[str] = []
        self.embedders: list[KeywordEmbedder] = []

    def __call__(self, model_id: str) -> KeywordEmbedder:
        self.created.append(model_id)
        embedder = KeywordEmbedder(model_id)
        self.embedders.append(embedder)
        return embedder

    @property
    def embed_calls(self) -> list[str]:
        return [text for embedder in self.embedders for text in embedder.calls]


class BlockingEmbedder(KeywordEmbedder):
    """Embedder whose calls wait until ``release`` is set."""

    def __init__(self, model_id: str = "test-model") -> None:
        super().__init__(model_id)
        self.entered = threading.Event()
        self.release = threading.Event()

    def embed(self, text: str) -> list[float]:
        self.entered.set()
        self.release.wait(timeout=10)
        return super().embed(text)


class FakeWorker:
    """Records posted messages; tests deliver replies by hand."""

    def __init__(self) -> None:
        self.posted: list[WorkerRequest] = []
        self.listener = None
        self.started = False
        self.stopped = False

    def set_listener(self, listener) -> None:
        self.listener = listener

    def post(self, message: WorkerRequest) -> None:
        self.posted.append(message)

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def embed_requests(self) -> list[EmbedRequest]:
        return [message for message in self.posted if isinstance(message, EmbedRequest)]


@pytest.fixture()
def embedder_factory() -> EmbedderFactory:
    return EmbedderFactory()


@pytest.fixture()
def worker(embedder_factory: EmbedderFactory):
    worker = EmbeddingWorker(embedder_factory)
    yield worker
    worker.stop()


@pytest.fixture()
def settings(tmp_path: Path) -> SearchSettings:
    return SearchSettings(
        db_path=str(tmp_path / "cache.duckdb"),
        model_id="test-model",
        max_tokens=64,
        top_k=3,
        min_score=0.2,
    )
