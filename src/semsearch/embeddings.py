"""
Embedding provider used by the background inference worker.

Wraps the Google GenAI embedding API and returns unit-length float32 vectors
with configurable model and dimensions.
"""

from __future__ import annotations

import os
from typing import Any

import numpy as np
from google.genai import Client as GenAIClient

from .config import (
    DEFAULT_EMBEDDING_DIM,
    DEFAULT_MODEL_ID,
    ENV_EMBEDDING_DIM,
    ENV_MODEL_ID,
)


def unit_normalize(vector: Any) -> np.ndarray:
    """Return ``vector`` as float32 scaled to unit length (zero vectors unchanged)."""
    array = np.asarray(vector, dtype=np.float32)
    norm = float(np.linalg.norm(array))
    if norm == 0.0 or not np.isfinite(norm):
        return array
    return (array / norm).astype(np.float32)


class EmbeddingProvider:
    """Generate text embeddings via Google GenAI."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        dim: int | None = None,
        client: Any | None = None,
    ) -> None:
        self.model = model or os.getenv(ENV_MODEL_ID, DEFAULT_MODEL_ID)
        self.dim = dim or int(os.getenv(ENV_EMBEDDING_DIM, str(DEFAULT_EMBEDDING_DIM)))

        if client is not None:
            self._client = client
        else:
            resolved_key = api_key or os.getenv("GOOGLE_API_KEY")
            if resolved_key is None:
                raise ValueError(
                    "GOOGLE_API_KEY not found. "
                    "Provide api_key or set the environment variable."
                )
            self._client = GenAIClient(api_key=resolved_key)

    def embed(self, text: str, *, task_type: str = "SEMANTIC_SIMILARITY") -> np.ndarray:
        """Embed a single text and return a unit-length float32 vector."""
        result = self._client.models.embed_content(
            model=self.model,
            contents=[text],
            config={
                "task_type": task_type,
                "output_dimensionality": self.dim,
            },
        )
        # Truncated output dimensionalities are not normalized server-side.
        return unit_normalize(result.embeddings[0].values)
