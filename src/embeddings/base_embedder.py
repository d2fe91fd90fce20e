# src/embeddings/base_embedder.py - v2
"""Abstract embeddings interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np
import numpy.typing as npt

EmbeddingVector = npt.NDArray[np.float32]


class BaseEmbedder(ABC):
    """Unified interface for embedding models."""

    @abstractmethod
    async def embed_texts(
        self, texts: Sequence[str], timeout: float | None = None
    ) -> list[EmbeddingVector]:
        """Embed a batch of texts into vectors, in input order."""

    @abstractmethod
    async def embed_query(self, query: str) -> EmbeddingVector:
        """Embed a single text."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model identifier."""
