# src/llm/base_client.py - v2
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from bedrockllm.embeddings.base_embedder import EmbeddingVector
from bedrockllm.llm.models import CallOptions, LLMResponse, MessageContent


class BaseLLMClient(ABC):
    """Chat generation plus text embedding behind one client."""

    @abstractmethod
    async def generate_content(
        self,
        messages: list[MessageContent],
        options: CallOptions | None = None,
    ) -> LLMResponse:
        """Generate a reply to a multi-turn, multi-part conversation."""

    @abstractmethod
    async def call(self, prompt: str, options: CallOptions | None = None) -> str:
        """Generate a reply to a single human prompt and return its text."""

    @abstractmethod
    async def create_embeddings(
        self, texts: Sequence[str], timeout: float | None = None
    ) -> list[EmbeddingVector]:
        """Embed texts, one vector per input in input order."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Default generation model id."""
