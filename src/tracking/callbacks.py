# src/tracking/callbacks.py - v1
"""Callback hooks fired around BedrockLLM.generate_content."""

from __future__ import annotations

from abc import ABC, abstractmethod

from bedrockllm.llm.models import LLMResponse, MessageContent


class CallbackHandler(ABC):
    """Observer notified at the start, end or failure of a generation."""

    @abstractmethod
    def on_generate_start(self, model_id: str, messages: list[MessageContent]) -> None:
        """Called before the request is built."""

    @abstractmethod
    def on_generate_end(self, model_id: str, response: LLMResponse) -> None:
        """Called after a response was parsed."""

    @abstractmethod
    def on_error(self, model_id: str, error: BaseException) -> None:
        """Called when any stage of the generation failed."""
