# src/llm/protocols/text_completion.py - v1
"""Legacy text-completion protocol (Claude v2 / Claude Instant).

The model takes one flattened prompt with Human/Assistant turn markers and
returns a single completion string.
"""

from __future__ import annotations

import logging
from typing import Any

from bedrockllm.llm.errors import RequestValidationError
from bedrockllm.llm.models import (
    CallOptions,
    GenerationDefaults,
    LLMResponse,
    MessageContent,
    TextContent,
)
from bedrockllm.llm.protocols.base import ProtocolStrategy, check_roles
from bedrockllm.llm.wire import (
    ASSISTANT_MARKER,
    HUMAN_MARKER,
    TextCompletionRequest,
    TextCompletionResponse,
)

logger = logging.getLogger(__name__)


def ensure_turn_markers(prompt: str) -> str:
    """Add the Human/Assistant markers the legacy API requires, if absent."""
    if HUMAN_MARKER not in prompt:
        prompt = HUMAN_MARKER + prompt
    if ASSISTANT_MARKER not in prompt:
        prompt = prompt + ASSISTANT_MARKER
    return prompt


class TextCompletionProtocol(ProtocolStrategy):
    """Single-prompt request builder and completion parser."""

    def __init__(self, defaults: GenerationDefaults | None = None, **kwargs: Any) -> None:
        super().__init__(defaults)

    @property
    def protocol_name(self) -> str:
        return "text_completion"

    async def build_request(
        self, messages: list[MessageContent], options: CallOptions | None = None
    ) -> bytes:
        check_roles(messages)
        if len(messages) != 1:
            raise RequestValidationError("only one message is supported")
        parts = messages[0].parts
        if len(parts) != 1:
            raise RequestValidationError("only one part is supported")
        part = parts[0]
        if not isinstance(part, TextContent):
            raise RequestValidationError("only text content is supported")

        opts = self._resolve_options(options)
        payload = TextCompletionRequest(
            prompt=ensure_turn_markers(part.text),
            max_tokens_to_sample=opts.max_tokens,
            temperature=opts.temperature or None,
            top_p=opts.top_p or None,
            top_k=opts.top_k or None,
            stop_sequences=opts.stop_words or None,
        )
        logger.debug("Text completion payload: %s", payload.model_dump(exclude_none=True))
        return self._serialize(payload)

    def parse_response(self, body: bytes, model_id: str) -> LLMResponse:
        resp = self._deserialize(TextCompletionResponse, body)
        return LLMResponse(
            content=resp.completion,
            stop_reason=resp.stop_reason,
            metadata={"model": model_id},
        )
