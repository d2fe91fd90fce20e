# src/llm/models.py - v2
"""Provider-neutral conversation types: MessageContent, CallOptions, LLMResponse.

A conversation is an ordered list of MessageContent, each carrying a role and
an ordered list of content parts. Protocol strategies translate these into
Bedrock wire payloads and normalize the replies back into LLMResponse.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ChatMessageType(str, Enum):
    """Role of a message in a conversation.

    Only HUMAN, AI and SYSTEM map onto the Bedrock protocols; the remaining
    roles exist in the conversation model but are rejected at translation.
    """

    HUMAN = "human"
    AI = "ai"
    SYSTEM = "system"
    GENERIC = "generic"
    FUNCTION = "function"
    TOOL = "tool"


class _BasePart(BaseModel):
    """Common base of the message payload units."""


class TextContent(_BasePart):
    """Plain text part."""

    type: Literal["text"] = "text"
    text: str


class ImageURLContent(_BasePart):
    """Image referenced by URL, fetched at translation time."""

    type: Literal["image_url"] = "image_url"
    url: str


class BinaryContent(_BasePart):
    """Inline binary image with its declared MIME type.

    data travels as base64 in JSON dumps.
    """

    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    type: Literal["binary"] = "binary"
    mime_type: str
    data: bytes


# One unit of a message payload, tagged by its "type" field.
ContentPart = Annotated[
    Union[TextContent, ImageURLContent, BinaryContent],
    Field(discriminator="type"),
]


class MessageContent(BaseModel):
    """Single message in a conversation."""

    role: ChatMessageType
    parts: list[ContentPart] = Field(default_factory=list)


def text_parts(role: ChatMessageType, *texts: str) -> MessageContent:
    """Build a message made only of text parts."""
    return MessageContent(role=role, parts=[TextContent(text=t) for t in texts])


@dataclass(frozen=True)
class GenerationDefaults:
    """Per-instance fallback values for generation parameters."""

    max_tokens: int = 1000
    temperature: float = 0.7
    top_p: float = 0.9
    top_k: int = 50
    stop_words: tuple[str, ...] = ("Human:",)


@dataclass
class CallOptions:
    """Per-call generation parameters.

    A zero value (0, 0.0) means "not set" and falls back to the instance
    default. stop_words falls back only when None, so an explicit empty list
    disables the default stop words.
    """

    model: str | None = None
    max_tokens: int = 0
    temperature: float = 0.0
    top_p: float = 0.0
    top_k: int = 0
    stop_words: list[str] | None = None

    def with_defaults(self, defaults: GenerationDefaults) -> CallOptions:
        """Return a copy with every unset field filled from defaults."""
        return CallOptions(
            model=self.model,
            max_tokens=self.max_tokens or defaults.max_tokens,
            temperature=self.temperature or defaults.temperature,
            top_p=self.top_p or defaults.top_p,
            top_k=self.top_k or defaults.top_k,
            stop_words=(
                list(defaults.stop_words) if self.stop_words is None else list(self.stop_words)
            ),
        )


class LLMResponse(BaseModel):
    """Normalized response shared by every protocol generation."""

    content: str
    stop_reason: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class EmbeddingJob:
    """One text to embed, tied to its slot in the batch output."""

    index: int
    text: str
