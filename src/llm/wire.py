# src/llm/wire.py - v1
"""Bedrock wire schemas for the text-completion, messages and Titan protocols.

Plain data shapes only. Optional request fields are None when unset and are
dropped on serialization (see to_json_bytes).
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

ANTHROPIC_VERSION = "bedrock-2023-05-31"

HUMAN_MARKER = "\n\nHuman:"
ASSISTANT_MARKER = "\n\nAssistant:"


def to_json_bytes(payload: BaseModel) -> bytes:
    """Serialize a request model, omitting unset optional fields."""
    return payload.model_dump_json(exclude_none=True, by_alias=True).encode("utf-8")


# --- Text completion protocol (Claude v2 / Instant) ---


class TextCompletionRequest(BaseModel):
    prompt: str
    max_tokens_to_sample: int
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    stop_sequences: list[str] | None = None


class TextCompletionResponse(BaseModel):
    completion: str
    stop_reason: str | None = None


# --- Messages protocol (Claude 3) ---


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageSource(BaseModel):
    type: Literal["base64"] = "base64"
    media_type: str
    data: str


class ImageBlock(BaseModel):
    type: Literal["image"] = "image"
    source: ImageSource


ContentBlock = Union[TextBlock, ImageBlock]


class WireMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: list[ContentBlock] = Field(default_factory=list)

    def text(self) -> str:
        """Concatenate text blocks in order."""
        return "".join(b.text for b in self.content if isinstance(b, TextBlock))


class MessagesRequest(BaseModel):
    anthropic_version: str = ANTHROPIC_VERSION
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    stop_sequences: list[str] | None = None
    system: str | None = None
    max_tokens: int | None = None
    messages: list[WireMessage] = Field(default_factory=list)


class ResponseContentBlock(BaseModel):
    type: str
    text: str = ""


class ResponseUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0


class MessagesResponse(BaseModel):
    id: str = ""
    type: str = ""
    role: str = ""
    model: str | None = None
    stop_reason: str | None = None
    stop_sequence: Any = None
    usage: ResponseUsage = Field(default_factory=ResponseUsage)
    content: list[ResponseContentBlock] = Field(default_factory=list)


# --- Titan embedding protocol ---


class TitanEmbeddingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    input_text: str = Field(alias="inputText")


class TitanEmbeddingResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    embedding: list[float]
    input_text_token_count: int = Field(default=0, alias="inputTextTokenCount")
