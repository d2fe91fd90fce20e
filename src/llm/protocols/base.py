# src/llm/protocols/base.py - v1
"""Strategy interface shared by the Bedrock protocol generations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from bedrockllm.llm.errors import TranslationError, UnsupportedRoleError
from bedrockllm.llm.models import (
    CallOptions,
    ChatMessageType,
    GenerationDefaults,
    LLMResponse,
    MessageContent,
)
from bedrockllm.llm.wire import to_json_bytes

_ResponseT = TypeVar("_ResponseT", bound=BaseModel)

# Roles every Bedrock protocol generation can express, with their wire names.
WIRE_ROLES: dict[ChatMessageType, str] = {
    ChatMessageType.HUMAN: "user",
    ChatMessageType.AI: "assistant",
    ChatMessageType.SYSTEM: "system",
}


def check_roles(messages: list[MessageContent]) -> None:
    """Reject the first message whose role has no wire counterpart.

    Raises:
        UnsupportedRoleError: Role is outside WIRE_ROLES.
    """
    for message in messages:
        if message.role not in WIRE_ROLES:
            raise UnsupportedRoleError(message.role)


class ProtocolStrategy(ABC):
    """Build request bytes for one protocol and parse its responses."""

    def __init__(self, defaults: GenerationDefaults | None = None) -> None:
        self._defaults = defaults or GenerationDefaults()

    @property
    @abstractmethod
    def protocol_name(self) -> str:
        """Registry tag of this protocol."""

    @abstractmethod
    async def build_request(
        self, messages: list[MessageContent], options: CallOptions | None = None
    ) -> bytes:
        """Translate a conversation into a serialized request body."""

    @abstractmethod
    def parse_response(self, body: bytes, model_id: str) -> LLMResponse:
        """Translate a raw response body into an LLMResponse."""

    def _resolve_options(self, options: CallOptions | None) -> CallOptions:
        return (options or CallOptions()).with_defaults(self._defaults)

    @staticmethod
    def _serialize(payload: BaseModel) -> bytes:
        try:
            return to_json_bytes(payload)
        except (TypeError, ValueError) as e:
            raise TranslationError("serialize_request", f"failed to marshal payload: {e}") from e

    @staticmethod
    def _deserialize(model: type[_ResponseT], body: bytes) -> _ResponseT:
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            raise TranslationError("parse_response", f"failed to unmarshal response: {e}") from e
