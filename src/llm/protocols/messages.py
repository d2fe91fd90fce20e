# src/llm/protocols/messages.py - v1
"""Messages protocol (Claude 3 family).

Translates a multi-turn, multi-part conversation into the Messages API
payload. Roles and part kinds are validated for the whole conversation before
any remote image is fetched, so a malformed request never touches the network.

A single legacy-style prompt ("...\\n\\nHuman:...\\n\\nAssistant:...") is split
back into a user turn and an optional assistant turn so that prompts written
for the text-completion models keep working. Only one Human/Assistant pair is
recognized.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

from bedrockllm.llm.errors import RequestValidationError, UnsupportedContentError
from bedrockllm.llm.image_fetcher import BaseImageFetcher, HTTPImageFetcher
from bedrockllm.llm.models import (
    BinaryContent,
    CallOptions,
    ContentPart,
    GenerationDefaults,
    ImageURLContent,
    LLMResponse,
    MessageContent,
    TextContent,
)
from bedrockllm.llm.protocols.base import WIRE_ROLES, ProtocolStrategy, check_roles
from bedrockllm.llm.wire import (
    ASSISTANT_MARKER,
    HUMAN_MARKER,
    ContentBlock,
    ImageBlock,
    ImageSource,
    MessagesRequest,
    MessagesResponse,
    TextBlock,
    WireMessage,
)

logger = logging.getLogger(__name__)

_SUPPORTED_PARTS = (TextContent, ImageURLContent, BinaryContent)


class MessagesProtocol(ProtocolStrategy):
    """Multi-turn request builder and structured response parser."""

    def __init__(
        self,
        defaults: GenerationDefaults | None = None,
        image_fetcher: BaseImageFetcher | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(defaults)
        self._image_fetcher = image_fetcher

    @property
    def protocol_name(self) -> str:
        return "messages"

    @property
    def image_fetcher(self) -> BaseImageFetcher:
        if self._image_fetcher is None:
            self._image_fetcher = HTTPImageFetcher()
        return self._image_fetcher

    async def build_request(
        self, messages: list[MessageContent], options: CallOptions | None = None
    ) -> bytes:
        _validate_conversation(messages)
        opts = self._resolve_options(options)

        wire_messages = [await self._convert_message(m) for m in messages]
        if not wire_messages:
            raise RequestValidationError("no messages")

        system = ""
        if wire_messages[0].role == "system":
            system = wire_messages[0].text()
            wire_messages = wire_messages[1:]

        legacy = _split_legacy_prompt(wire_messages)
        if legacy is not None:
            prefix, wire_messages = legacy
            system = prefix + system

        if not wire_messages:
            raise RequestValidationError("no messages")

        payload = MessagesRequest(
            temperature=opts.temperature or None,
            top_p=opts.top_p or None,
            top_k=opts.top_k or None,
            stop_sequences=opts.stop_words or None,
            system=system or None,
            max_tokens=opts.max_tokens or None,
            messages=wire_messages,
        )
        body = self._serialize(payload)
        logger.debug("Messages payload: %d messages, %d bytes", len(wire_messages), len(body))
        return body

    def parse_response(self, body: bytes, model_id: str) -> LLMResponse:
        resp = self._deserialize(MessagesResponse, body)
        logger.debug(
            "Messages response: id=%s, stop_reason=%s, usage=%s",
            resp.id, resp.stop_reason, resp.usage.model_dump(),
        )
        content = "".join(block.text for block in resp.content if block.type == "text")
        return LLMResponse(
            content=content,
            stop_reason=resp.stop_reason,
            metadata={
                "id": resp.id,
                "model": model_id,
                "type": resp.type,
                "role": resp.role,
                "stop_sequence": resp.stop_sequence,
                "usage.input_tokens": resp.usage.input_tokens,
                "usage.output_tokens": resp.usage.output_tokens,
            },
        )

    # --- Internal helpers ---

    async def _convert_message(self, message: MessageContent) -> WireMessage:
        blocks: list[ContentBlock] = []
        for part in message.parts:
            blocks.append(await self._convert_part(part))
        return WireMessage(role=WIRE_ROLES[message.role], content=blocks)

    async def _convert_part(self, part: ContentPart) -> ContentBlock:
        if isinstance(part, TextContent):
            return TextBlock(text=part.text)
        if isinstance(part, ImageURLContent):
            data, media_type = await self.image_fetcher.fetch(part.url)
            return _image_block(media_type, data)
        if isinstance(part, BinaryContent):
            return _image_block(part.mime_type, part.data)
        raise UnsupportedContentError(part)


def _validate_conversation(messages: list[MessageContent]) -> None:
    check_roles(messages)
    for message in messages:
        for part in message.parts:
            if not isinstance(part, _SUPPORTED_PARTS):
                raise UnsupportedContentError(part)


def _image_block(media_type: str, data: bytes) -> ImageBlock:
    return ImageBlock(
        source=ImageSource(
            media_type=media_type,
            data=base64.b64encode(data).decode("ascii"),
        )
    )


def _split_legacy_prompt(
    messages: list[WireMessage],
) -> tuple[str, list[WireMessage]] | None:
    """Split a lone legacy-formatted prompt into user/assistant turns.

    Returns (system_prefix, messages), or None when the conversation is not a
    single text block containing a Human marker.
    """
    if len(messages) != 1 or len(messages[0].content) != 1:
        return None
    block = messages[0].content[0]
    if not isinstance(block, TextBlock) or HUMAN_MARKER not in block.text:
        return None

    prefix, rest = block.text.split(HUMAN_MARKER, 1)
    rest = rest.removeprefix(HUMAN_MARKER)
    user_text, found, assistant_text = rest.partition(ASSISTANT_MARKER)

    result = [WireMessage(role="user", content=[TextBlock(text=user_text.strip())])]
    if found:
        assistant_text = assistant_text.removeprefix(ASSISTANT_MARKER).strip()
        if assistant_text:
            result.append(
                WireMessage(role="assistant", content=[TextBlock(text=assistant_text)])
            )
    return prefix.strip(), result
