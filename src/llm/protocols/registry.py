# src/llm/protocols/registry.py - v1
"""Registry: model id -> protocol tag -> ProtocolStrategy class.

Called by BedrockLLM once per generate_content call. Adding a protocol
generation means registering a strategy, not editing the client.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from bedrockllm.llm import model_ids
from bedrockllm.llm.errors import BedrockLLMError, UnsupportedModelError
from bedrockllm.llm.protocols.base import ProtocolStrategy

logger = logging.getLogger(__name__)

TEXT_COMPLETION = "text_completion"
MESSAGES = "messages"

# Protocol tag -> strategy class path (lazy import).
_PROTOCOL_REGISTRY: dict[str, str] = {
    TEXT_COMPLETION: "bedrockllm.llm.protocols.text_completion.TextCompletionProtocol",
    MESSAGES: "bedrockllm.llm.protocols.messages.MessagesProtocol",
}

# Model id -> protocol tag.
_MODEL_PROTOCOLS: dict[str, str] = {
    model_ids.CLAUDE_V2: TEXT_COMPLETION,
    model_ids.CLAUDE_V2_1: TEXT_COMPLETION,
    model_ids.CLAUDE_INSTANT: TEXT_COMPLETION,
    model_ids.CLAUDE_3_SONNET: MESSAGES,
    model_ids.CLAUDE_3_HAIKU: MESSAGES,
    model_ids.CLAUDE_3_OPUS: MESSAGES,
}


class UnsupportedProtocolError(BedrockLLMError, ValueError):
    """Raised when a protocol tag is not registered."""


def protocol_for_model(model_id: str) -> str:
    """Return the protocol tag serving model_id.

    Raises:
        UnsupportedModelError: If the model is not registered.
    """
    try:
        return _MODEL_PROTOCOLS[model_id]
    except KeyError:
        raise UnsupportedModelError(model_id, list(_MODEL_PROTOCOLS)) from None


def create_protocol(model_id: str, **kwargs: Any) -> ProtocolStrategy:
    """Instantiate the strategy for model_id.

    Args:
        model_id: Bedrock model identifier.
        **kwargs: Strategy constructor arguments (defaults, image_fetcher).

    Returns:
        Configured ProtocolStrategy instance.
    """
    tag = protocol_for_model(model_id)
    if tag not in _PROTOCOL_REGISTRY:
        raise UnsupportedProtocolError(
            f"Unsupported protocol: {tag!r}. "
            f"Available: {', '.join(sorted(_PROTOCOL_REGISTRY))}"
        )
    strategy_cls = _import_class(_PROTOCOL_REGISTRY[tag])
    logger.debug("Selected protocol: model=%s, protocol=%s", model_id, tag)
    return strategy_cls(**kwargs)


def register_protocol(tag: str, class_path: str) -> None:
    """Register a protocol strategy.

    Args:
        tag: Protocol identifier.
        class_path: Fully qualified class path implementing ProtocolStrategy.
    """
    _PROTOCOL_REGISTRY[tag] = class_path
    logger.info("Registered protocol: %s -> %s", tag, class_path)


def register_model(model_id: str, tag: str) -> None:
    """Route model_id to an already registered protocol."""
    if tag not in _PROTOCOL_REGISTRY:
        raise UnsupportedProtocolError(f"Unknown protocol: {tag!r}")
    _MODEL_PROTOCOLS[model_id] = tag


def registered_models() -> list[str]:
    return sorted(_MODEL_PROTOCOLS)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
