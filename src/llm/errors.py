# src/llm/errors.py - v1
"""Exception hierarchy for request translation, transport and batch embedding."""

from __future__ import annotations


class BedrockLLMError(Exception):
    """Base class for every error raised by bedrockllm."""


class RequestValidationError(BedrockLLMError, ValueError):
    """Input conversation has a shape the selected protocol cannot express."""


class UnsupportedRoleError(RequestValidationError):
    """Message role has no counterpart in the wire protocol."""

    def __init__(self, role: object) -> None:
        self.role = role
        value = getattr(role, "value", role)
        super().__init__(f"unsupported role: {value}")


class UnsupportedContentError(RequestValidationError):
    """Content part kind has no counterpart in the wire protocol."""

    def __init__(self, part: object) -> None:
        self.part_type = type(part).__name__
        super().__init__(f"unsupported content type: {self.part_type}")


class TranslationError(BedrockLLMError):
    """Request serialization or response deserialization failed."""

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        super().__init__(f"{stage}: {message}")


class TransportError(BedrockLLMError):
    """The invocation port or the image-fetch port failed."""

    def __init__(
        self,
        message: str,
        model_id: str | None = None,
        url: str | None = None,
    ) -> None:
        self.model_id = model_id
        self.url = url
        super().__init__(message)


class BatchEmbeddingError(BedrockLLMError):
    """First failure that aborted a batch embedding call."""

    def __init__(self, index: int, error: BaseException) -> None:
        self.index = index
        self.error = error
        super().__init__(f"failed to create embedding for text {index}: {error}")


class UnsupportedModelError(BedrockLLMError, ValueError):
    """Model identifier is not registered with any protocol."""

    def __init__(self, model_id: str, available: list[str] | None = None) -> None:
        self.model_id = model_id
        message = f"model `{model_id}` not supported"
        if available:
            message += f". Available: {', '.join(sorted(available))}"
        super().__init__(message)
