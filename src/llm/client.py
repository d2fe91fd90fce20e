# src/llm/client.py - v1
"""Bedrock client: generation across protocol generations plus batch embeddings.

Usage:
    from bedrockllm.llm.client import BedrockLLM
    llm = BedrockLLM(load_settings(llm_model=CLAUDE_3_HAIKU))
    response = await llm.generate_content([text_parts(ChatMessageType.HUMAN, "Hi")])
"""

from __future__ import annotations

import logging
import uuid
from typing import Sequence

from bedrockllm.config.settings import Settings
from bedrockllm.embeddings.base_embedder import EmbeddingVector
from bedrockllm.embeddings.embedder_factory import create_embedder
from bedrockllm.llm.base_client import BaseLLMClient
from bedrockllm.llm.image_fetcher import BaseImageFetcher, HTTPImageFetcher
from bedrockllm.llm.invoker import BaseInvoker, BedrockRuntimeInvoker, invoke_model
from bedrockllm.llm.models import (
    CallOptions,
    ChatMessageType,
    GenerationDefaults,
    LLMResponse,
    MessageContent,
    text_parts,
)
from bedrockllm.llm.protocols.registry import create_protocol
from bedrockllm.logging.context import clear_context, set_call_context
from bedrockllm.tracking.callbacks import CallbackHandler

logger = logging.getLogger(__name__)


class BedrockLLM(BaseLLMClient):
    """LLM and embedding client for Amazon Bedrock."""

    def __init__(
        self,
        settings: Settings | None = None,
        invoker: BaseInvoker | None = None,
        image_fetcher: BaseImageFetcher | None = None,
        callbacks: CallbackHandler | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Application settings. Loaded from .env if None.
            invoker: Invocation port. Defaults to the boto3 runtime client.
            image_fetcher: Image-fetch port for ImageURLContent parts.
            callbacks: Handler notified around each generation.
        """
        settings = settings or Settings()
        self._invoker = invoker or BedrockRuntimeInvoker(
            region=settings.aws_region or None,
            profile=settings.aws_profile or None,
            endpoint_url=settings.bedrock_endpoint_url or None,
        )
        self._image_fetcher = image_fetcher or HTTPImageFetcher(
            timeout_s=settings.image_fetch_timeout_s
        )
        self._model = settings.llm_model
        self._embedding_model = settings.embedding_model
        self._num_workers = settings.embedding_num_workers
        self._embedding_timeout_s = settings.embedding_timeout_s
        self._defaults = settings.generation_defaults()
        self.callbacks = callbacks

    @property
    def model(self) -> str:
        return self._model

    @property
    def embedding_model(self) -> str:
        return self._embedding_model

    @property
    def defaults(self) -> GenerationDefaults:
        return self._defaults

    async def generate_content(
        self,
        messages: list[MessageContent],
        options: CallOptions | None = None,
    ) -> LLMResponse:
        """Translate, invoke and normalize one generation.

        The model is options.model when set, else the configured default; it
        selects the wire protocol. Unset generation parameters fall back to
        the configured defaults.

        Raises:
            UnsupportedModelError: No protocol serves the model.
            RequestValidationError: The conversation cannot be expressed.
            TranslationError: Request or response (de)serialization failed.
            TransportError: The model or image endpoint failed.
        """
        options = options or CallOptions()
        model_id = options.model or self._model
        set_call_context(uuid.uuid4().hex[:12], model_id, "generate_content")
        try:
            return await self._generate(model_id, messages, options)
        finally:
            clear_context()

    async def _generate(
        self, model_id: str, messages: list[MessageContent], options: CallOptions
    ) -> LLMResponse:
        logger.debug("generate_content called: %d messages", len(messages))
        if self.callbacks is not None:
            self.callbacks.on_generate_start(model_id, messages)
        try:
            protocol = create_protocol(
                model_id, defaults=self._defaults, image_fetcher=self._image_fetcher
            )
            body = await protocol.build_request(messages, options)
            raw = await invoke_model(self._invoker, model_id, body)
            response = protocol.parse_response(raw, model_id)
        except Exception as e:
            if self.callbacks is not None:
                self.callbacks.on_error(model_id, e)
            raise

        if self.callbacks is not None:
            self.callbacks.on_generate_end(model_id, response)
        return response

    async def call(self, prompt: str, options: CallOptions | None = None) -> str:
        """Single-prompt shortcut around generate_content."""
        response = await self.generate_content(
            [text_parts(ChatMessageType.HUMAN, prompt)], options
        )
        return response.content

    async def create_embeddings(
        self, texts: Sequence[str], timeout: float | None = None
    ) -> list[EmbeddingVector]:
        """Embed texts with the configured embedding model.

        Args:
            texts: Input texts.
            timeout: Overall deadline in seconds (settings value if None).

        Raises:
            UnsupportedModelError: No embedder serves the embedding model.
            BatchEmbeddingError: The first failed text aborted the batch.
        """
        set_call_context(uuid.uuid4().hex[:12], self._embedding_model, "create_embeddings")
        try:
            logger.debug("create_embeddings called: %d texts", len(texts))
            embedder = create_embedder(
                self._embedding_model, self._invoker, num_workers=self._num_workers
            )
            if timeout is None:
                timeout = self._embedding_timeout_s
            return await embedder.embed_texts(texts, timeout=timeout)
        finally:
            clear_context()
