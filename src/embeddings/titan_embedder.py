# src/embeddings/titan_embedder.py - v1
"""Amazon Titan text embedding adapter.

One InvokeModel call per text ({"inputText": ...} -> {"embedding": [...]});
batches go through EmbeddingBatchDispatcher.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from pydantic import ValidationError

from bedrockllm.embeddings.base_embedder import BaseEmbedder, EmbeddingVector
from bedrockllm.embeddings.dispatcher import EmbeddingBatchDispatcher
from bedrockllm.llm import model_ids
from bedrockllm.llm.errors import TranslationError
from bedrockllm.llm.invoker import BaseInvoker, invoke_model
from bedrockllm.llm.wire import TitanEmbeddingRequest, TitanEmbeddingResponse, to_json_bytes

logger = logging.getLogger(__name__)


class TitanEmbedder(BaseEmbedder):
    """Embeddings via Amazon Titan on Bedrock."""

    def __init__(
        self,
        invoker: BaseInvoker,
        model: str = model_ids.TITAN_EMBED_TEXT_V1,
        num_workers: int = 10,
    ) -> None:
        self._invoker = invoker
        self._model = model
        self._dispatcher = EmbeddingBatchDispatcher(self.embed_query, num_workers=num_workers)

    async def embed_texts(
        self, texts: Sequence[str], timeout: float | None = None
    ) -> list[EmbeddingVector]:
        """Embed texts concurrently; fails as a whole on the first error."""
        return await self._dispatcher.run(texts, timeout=timeout)

    async def embed_query(self, query: str) -> EmbeddingVector:
        """Embed one text with a single InvokeModel call."""
        try:
            body = to_json_bytes(TitanEmbeddingRequest(input_text=query))
        except (TypeError, ValueError) as e:
            raise TranslationError("serialize_request", f"failed to marshal payload: {e}") from e

        raw = await invoke_model(self._invoker, self._model, body)

        try:
            resp = TitanEmbeddingResponse.model_validate_json(raw)
        except ValidationError as e:
            raise TranslationError("parse_response", f"failed to unmarshal response: {e}") from e

        logger.debug(
            "Embedding created: dims=%d, token_count=%d",
            len(resp.embedding), resp.input_text_token_count,
        )
        return np.asarray(resp.embedding, dtype=np.float32)

    @property
    def num_workers(self) -> int:
        return self._dispatcher.num_workers

    @property
    def model_name(self) -> str:
        return self._model
