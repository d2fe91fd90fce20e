# src/embeddings/embedder_factory.py - v2
"""Factory: instantiate the embedder serving a Bedrock embedding model id."""

from __future__ import annotations

import importlib
import logging

from bedrockllm.embeddings.base_embedder import BaseEmbedder
from bedrockllm.llm import model_ids
from bedrockllm.llm.errors import UnsupportedModelError
from bedrockllm.llm.invoker import BaseInvoker

logger = logging.getLogger(__name__)

_EMBEDDER_REGISTRY: dict[str, str] = {
    model_ids.TITAN_EMBED_TEXT_V1: "bedrockllm.embeddings.titan_embedder.TitanEmbedder",
}


def create_embedder(
    model: str,
    invoker: BaseInvoker,
    num_workers: int = 10,
) -> BaseEmbedder:
    """Instantiate the embedder for model.

    Args:
        model: Bedrock embedding model id.
        invoker: Invocation port shared by every worker.
        num_workers: Maximum concurrent invocations per batch.

    Raises:
        UnsupportedModelError: If no embedder is registered for model.
    """
    if model not in _EMBEDDER_REGISTRY:
        raise UnsupportedModelError(model, list(_EMBEDDER_REGISTRY))

    cls = _import_class(_EMBEDDER_REGISTRY[model])
    logger.debug("Creating embedder: model=%s, workers=%d", model, num_workers)
    return cls(invoker=invoker, model=model, num_workers=num_workers)


def register_embedder(model: str, class_path: str) -> None:
    """Register an embedder class for a model id."""
    _EMBEDDER_REGISTRY[model] = class_path


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
