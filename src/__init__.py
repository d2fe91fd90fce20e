"""bedrockllm - Amazon Bedrock chat generation and batch embeddings."""

from bedrockllm.version import __version__

__all__ = ["__version__"]
