# src/llm/invoker.py - v1
"""Invocation port: send a model id and request bytes, get response bytes.

BedrockRuntimeInvoker wraps the boto3 ``bedrock-runtime`` client. boto3 is
synchronous, so each call runs in a worker thread to let the embedding
dispatcher keep several invocations in flight.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

from bedrockllm.llm.errors import BedrockLLMError, TransportError

logger = logging.getLogger(__name__)

_CONTENT_TYPE = "application/json"


async def invoke_model(invoker: BaseInvoker, model_id: str, body: bytes) -> bytes:
    """Call invoker, turning any foreign failure into TransportError."""
    try:
        return await invoker.invoke(model_id, body)
    except BedrockLLMError:
        raise
    except Exception as e:
        raise TransportError(f"failed to invoke model: {e}", model_id=model_id) from e


class BaseInvoker(ABC):
    """Capability to invoke a hosted model with a serialized request."""

    @abstractmethod
    async def invoke(self, model_id: str, body: bytes) -> bytes:
        """Send body to model_id and return the raw response body.

        Raises:
            TransportError: If the service call fails.
        """


class BedrockRuntimeInvoker(BaseInvoker):
    """Invoke models through the AWS Bedrock runtime API."""

    def __init__(
        self,
        region: str | None = None,
        profile: str | None = None,
        endpoint_url: str | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize the invoker.

        Args:
            region: AWS region (optional, uses boto3 default if not set).
            profile: Named AWS profile (optional).
            endpoint_url: Custom runtime endpoint (VPC endpoint, local stub).
            client: Pre-built ``bedrock-runtime`` client; skips boto3 setup.
        """
        self._region = region
        self._profile = profile
        self._endpoint_url = endpoint_url
        self.__client = client

    @property
    def _client(self):
        """Lazy-init the bedrock-runtime client (only on first call)."""
        if self.__client is None:
            try:
                import boto3
            except ImportError as e:
                raise ImportError(
                    "boto3 package required for Bedrock runtime: pip install boto3"
                ) from e

            session = boto3.Session(profile_name=self._profile or None)
            kwargs: dict[str, Any] = {}
            if self._region:
                kwargs["region_name"] = self._region
            if self._endpoint_url:
                kwargs["endpoint_url"] = self._endpoint_url
            self.__client = session.client("bedrock-runtime", **kwargs)
        return self.__client

    async def invoke(self, model_id: str, body: bytes) -> bytes:
        """Call InvokeModel and read the full response body."""
        client = self._client
        try:
            return await asyncio.to_thread(self._invoke_sync, client, model_id, body)
        except Exception as e:
            logger.debug("InvokeModel failed: model=%s, error=%s", model_id, e)
            raise TransportError(
                f"failed to invoke model: {e}", model_id=model_id
            ) from e

    @staticmethod
    def _invoke_sync(client: Any, model_id: str, body: bytes) -> bytes:
        response = client.invoke_model(
            modelId=model_id,
            body=body,
            contentType=_CONTENT_TYPE,
            accept=_CONTENT_TYPE,
        )
        return response["body"].read()
