# tests/unit/llm/test_invoker.py - v1
"""Tests for llm/invoker.py - invocation port and boto3 runtime adapter."""

from __future__ import annotations

import io
from unittest.mock import MagicMock

import pytest

from bedrockllm.llm.errors import RequestValidationError, TransportError
from bedrockllm.llm.invoker import BaseInvoker, BedrockRuntimeInvoker, invoke_model
from tests.fakes import FakeInvoker


class TestBaseInvoker:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseInvoker()  # type: ignore[abstract]


class TestInvokeModel:
    @pytest.mark.asyncio
    async def test_passes_through(self):
        invoker = FakeInvoker(lambda model_id, req: {"echo": req["x"]})
        raw = await invoke_model(invoker, "m", b'{"x": 1}')
        assert raw == b'{"echo": 1}'
        assert invoker.calls == [("m", {"x": 1})]

    @pytest.mark.asyncio
    async def test_wraps_foreign_errors(self):
        def boom(model_id, req):
            raise ConnectionError("reset by peer")

        with pytest.raises(TransportError, match="failed to invoke model: reset by peer") as exc_info:
            await invoke_model(FakeInvoker(boom), "m", b"{}")
        assert exc_info.value.model_id == "m"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_keeps_library_errors(self):
        def invalid(model_id, req):
            raise RequestValidationError("bad")

        with pytest.raises(RequestValidationError):
            await invoke_model(FakeInvoker(invalid), "m", b"{}")


class TestBedrockRuntimeInvoker:
    @pytest.mark.asyncio
    async def test_invoke(self):
        client = MagicMock()
        client.invoke_model.return_value = {"body": io.BytesIO(b'{"completion": "hi"}')}
        invoker = BedrockRuntimeInvoker(client=client)

        raw = await invoker.invoke("anthropic.claude-v2", b'{"prompt": "x"}')

        assert raw == b'{"completion": "hi"}'
        client.invoke_model.assert_called_once_with(
            modelId="anthropic.claude-v2",
            body=b'{"prompt": "x"}',
            contentType="application/json",
            accept="application/json",
        )

    @pytest.mark.asyncio
    async def test_client_error_wrapped(self):
        client = MagicMock()
        client.invoke_model.side_effect = RuntimeError("AccessDeniedException")
        invoker = BedrockRuntimeInvoker(client=client)

        with pytest.raises(TransportError, match="AccessDeniedException") as exc_info:
            await invoker.invoke("anthropic.claude-v2", b"{}")
        assert exc_info.value.model_id == "anthropic.claude-v2"

    def test_lazy_client_uses_session(self, monkeypatch):
        import boto3

        session = MagicMock()
        monkeypatch.setattr(boto3, "Session", MagicMock(return_value=session))
        invoker = BedrockRuntimeInvoker(
            region="us-east-1", profile="dev", endpoint_url="http://localhost:4566"
        )

        client = invoker._client

        boto3.Session.assert_called_once_with(profile_name="dev")
        session.client.assert_called_once_with(
            "bedrock-runtime", region_name="us-east-1", endpoint_url="http://localhost:4566"
        )
        assert client is session.client.return_value
        assert invoker._client is client
