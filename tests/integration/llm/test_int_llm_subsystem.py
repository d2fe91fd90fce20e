# tests/integration/llm/test_int_llm_subsystem.py - v2
"""Integration tests for the LLM subsystem.

Covers: llm/client.py, llm/protocols/*, llm/invoker.py, embeddings/*,
tracking/call_logger.py, logging/logger.py
Runs against a scripted invocation port; no AWS credentials required.
"""
from __future__ import annotations

import asyncio
import base64
import json
import logging

import pytest

from bedrockllm.config.settings import Settings
from bedrockllm.llm import model_ids
from bedrockllm.llm.client import BedrockLLM
from bedrockllm.llm.errors import BatchEmbeddingError, TransportError, UnsupportedRoleError
from bedrockllm.llm.models import (
    BinaryContent,
    CallOptions,
    ChatMessageType,
    ImageURLContent,
    MessageContent,
    TextContent,
    text_parts,
)
from bedrockllm.logging.logger import ROOT_LOGGER, setup_logging
from bedrockllm.tracking.call_logger import CallRecorder
from tests.fakes import PNG_BYTES, FakeImageFetcher, FakeInvoker, messages_response, titan_response


def _bedrock_double(model_id: str, request: dict):
    """Answer like Bedrock would, per protocol."""
    if model_id == model_ids.TITAN_EMBED_TEXT_V1:
        text = request["inputText"]
        return titan_response([float(len(text)), 1.0], token_count=len(text.split()))
    if "anthropic_version" in request:
        last = request["messages"][-1]["content"][-1]
        return messages_response(f"saw {last['type']}", input_tokens=20, output_tokens=4)
    return {"completion": " ok", "stop_reason": "stop_sequence"}


@pytest.fixture
def recorder() -> CallRecorder:
    return CallRecorder()


@pytest.fixture
def invoker() -> FakeInvoker:
    return FakeInvoker(_bedrock_double)


@pytest.fixture
def llm(invoker, image_fetcher, recorder) -> BedrockLLM:
    return BedrockLLM(
        Settings(_env_file=None, embedding_num_workers=3),
        invoker=invoker,
        image_fetcher=image_fetcher,
        callbacks=recorder,
    )


class TestGeneration:
    @pytest.mark.asyncio
    async def test_both_protocol_generations(self, llm, recorder):
        legacy = await llm.generate_content([text_parts(ChatMessageType.HUMAN, "Hi")])
        modern = await llm.generate_content(
            [text_parts(ChatMessageType.HUMAN, "Hi")],
            CallOptions(model=model_ids.CLAUDE_3_HAIKU),
        )
        assert legacy.content == " ok"
        assert modern.content == "saw text"
        assert modern.metadata["usage.input_tokens"] == 20
        assert recorder.total_calls == 2
        assert recorder.total_tokens == 24

    @pytest.mark.asyncio
    async def test_multimodal_conversation(self, llm, invoker, image_fetcher):
        messages = [
            text_parts(ChatMessageType.SYSTEM, "Describe images."),
            MessageContent(
                role=ChatMessageType.HUMAN,
                parts=[
                    TextContent(text="Compare"),
                    BinaryContent(mime_type="image/png", data=PNG_BYTES),
                    ImageURLContent(url="https://img.example/cat.png"),
                ],
            ),
        ]
        resp = await llm.generate_content(messages, CallOptions(model=model_ids.CLAUDE_3_OPUS))

        assert resp.content == "saw image"
        _, request = invoker.calls[-1]
        assert request["system"] == "Describe images."
        blocks = request["messages"][0]["content"]
        assert [b["type"] for b in blocks] == ["text", "image", "image"]
        assert base64.b64decode(blocks[2]["source"]["data"]) == PNG_BYTES
        assert image_fetcher.fetched == ["https://img.example/cat.png"]

    @pytest.mark.asyncio
    async def test_rejected_conversation_recorded(self, llm, invoker, recorder):
        with pytest.raises(UnsupportedRoleError):
            await llm.generate_content(
                [text_parts(ChatMessageType.FUNCTION, "{}")],
                CallOptions(model=model_ids.CLAUDE_3_SONNET),
            )
        assert recorder.failure_count == 1
        assert invoker.calls == []

    @pytest.mark.asyncio
    async def test_unreachable_image(self, recorder):
        llm = BedrockLLM(
            Settings(_env_file=None),
            invoker=FakeInvoker(_bedrock_double),
            image_fetcher=FakeImageFetcher(),
            callbacks=recorder,
        )
        msg = MessageContent(
            role=ChatMessageType.HUMAN, parts=[ImageURLContent(url="https://x/gone.png")]
        )
        with pytest.raises(TransportError, match="404"):
            await llm.generate_content([msg], CallOptions(model=model_ids.CLAUDE_3_HAIKU))
        assert recorder.records[-1].status == "failed"


class TestEmbeddings:
    @pytest.mark.asyncio
    async def test_batch(self, llm):
        texts = [f"text {'x' * i}" for i in range(20)]
        vectors = await llm.create_embeddings(texts)
        assert [int(v[0]) for v in vectors] == [len(t) for t in texts]

    @pytest.mark.asyncio
    async def test_concurrent_generation_and_embedding(self, llm):
        resp, vectors = await asyncio.gather(
            llm.generate_content([text_parts(ChatMessageType.HUMAN, "Hi")]),
            llm.create_embeddings(["a", "bb"]),
        )
        assert resp.content == " ok"
        assert len(vectors) == 2

    @pytest.mark.asyncio
    async def test_slow_batch_times_out(self, image_fetcher):
        async def slow(model_id, request):
            await asyncio.sleep(1.0)
            return titan_response([0.0])

        llm = BedrockLLM(
            Settings(_env_file=None, embedding_timeout_s=0.05),
            invoker=FakeInvoker(slow),
            image_fetcher=image_fetcher,
        )
        with pytest.raises(BatchEmbeddingError):
            await llm.create_embeddings(["a", "b", "c"])


class TestLoggingIntegration:
    def teardown_method(self):
        root = logging.getLogger(ROOT_LOGGER)
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()

    @pytest.mark.asyncio
    async def test_json_log_carries_call_context(self, llm, tmp_path):
        log_file = tmp_path / "bedrockllm.log"
        setup_logging(level="DEBUG", log_format="json", log_file=str(log_file))

        await llm.generate_content([text_parts(ChatMessageType.HUMAN, "Hi")])

        for handler in logging.getLogger(ROOT_LOGGER).handlers:
            handler.flush()
        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        client_entries = [e for e in entries if e["logger"] == "bedrockllm.llm.client"]
        assert client_entries
        assert client_entries[0]["context"]["operation"] == "generate_content"
        assert client_entries[0]["context"]["model_id"] == model_ids.CLAUDE_INSTANT
