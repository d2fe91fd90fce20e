# tests/unit/tracking/test_unit_call_logger.py - v2
"""Tests for tracking/call_logger.py."""

from __future__ import annotations

import json

from bedrockllm.llm.models import LLMResponse
from bedrockllm.tracking.call_logger import CallRecorder


def _response(input_tokens: int = 100, output_tokens: int = 50) -> LLMResponse:
    return LLMResponse(
        content="test",
        stop_reason="end_turn",
        metadata={"usage.input_tokens": input_tokens, "usage.output_tokens": output_tokens},
    )


class TestCallRecorder:
    def test_record_success(self):
        recorder = CallRecorder()
        recorder.on_generate_start("anthropic.claude-3-haiku-20240307-v1:0", [])
        recorder.on_generate_end("anthropic.claude-3-haiku-20240307-v1:0", _response())
        record = recorder.records[0]
        assert record.status == "success"
        assert record.total_tokens == 150
        assert record.stop_reason == "end_turn"
        assert record.latency_ms >= 0

    def test_record_without_usage(self):
        recorder = CallRecorder()
        recorder.on_generate_end("anthropic.claude-v2", LLMResponse(content="x"))
        assert recorder.records[0].total_tokens == 0

    def test_record_error(self):
        recorder = CallRecorder()
        recorder.on_generate_start("m", [])
        recorder.on_error("m", RuntimeError("throttled"))
        record = recorder.records[0]
        assert record.status == "failed"
        assert record.error == "RuntimeError: throttled"
        assert recorder.failure_count == 1

    def test_totals(self):
        recorder = CallRecorder()
        recorder.on_generate_end("m", _response())
        recorder.on_generate_end("m", _response(10, 5))
        assert recorder.total_calls == 2
        assert recorder.total_tokens == 165

    def test_records_is_copy(self):
        recorder = CallRecorder()
        recorder.on_generate_end("m", _response())
        recorder.records.clear()
        assert recorder.total_calls == 1

    def test_save(self, tmp_path):
        recorder = CallRecorder()
        recorder.on_generate_end("m", _response())
        out = tmp_path / "logs" / "calls.jsonl"
        recorder.save(out)
        lines = out.read_text().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["total_tokens"] == 150
