# src/tracking/call_logger.py - v2
"""LLM call logging - records every generate_content call.

CallRecorder is a CallbackHandler accumulating LLMCallRecord entries for
post-run analysis (token usage, latency, failures).
"""

from __future__ import annotations

import contextvars
import json
import logging
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path

from bedrockllm.llm.models import LLMResponse, MessageContent
from bedrockllm.tracking.callbacks import CallbackHandler
from bedrockllm.tracking.models import LLMCallRecord

logger = logging.getLogger(__name__)

# Start time of the generation running in the current task.
_started_at: contextvars.ContextVar[float | None] = contextvars.ContextVar(
    "call_started_at", default=None
)


class CallRecorder(CallbackHandler):
    """Accumulates LLM call records."""

    def __init__(self) -> None:
        self._records: list[LLMCallRecord] = []

    def on_generate_start(self, model_id: str, messages: list[MessageContent]) -> None:
        _started_at.set(time.monotonic())

    def on_generate_end(self, model_id: str, response: LLMResponse) -> None:
        meta = response.metadata
        input_tokens = int(meta.get("usage.input_tokens", 0) or 0)
        output_tokens = int(meta.get("usage.output_tokens", 0) or 0)
        self._append(
            LLMCallRecord(
                call_id=str(uuid.uuid4()),
                timestamp=datetime.now(timezone.utc),
                model=model_id,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens,
                latency_ms=self._elapsed_ms(),
                status="success",
                stop_reason=response.stop_reason,
            )
        )

    def on_error(self, model_id: str, error: BaseException) -> None:
        self._append(
            LLMCallRecord(
                call_id=str(uuid.uuid4()),
                timestamp=datetime.now(timezone.utc),
                model=model_id,
                latency_ms=self._elapsed_ms(),
                status="failed",
                error=f"{type(error).__name__}: {error}",
            )
        )

    @property
    def records(self) -> list[LLMCallRecord]:
        """All recorded calls."""
        return list(self._records)

    @property
    def total_tokens(self) -> int:
        """Total tokens consumed across all calls."""
        return sum(r.total_tokens for r in self._records)

    @property
    def total_calls(self) -> int:
        return len(self._records)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self._records if r.status == "failed")

    def save(self, path: Path) -> None:
        """Save all records to a JSON Lines file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w") as f:
            for record in self._records:
                f.write(json.dumps(record.model_dump(), default=str) + "\n")

    def _append(self, record: LLMCallRecord) -> None:
        self._records.append(record)
        logger.debug(
            "Recorded call: model=%s, status=%s, tokens=%d, latency=%dms",
            record.model, record.status, record.total_tokens, record.latency_ms,
        )

    @staticmethod
    def _elapsed_ms() -> int:
        started = _started_at.get()
        if started is None:
            return 0
        return int((time.monotonic() - started) * 1000)
