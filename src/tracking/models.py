# src/tracking/models.py - v2
"""Tracking domain models: LLMCallRecord."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class LLMCallRecord(BaseModel):
    """Individual generate_content call log entry."""

    call_id: str
    timestamp: datetime
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    latency_ms: int
    status: Literal["success", "failed"]
    stop_reason: str | None = None
    error: str | None = None
