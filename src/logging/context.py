# src/logging/context.py - v2
"""Contextual logging support - attach request_id, model_id, operation to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per client call.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_model_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "model_id", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    model_id: str | None = None
    operation: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        model_id=_model_id.get(),
        operation=_operation.get(),
    )


def set_call_context(request_id: str, model_id: str, operation: str) -> None:
    """Set call-level context (called once per client call)."""
    _request_id.set(request_id)
    _model_id.set(model_id)
    _operation.set(operation)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _model_id.set(None)
    _operation.set(None)
