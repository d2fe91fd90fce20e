# src/logging/logger.py - v2
"""Logger factory with JSON and text formatters.

Records carry the call context (request_id, model_id, operation) set by
BedrockLLM, so the lines of one generate_content or create_embeddings call
can be grouped even when several calls interleave on the event loop.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from bedrockllm.logging.context import get_context

if TYPE_CHECKING:
    from bedrockllm.config.settings import Settings

ROOT_LOGGER = "bedrockllm"

# Third-party loggers that flood DEBUG output with wire-level detail.
NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "asyncio")


def _timestamp() -> datetime:
    return datetime.now(timezone.utc)


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _timestamp().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            entry["context"] = context

        data = getattr(record, "data", None)
        if data:
            entry["data"] = data

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Single-line terminal format: time, level, logger, [operation] (model) - message."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        line = (
            f"{_timestamp():%Y-%m-%d %H:%M:%S} [{record.levelname:8s}] {record.name}"
        )
        if ctx.operation:
            line += f" [{ctx.operation}]"
        if ctx.model_id:
            line += f" ({ctx.model_id})"
        line += f" - {record.getMessage()}"
        if record.exc_info and record.exc_info[1] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 5,
    quiet_libraries: bool = True,
) -> None:
    """Configure the bedrockllm logger hierarchy.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Unknown names fall
            back to INFO.
        log_format: "json" or "text".
        log_file: Optional path of a size-rotated log file, in addition to stderr.
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.
        quiet_libraries: Cap NOISY_LOGGERS at WARNING.
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    formatter: logging.Formatter = JsonFormatter() if log_format == "json" else TextFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        from bedrockllm.logging.handlers import create_rotating_handler

        handlers.append(
            create_rotating_handler(log_file, rotation=rotation, retention=retention)
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    if quiet_libraries:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging_from_settings(settings: Settings, level: str | None = None) -> None:
    """Apply the LOG_* settings; level overrides LOG_LEVEL when given."""
    setup_logging(
        level=level or settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
