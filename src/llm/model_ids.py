# src/llm/model_ids.py - v1
"""Bedrock model identifiers known to this library.

Reference: https://docs.aws.amazon.com/bedrock/latest/userguide/model-ids.html
"""

from __future__ import annotations

TITAN_EMBED_TEXT_V1 = "amazon.titan-embed-text-v1"

CLAUDE_V2 = "anthropic.claude-v2"
CLAUDE_V2_1 = "anthropic.claude-v2:1"
CLAUDE_INSTANT = "anthropic.claude-instant-v1"

CLAUDE_3_SONNET = "anthropic.claude-3-sonnet-20240229-v1:0"
CLAUDE_3_HAIKU = "anthropic.claude-3-haiku-20240307-v1:0"
CLAUDE_3_OPUS = "anthropic.claude-3-opus-20240229-v1:0"

DEFAULT_MODEL = CLAUDE_INSTANT
DEFAULT_EMBEDDING_MODEL = TITAN_EMBED_TEXT_V1
