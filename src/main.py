# src/main.py - v2
"""CLI entry point - generate, embed and models commands.

Usage:
    bedrockllm generate <prompt> [options]
    bedrockllm embed <text>... [options]
    bedrockllm models
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from pydantic import ValidationError

from bedrockllm.config.settings import ConfigurationError, Settings, load_settings
from bedrockllm.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = load_settings(**_settings_overrides(args))
    except (ConfigurationError, ValidationError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="bedrockllm",
        description=f"bedrockllm v{__version__} - Amazon Bedrock chat and embeddings",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- generate ---
    p_generate = subparsers.add_parser(
        "generate", help="Generate a reply to a prompt",
    )
    p_generate.add_argument("prompt", help="Prompt text")
    p_generate.add_argument(
        "-m", "--model", default=None,
        help="Model id (default: LLM_MODEL setting)",
    )
    p_generate.add_argument(
        "-s", "--system", default=None,
        help="System prompt, sent as a leading system message",
    )
    p_generate.add_argument("--max-tokens", type=int, default=0)
    p_generate.add_argument("--temperature", type=float, default=0.0)
    p_generate.set_defaults(func=_cmd_generate)

    # --- embed ---
    p_embed = subparsers.add_parser(
        "embed", help="Embed one or more texts, print JSON vectors",
    )
    p_embed.add_argument("texts", nargs="+", help="Texts to embed")
    p_embed.add_argument(
        "-w", "--workers", type=int, default=None,
        help="Concurrent invocations (default: EMBEDDING_NUM_WORKERS setting)",
    )
    p_embed.add_argument(
        "--timeout", type=float, default=None,
        help="Overall deadline in seconds",
    )
    p_embed.set_defaults(func=_cmd_embed)

    # --- models ---
    p_models = subparsers.add_parser(
        "models", help="List the model ids with a registered wire protocol",
    )
    p_models.set_defaults(func=_cmd_models)

    return parser


def _settings_overrides(args: argparse.Namespace) -> dict[str, object]:
    overrides: dict[str, object] = {}
    if getattr(args, "workers", None) is not None:
        overrides["embedding_num_workers"] = args.workers
    return overrides


async def _cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    """Execute a single generation."""
    from bedrockllm.llm.client import BedrockLLM
    from bedrockllm.llm.models import CallOptions, ChatMessageType, text_parts

    llm = BedrockLLM(settings)
    messages = []
    if args.system:
        messages.append(text_parts(ChatMessageType.SYSTEM, args.system))
    messages.append(text_parts(ChatMessageType.HUMAN, args.prompt))

    options = CallOptions(
        model=args.model,
        max_tokens=args.max_tokens,
        temperature=args.temperature,
    )
    response = await llm.generate_content(messages, options)
    print(response.content)
    logger.debug("stop_reason=%s metadata=%s", response.stop_reason, response.metadata)
    return 0


async def _cmd_embed(args: argparse.Namespace, settings: Settings) -> int:
    """Execute a batch embedding."""
    from bedrockllm.llm.client import BedrockLLM

    llm = BedrockLLM(settings)
    vectors = await llm.create_embeddings(args.texts, timeout=args.timeout)
    for text, vector in zip(args.texts, vectors):
        print(json.dumps({"text": text, "embedding": vector.tolist()}))
    return 0


async def _cmd_models(args: argparse.Namespace, settings: Settings) -> int:
    """Print the generation model ids, marking the configured default."""
    from bedrockllm.llm.protocols.registry import registered_models

    for model_id in registered_models():
        marker = " (default)" if model_id == settings.llm_model else ""
        print(f"{model_id}{marker}")
    return 0


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage; --verbose forces DEBUG."""
    from bedrockllm.logging.logger import setup_logging_from_settings

    setup_logging_from_settings(settings, level="DEBUG" if verbose else None)


if __name__ == "__main__":
    sys.exit(main())
