# tests/conftest.py - v2
"""Shared test fixtures for all unit and integration tests.

Test doubles live in tests/fakes.py. No network access: all I/O is faked.
"""

from __future__ import annotations

import pytest

from bedrockllm.config.settings import Settings
from bedrockllm.llm.models import GenerationDefaults
from tests.fakes import PNG_BYTES, FakeImageFetcher


@pytest.fixture
def defaults() -> GenerationDefaults:
    """Instance defaults matching the library defaults."""
    return GenerationDefaults()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from .env files."""
    return Settings(_env_file=None)


@pytest.fixture
def image_fetcher() -> FakeImageFetcher:
    """Fetcher knowing a single PNG URL."""
    return FakeImageFetcher({"https://img.example/cat.png": (PNG_BYTES, "image/png")})
