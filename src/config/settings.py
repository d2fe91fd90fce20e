# src/config/settings.py - v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for AWS access, model selection, generation defaults,
embedding concurrency and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bedrockllm.llm import model_ids
from bedrockllm.llm.models import GenerationDefaults


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === AWS ===
    aws_region: str = ""
    aws_profile: str = ""
    bedrock_endpoint_url: str = ""

    # === Models ===
    llm_model: str = model_ids.DEFAULT_MODEL
    embedding_model: str = model_ids.DEFAULT_EMBEDDING_MODEL

    # === Generation defaults (used when a call leaves a parameter unset) ===
    llm_max_tokens: int = 1000
    llm_temperature: float = 0.7
    llm_top_p: float = 0.9
    llm_top_k: int = 50
    llm_stop_words: str = "Human:"

    # === Embeddings ===
    embedding_num_workers: int = 10
    embedding_timeout_s: float | None = None

    # === Images ===
    image_fetch_timeout_s: float = 30.0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("embedding_num_workers", "llm_max_tokens")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator("llm_top_k")
    @classmethod
    def validate_top_k(cls, v: int) -> int:
        if v < 0:
            raise ValueError("llm_top_k must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate sampling ranges and timeouts."""
        errors: list[str] = []

        if not 0.0 <= self.llm_temperature <= 1.0:
            errors.append("LLM_TEMPERATURE must be within [0, 1]")
        if not 0.0 <= self.llm_top_p <= 1.0:
            errors.append("LLM_TOP_P must be within [0, 1]")
        if self.embedding_timeout_s is not None and self.embedding_timeout_s <= 0:
            errors.append("EMBEDDING_TIMEOUT_S must be > 0 when set")
        if self.image_fetch_timeout_s <= 0:
            errors.append("IMAGE_FETCH_TIMEOUT_S must be > 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def llm_stop_words_list(self) -> list[str]:
        """Parse comma-separated stop words."""
        return [w.strip() for w in self.llm_stop_words.split(",") if w.strip()]

    def generation_defaults(self) -> GenerationDefaults:
        """Fallback values for unset per-call generation parameters."""
        return GenerationDefaults(
            max_tokens=self.llm_max_tokens,
            temperature=self.llm_temperature,
            top_p=self.llm_top_p,
            top_k=self.llm_top_k,
            stop_words=tuple(self.llm_stop_words_list),
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-call config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
