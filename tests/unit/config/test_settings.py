# tests/unit/config/test_settings.py - v2
"""Tests for config/settings.py - typed Settings and validation rules."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from bedrockllm.config.settings import ConfigurationError, Settings, load_settings
from bedrockllm.llm import model_ids


class TestSettingsDefaults:
    def test_default_models(self):
        s = Settings(_env_file=None)
        assert s.llm_model == model_ids.CLAUDE_INSTANT
        assert s.embedding_model == model_ids.TITAN_EMBED_TEXT_V1

    def test_default_generation(self):
        s = Settings(_env_file=None)
        assert s.llm_max_tokens == 1000
        assert s.llm_temperature == 0.7
        assert s.llm_top_p == 0.9
        assert s.llm_top_k == 50
        assert s.llm_stop_words_list == ["Human:"]

    def test_default_embeddings(self):
        s = Settings(_env_file=None)
        assert s.embedding_num_workers == 10
        assert s.embedding_timeout_s is None

    def test_default_logging(self):
        s = Settings(_env_file=None)
        assert s.log_level == "INFO"
        assert s.log_format == "text"
        assert s.log_file is None


class TestSettingsValidation:
    def test_temperature_out_of_range(self):
        with pytest.raises(ConfigurationError, match="LLM_TEMPERATURE"):
            Settings(_env_file=None, llm_temperature=1.5)

    def test_top_p_out_of_range(self):
        with pytest.raises(ConfigurationError, match="LLM_TOP_P"):
            Settings(_env_file=None, llm_top_p=-0.1)

    def test_errors_are_joined(self):
        with pytest.raises(ConfigurationError, match="LLM_TEMPERATURE.*; LLM_TOP_P"):
            Settings(_env_file=None, llm_temperature=2.0, llm_top_p=2.0)

    def test_embedding_timeout_must_be_positive(self):
        with pytest.raises(ConfigurationError, match="EMBEDDING_TIMEOUT_S"):
            Settings(_env_file=None, embedding_timeout_s=0)

    def test_image_timeout_must_be_positive(self):
        with pytest.raises(ConfigurationError, match="IMAGE_FETCH_TIMEOUT_S"):
            Settings(_env_file=None, image_fetch_timeout_s=0)

    def test_zero_workers(self):
        with pytest.raises(ValidationError, match="must be >= 1"):
            Settings(_env_file=None, embedding_num_workers=0)

    def test_negative_top_k(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, llm_top_k=-1)

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="TRACE")


class TestSettingsHelpers:
    def test_stop_words_list(self):
        s = Settings(_env_file=None, llm_stop_words=" Human: , END ,, ")
        assert s.llm_stop_words_list == ["Human:", "END"]

    def test_empty_stop_words(self):
        s = Settings(_env_file=None, llm_stop_words="")
        assert s.generation_defaults().stop_words == ()

    def test_generation_defaults(self):
        s = Settings(_env_file=None, llm_max_tokens=42, llm_top_k=0)
        defaults = s.generation_defaults()
        assert defaults.max_tokens == 42
        assert defaults.top_k == 0

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", model_ids.CLAUDE_3_HAIKU)
        monkeypatch.setenv("EMBEDDING_NUM_WORKERS", "4")
        s = Settings(_env_file=None)
        assert s.llm_model == model_ids.CLAUDE_3_HAIKU
        assert s.embedding_num_workers == 4


class TestLoadSettings:
    def test_overrides(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        s = load_settings(aws_region="eu-west-1", embedding_num_workers=3)
        assert s.aws_region == "eu-west-1"
        assert s.embedding_num_workers == 3

    def test_reads_env_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("LLM_TOP_K=7\nAWS_PROFILE=dev\n")
        s = load_settings()
        assert s.llm_top_k == 7
        assert s.aws_profile == "dev"
