"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from taxid.core.config import AppSettings, GenerationConfig


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.log_level == "INFO"
    assert settings.generation.concurrent is True


def test_generation_config_defaults():
    config = GenerationConfig()
    assert config.worker_count == 9
    assert config.queue_maxsize == 0


def test_generation_config_env_override(monkeypatch):
    monkeypatch.setenv("TAXID_GEN_WORKER_COUNT", "3")
    monkeypatch.setenv("TAXID_GEN_CONCURRENT", "false")
    settings = AppSettings()
    assert settings.generation.worker_count == 3
    assert settings.generation.concurrent is False


def test_worker_count_above_partition_limit_rejected(monkeypatch):
    monkeypatch.setenv("TAXID_GEN_WORKER_COUNT", "10")
    with pytest.raises(ValidationError):
        GenerationConfig()
