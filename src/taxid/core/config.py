"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class GenerationConfig(BaseSettings):
    """Bulk generation defaults."""

    model_config = {"env_prefix": "TAXID_GEN_"}

    concurrent: bool = True
    worker_count: int = Field(default=9, ge=1, le=9)  # partitioned by leading digit
    queue_maxsize: int = Field(default=0, ge=0)  # 0 = unbounded


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "TAXID_"}

    environment: Literal["dev", "test", "prod"] = "dev"
    log_level: str = "INFO"

    generation: GenerationConfig = Field(default_factory=GenerationConfig)
