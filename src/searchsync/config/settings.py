"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (SEARCHSYNC_ prefix)
  3. Default values
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class RetryPolicy(BaseModel):
    """Bounded linear backoff for transient transport failures."""

    max_attempts: int = Field(default=3, ge=1, description="Total attempts, including the first one")
    base_delay: float = Field(default=0.5, ge=0, description="Backoff step in seconds")

    def delay_before(self, attempt: int) -> float:
        """Seconds to wait before ``attempt`` (2 or later).

        Grows linearly with the attempt number; the random part keeps
        concurrent retries from firing together.
        """
        return self.base_delay * attempt + random.uniform(0, self.base_delay)


class HttpSettings(BaseModel):
    """HTTP client configuration."""

    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the SEARCHSYNC_ prefix.
    Nested settings use double underscores: SEARCHSYNC_RETRY__MAX_ATTEMPTS=5

    Example:
        SEARCHSYNC_CONNECTION__URL=http://search.internal:9200
        SEARCHSYNC_CONNECTION__PREFIX=staging
        SEARCHSYNC_HTTP__TIMEOUT=10
    """

    model_config = {
        "env_prefix": "SEARCHSYNC_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    # Raw connection options; resolved with searchsync.config.connection.merge_options
    connection: dict[str, Any] = Field(default_factory=dict, description="Connection options (url, host, port, ...)")

    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    http: HttpSettings = Field(default_factory=HttpSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are passed as init arguments, so they
        override both defaults and environment variables.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
