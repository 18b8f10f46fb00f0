"""Configuration and settings management using pydantic-settings."""
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

USAGE_BACKENDS = ("memory", "file", "redis")


class Settings(BaseSettings):
    """Application settings with environment variable loading."""

    model_config = SettingsConfigDict(
        env_prefix="SKILLFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Core service settings
    env: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="json",
        description="Log output format: 'json' or 'text'",
    )

    # Usage / quota settings
    free_run_limit: int = Field(
        default=3,
        description="Free AI executions allowed per client without a key",
    )
    usage_backend: str = Field(
        default="memory",
        description="Usage store backend: memory, file or redis",
    )
    usage_file: Path = Field(
        default=Path.home() / ".skillflow" / "usage.json",
        description="Path of the JSON usage store (file backend)",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (redis backend)",
    )

    # Client-side AI backend
    ai_backend_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the AI execute service",
    )
    ai_request_timeout_s: float = Field(
        default=60.0,
        description="Read timeout for a single AI execute call",
    )

    # Gemini settings (server side of the AI execute endpoint)
    gemini_api_key: SecretStr | None = Field(
        default=None,
        description="Built-in Gemini API key used for free runs",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/models",
        description="Gemini models API base URL",
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model name",
    )
    gemini_temperature: float = Field(default=0.7, description="Sampling temperature")
    gemini_max_output_tokens: int = Field(
        default=4096,
        description="Maximum tokens to generate per call",
    )
    gemini_max_retries: int = Field(
        default=1,
        description="Retries on rate limiting or server errors",
    )

    # Workflow engine
    simulate_step_delay_s: float = Field(
        default=0.0,
        description="Pause between simulated node executions",
    )
    reject_cycles: bool = Field(
        default=False,
        description="Treat cyclic workflows as a validation error",
    )
    catalog_path: Path | None = Field(
        default=None,
        description="Optional YAML/JSON skill catalog replacing the built-in one",
    )

    @field_validator("free_run_limit")
    @classmethod
    def validate_free_run_limit(cls, v: int) -> int:
        """Validate that the free run limit is positive."""
        if v <= 0:
            raise ValueError("free_run_limit must be positive")
        return v

    @field_validator("usage_backend")
    @classmethod
    def validate_usage_backend(cls, v: str) -> str:
        """Validate the usage backend name."""
        v = v.lower()
        if v not in USAGE_BACKENDS:
            raise ValueError(
                f"usage_backend must be one of: {', '.join(USAGE_BACKENDS)}"
            )
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate the log format."""
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
