"""Tests for configuration settings."""
import pytest
from pydantic import ValidationError

from skillflow.config.settings import Settings, get_settings, reset_settings


class TestSettings:
    """Test Settings configuration."""

    def test_settings_default_values(self, monkeypatch):
        """Test default values are set correctly."""
        monkeypatch.delenv("SKILLFLOW_GEMINI_API_KEY", raising=False)

        settings = Settings()

        # env might be 'test' from conftest.py
        assert settings.env in ("development", "test")
        assert settings.log_level == "INFO"

        # Quota
        assert settings.free_run_limit == 3
        assert settings.usage_backend == "memory"

        # Gemini
        assert settings.gemini_api_key is None
        assert settings.gemini_model == "gemini-2.0-flash"
        assert settings.gemini_temperature == 0.7
        assert settings.gemini_max_output_tokens == 4096

        # Engine
        assert settings.simulate_step_delay_s == 0.0
        assert settings.reject_cycles is False
        assert settings.catalog_path is None

    def test_settings_env_prefix(self, monkeypatch):
        """Test that SKILLFLOW_ prefix works for environment variables."""
        monkeypatch.setenv("SKILLFLOW_ENV", "production")
        monkeypatch.setenv("SKILLFLOW_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("SKILLFLOW_FREE_RUN_LIMIT", "5")
        monkeypatch.setenv("SKILLFLOW_REJECT_CYCLES", "true")

        settings = Settings()

        assert settings.env == "production"
        assert settings.log_level == "DEBUG"
        assert settings.free_run_limit == 5
        assert settings.reject_cycles is True

    def test_gemini_key_is_secret(self, monkeypatch):
        """Test that the built-in key is wrapped as a secret."""
        monkeypatch.setenv("SKILLFLOW_GEMINI_API_KEY", "gm-test-key")

        settings = Settings()

        assert settings.gemini_api_key.get_secret_value() == "gm-test-key"
        assert "gm-test-key" not in repr(settings)

    def test_free_run_limit_validation(self, monkeypatch):
        """Test that a non-positive free run limit is rejected."""
        monkeypatch.setenv("SKILLFLOW_FREE_RUN_LIMIT", "0")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "free_run_limit must be positive" in str(exc_info.value)

    def test_usage_backend_validation(self, monkeypatch):
        """Test that unknown usage backends are rejected."""
        monkeypatch.setenv("SKILLFLOW_USAGE_BACKEND", "postgres")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "usage_backend must be one of" in str(exc_info.value)

    def test_usage_backend_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("SKILLFLOW_USAGE_BACKEND", "REDIS")

        assert Settings().usage_backend == "redis"

    def test_log_format_validation(self, monkeypatch):
        monkeypatch.setenv("SKILLFLOW_LOG_FORMAT", "xml")

        with pytest.raises(ValidationError):
            Settings()


class TestSettingsSingleton:
    """Test the cached settings instance."""

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reset_settings_rereads_environment(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("SKILLFLOW_FREE_RUN_LIMIT", "7")

        reset_settings()
        second = get_settings()

        assert second is not first
        assert second.free_run_limit == 7
