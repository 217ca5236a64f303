"""
Unit tests for utils/config.py
Tests: defaults, environment loading, CORS origin parsing.
"""

import pytest

from utils.config import DEFAULT_GEMINI_API_URL, Settings

ENV_VARS = [
    "GEMINI_API_KEY", "GEMINI_API_URL", "GEMINI_TIMEOUT_SECONDS",
    "CORS_ALLOW_ORIGINS", "LOG_FILE", "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:

    def test_defaults(self):
        settings = Settings()
        assert settings.gemini_api_url == DEFAULT_GEMINI_API_URL
        assert settings.gemini_timeout_seconds == 30.0
        assert settings.cors_allow_origins == ["*"]
        assert settings.api_key_configured is False

    def test_from_env(self, clean_env):
        clean_env.setenv("GEMINI_API_KEY", "abc123")
        clean_env.setenv("GEMINI_API_URL", "https://example.test/generate")
        clean_env.setenv("GEMINI_TIMEOUT_SECONDS", "12.5")
        clean_env.setenv("CORS_ALLOW_ORIGINS", "https://a.test, https://b.test ,")

        settings = Settings.from_env()

        assert settings.gemini_api_key == "abc123"
        assert settings.api_key_configured is True
        assert settings.gemini_api_url == "https://example.test/generate"
        assert settings.gemini_timeout_seconds == 12.5
        assert settings.cors_allow_origins == ["https://a.test", "https://b.test"]

    def test_blank_key_is_not_configured(self, clean_env):
        clean_env.setenv("GEMINI_API_KEY", "")

        settings = Settings.from_env()

        assert settings.gemini_api_key is None
        assert settings.api_key_configured is False

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(gemini_timeout_seconds=0)
