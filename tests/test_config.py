"""Tests for configuration settings."""

import pytest

from devops_metrics.config import Settings, SyncConfig, get_settings


class TestSettings:
    """Tests for Settings class."""

    def test_settings_defaults(self):
        """Test default values are correct."""
        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./devops_metrics.db"
        assert settings.github_token == ""
        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert settings.default_repository is None

    def test_settings_from_env(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
        monkeypatch.setenv("GITHUB_TOKEN", "test_token_123")
        monkeypatch.setenv("DEFAULT_REPO_OWNER", "octo-org")
        monkeypatch.setenv("DEFAULT_REPO_NAME", "service")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./test.db"
        assert settings.github_token == "test_token_123"
        assert settings.default_repository == "octo-org/service"
        assert settings.log_level == "DEBUG"

    def test_default_repository_needs_both_parts(self, monkeypatch):
        """Owner without name is not a usable default."""
        monkeypatch.setenv("DEFAULT_REPO_OWNER", "octo-org")

        settings = Settings(_env_file=None)

        assert settings.default_repository is None

    def test_nested_sync_settings_from_env(self, monkeypatch):
        """SYNC__* variables populate the nested sync config."""
        monkeypatch.setenv("SYNC__RETRY_ATTEMPTS", "5")
        monkeypatch.setenv("SYNC__RETRY_DELAY_MS", "250")

        settings = Settings(_env_file=None)

        assert settings.sync.retry_attempts == 5
        assert settings.sync.retry_delay_ms == 250
        assert settings.sync.page_size == 100

    def test_settings_log_level_validation(self, monkeypatch):
        """Test that invalid log level is rejected."""
        monkeypatch.setenv("LOG_LEVEL", "INVALID")

        with pytest.raises(ValueError):
            Settings(_env_file=None)


class TestSyncConfig:
    """Tests for SyncConfig bounds."""

    def test_defaults(self):
        config = SyncConfig()

        assert config.page_size == 100
        assert config.retry_attempts == 3
        assert config.retry_delay_ms == 1000
        assert config.commit_batch_size == 25

    def test_page_size_capped_at_api_maximum(self):
        with pytest.raises(ValueError):
            SyncConfig(page_size=101)


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_cached(self):
        """Test that get_settings returns cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2
