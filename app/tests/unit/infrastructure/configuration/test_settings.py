"""Unit tests for infrastructure.configuration settings.

Tests cover:
- I18nSettings validation and defaults
- List parsing from environment variables
- Settings aggregator initialization
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from infrastructure.configuration import I18nSettings, Settings


@pytest.fixture
def clean_i18n_env(monkeypatch):
    """Remove I18N_* variables that might leak in from the environment."""
    for name in list(I18nSettings.model_fields):
        alias = I18nSettings.model_fields[name].alias
        if alias:
            monkeypatch.delenv(alias, raising=False)


@pytest.mark.unit
class TestI18nSettings:
    """Test suite for I18nSettings configuration."""

    def test_defaults(self, clean_i18n_env):
        config = I18nSettings()

        assert config.cdn_url is None
        assert config.default_language == "en"
        assert config.preferred_languages == []
        assert config.available_languages == []
        assert config.namespaces == []
        assert config.app_version_signature is None
        assert config.cache_backend == "file"
        assert config.request_timeout_seconds == 10.0
        assert config.bundle_dir is None
        assert config.sync_on_initialize is True
        assert isinstance(config.cache_dir, Path)

    def test_from_env_vars(self, clean_i18n_env, monkeypatch):
        monkeypatch.setenv("I18N_CDN_URL", "https://cdn.example.com/abc123")
        monkeypatch.setenv("I18N_DEFAULT_LANGUAGE", "cs")
        monkeypatch.setenv("I18N_APP_VERSION_SIGNATURE", "2.1.0")
        monkeypatch.setenv("I18N_CACHE_DIR", "/tmp/i18n-cache")
        monkeypatch.setenv("I18N_REQUEST_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("I18N_SYNC_ON_INITIALIZE", "false")

        config = I18nSettings()

        assert config.cdn_url == "https://cdn.example.com/abc123"
        assert config.default_language == "cs"
        assert config.app_version_signature == "2.1.0"
        assert config.cache_dir == Path("/tmp/i18n-cache")
        assert config.request_timeout_seconds == 2.5
        assert config.sync_on_initialize is False

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("buttons,menu", ["buttons", "menu"]),
            (" buttons , menu ,", ["buttons", "menu"]),
            ('["buttons", "menu"]', ["buttons", "menu"]),
            ("", []),
        ],
    )
    def test_list_from_env(self, clean_i18n_env, monkeypatch, raw, expected):
        monkeypatch.setenv("I18N_NAMESPACES", raw)
        assert I18nSettings().namespaces == expected

    def test_language_lists_from_env(self, clean_i18n_env, monkeypatch):
        monkeypatch.setenv("I18N_PREFERRED_LANGUAGES", "cs-CZ,en")
        monkeypatch.setenv("I18N_AVAILABLE_LANGUAGES", '["en", "cs"]')

        config = I18nSettings()

        assert config.preferred_languages == ["cs-CZ", "en"]
        assert config.available_languages == ["en", "cs"]

    def test_lists_by_field_name(self, clean_i18n_env):
        config = I18nSettings(namespaces="a,b", preferred_languages=["fr"])
        assert config.namespaces == ["a", "b"]
        assert config.preferred_languages == ["fr"]

    @pytest.mark.parametrize("backend", ["file", "memory", "MEMORY"])
    def test_cache_backend_values(self, clean_i18n_env, backend):
        assert I18nSettings(cache_backend=backend).cache_backend == backend.lower()

    def test_unknown_cache_backend_rejected(self, clean_i18n_env):
        with pytest.raises(ValidationError):
            I18nSettings(cache_backend="redis")


@pytest.mark.unit
class TestSettings:
    """Test suite for main Settings class."""

    def test_settings_includes_i18n_config(self):
        settings = Settings()

        assert isinstance(settings.i18n, I18nSettings)

    def test_settings_accepts_i18n_override(self, clean_i18n_env):
        custom = I18nSettings(cdn_url="https://cdn.example.com/x")

        settings = Settings(i18n=custom)

        assert settings.i18n.cdn_url == "https://cdn.example.com/x"

    def test_is_production(self, monkeypatch):
        monkeypatch.setenv("PREFIX", "")
        assert Settings().is_production is True

        monkeypatch.setenv("PREFIX", "dev-")
        assert Settings().is_production is False

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert Settings().LOG_LEVEL == "DEBUG"
