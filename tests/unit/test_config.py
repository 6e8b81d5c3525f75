"""
Unit tests for kazi/common/config.py
"""

import pytest
from pydantic import ValidationError

from kazi.common.config import KaziSettings, get_settings, validate_config_on_startup


class TestKaziSettings:
    """Tests for KaziSettings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("KAZI_API_BASE_URL")
        settings = KaziSettings()

        assert settings.api_base_url == "https://backita.onrender.com"
        assert settings.message_timeout_seconds == 5
        assert settings.resend_countdown_seconds == 60
        assert settings.redirect_delay_seconds == 1.5
        assert settings.logout_delay_seconds == 2
        assert settings.storage_dir == "./data/clients"
        assert settings.client_idle_seconds == 1800
        assert settings.is_production is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("KAZI_API_BASE_URL", "https://backend.example/")
        monkeypatch.setenv("KAZI_REQUEST_TIMEOUT", "12")

        settings = KaziSettings()

        assert settings.api_base_url == "https://backend.example"
        assert settings.request_timeout == 12

    def test_storage_settings_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("KAZI_STORAGE_DIR", str(tmp_path))
        monkeypatch.setenv("KAZI_CLIENT_IDLE_SECONDS", "60")

        settings = KaziSettings()

        assert settings.storage_dir == str(tmp_path)
        assert settings.client_idle_seconds == 60

    def test_invalid_url_rejected(self):
        with pytest.raises(ValidationError):
            KaziSettings(api_base_url="backend.example")

    def test_invalid_environment_rejected(self):
        with pytest.raises(ValidationError):
            KaziSettings(environment="prod")

    def test_log_level_normalised(self):
        assert KaziSettings(log_level="debug").log_level == "DEBUG"

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestValidateConfigOnStartup:
    """Tests for validate_config_on_startup()."""

    def test_production_requires_secret(self, monkeypatch):
        monkeypatch.delenv("FLASK_SECRET_KEY")
        settings = KaziSettings(environment="production")

        with pytest.raises(ValueError, match="FLASK_SECRET_KEY"):
            validate_config_on_startup(settings)

    def test_production_warnings_do_not_fail(self):
        settings = KaziSettings(environment="production", flask_secret_key="s")

        issues = settings.validate_production_config()

        assert any("KAZI_CORS_ALLOW_ORIGIN" in issue for issue in issues)
        assert validate_config_on_startup(settings) is settings

    def test_development_passes(self, settings):
        assert validate_config_on_startup(settings) is settings
