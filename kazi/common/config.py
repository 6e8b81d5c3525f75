"""
Kazi Configuration Module

Centralized configuration management with Pydantic validation.
All environment variables are validated at startup to catch misconfigurations early.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://backita.onrender.com"


def _env(name: str, field_name: str) -> AliasChoices:
    """Accept both the environment variable name and the field name."""
    return AliasChoices(name, field_name)


class KaziSettings(BaseSettings):
    """
    Dashboard configuration with validation.

    All settings can be overridden via environment variables.
    Validation happens at startup to fail fast on misconfiguration.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    # === Backend ===
    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        validation_alias=_env("KAZI_API_BASE_URL", "api_base_url"),
        description="Base URL of the Kazi Mashinani REST backend",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        le=300,
        validation_alias=_env("KAZI_REQUEST_TIMEOUT", "request_timeout"),
        description="Seconds to wait for the backend before giving up",
    )

    # === Environment ===
    environment: str = Field(
        default="development",
        validation_alias=_env("ENVIRONMENT", "environment"),
        description="Environment: development, staging, production",
    )
    flask_secret_key: Optional[str] = Field(
        default=None,
        validation_alias=_env("FLASK_SECRET_KEY", "flask_secret_key"),
        description="Secret used to sign the session cookie",
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=_env("LOG_LEVEL", "log_level"),
    )

    # === UI timers (seconds) ===
    message_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        validation_alias=_env("KAZI_MESSAGE_TIMEOUT", "message_timeout_seconds"),
    )
    resend_countdown_seconds: int = Field(
        default=60,
        ge=1,
        validation_alias=_env("KAZI_RESEND_COUNTDOWN", "resend_countdown_seconds"),
    )
    redirect_delay_seconds: float = Field(
        default=1.5,
        ge=0,
        validation_alias=_env("KAZI_REDIRECT_DELAY", "redirect_delay_seconds"),
    )
    logout_delay_seconds: float = Field(
        default=2.0,
        ge=0,
        validation_alias=_env("KAZI_LOGOUT_DELAY", "logout_delay_seconds"),
    )

    # === Auth proxy ===
    cors_allow_origin: str = Field(
        default="*",
        validation_alias=_env("KAZI_CORS_ALLOW_ORIGIN", "cors_allow_origin"),
    )

    # === Client storage ===
    storage_dir: str = Field(
        default="./data/clients",
        validation_alias=_env("KAZI_STORAGE_DIR", "storage_dir"),
        description="Directory holding one JSON storage file per browser client",
    )
    client_idle_seconds: float = Field(
        default=1800.0,
        gt=0,
        validation_alias=_env("KAZI_CLIENT_IDLE_SECONDS", "client_idle_seconds"),
        description="In-memory client contexts idle this long are evicted",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        allowed = {"development", "staging", "production"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of: {', '.join(sorted(allowed))}")
        return v_lower

    @field_validator("api_base_url")
    @classmethod
    def validate_url_format(cls, v: str) -> str:
        """Basic URL format validation; trailing slashes are dropped."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid URL format: {v}")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def validate_production_config(self) -> List[str]:
        """
        Validate configuration is suitable for production.

        Returns list of warning/error messages.
        """
        issues = []

        if self.is_production:
            if not self.flask_secret_key:
                issues.append("CRITICAL: FLASK_SECRET_KEY required in production")
            if self.cors_allow_origin == "*":
                issues.append("WARNING: KAZI_CORS_ALLOW_ORIGIN allows every origin")
            if self.api_base_url.startswith("http://"):
                issues.append("WARNING: Backend URL is not using HTTPS")

        return issues


@lru_cache()
def get_settings() -> KaziSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached; call ``get_settings.cache_clear()``
    after changing the environment (tests do).
    """
    return KaziSettings()


def validate_config_on_startup(settings: Optional[KaziSettings] = None) -> KaziSettings:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    Logs warnings for non-critical issues.
    """
    try:
        settings = settings or get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    for issue in settings.validate_production_config():
        if issue.startswith("CRITICAL"):
            raise ValueError(issue)
        logger.warning(issue)

    logger.info(f"Configuration loaded: environment={settings.environment}")
    logger.info(f"  api_base_url={settings.api_base_url}")
    logger.info(f"  request_timeout={settings.request_timeout}s")
    logger.info(f"  storage_dir={settings.storage_dir}")
    return settings
