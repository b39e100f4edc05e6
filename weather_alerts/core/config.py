"""
Configuration module with strict validation.

Key principles:
- APP STARTUP requires DATABASE_URL and nothing else
- Email delivery is optional: without a Resend key alerts are logged, not sent
- Thresholds, cooldown and poll cadence are loaded once at startup
- Safe defaults for all optional settings
"""
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from weather_alerts.alerts.types import Thresholds


class Settings(BaseSettings):
    """Application settings with validation.

    Loads from environment variables and .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database (REQUIRED for API startup)
    database_url: str = Field(
        ...,
        description="SQLAlchemy connection URL (PostgreSQL in production)"
    )

    # Current-condition thresholds (trigger WATCH, or WARNING past the extreme breakpoint)
    threshold_heat_index: float = Field(default=95.0, description="Apparent temperature, °F")
    threshold_cold_temp: float = Field(default=20.0, description="Air temperature, °F")
    threshold_wind_speed: float = Field(default=45.0, description="Wind speed, mph")
    threshold_aqi: float = Field(default=150.0, description="US AQI")

    # Forecast thresholds (trigger ADVISORY inside the 24h / 48h lookahead windows)
    forecast_threshold_heat_index: float = Field(default=95.0)
    forecast_threshold_cold_temp: float = Field(default=20.0)
    forecast_threshold_wind_speed: float = Field(default=45.0)
    forecast_threshold_aqi: float = Field(default=150.0)

    # Deduplication and cadence
    cooldown_hours: float = Field(
        default=4.0,
        gt=0,
        le=168,
        description="Minimum hours between two notifications for the same site and hazard"
    )

    poll_interval_minutes: int = Field(
        default=30,
        ge=1,
        le=1440,
        description="Minutes between scheduled weather checks"
    )

    initial_check_delay_seconds: int = Field(
        default=5,
        ge=0,
        description="Delay before the first check after startup"
    )

    active_alert_window_hours: int = Field(
        default=4,
        ge=1,
        description="How far back the active-alerts view looks"
    )

    # Fan-out hardening
    max_concurrent_sites: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum sites evaluated concurrently within one run"
    )

    site_timeout_seconds: float = Field(
        default=90.0,
        gt=0,
        description="Time limit for fetching one site's conditions"
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout for each outbound HTTP request"
    )

    max_retries: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Attempts per outbound request before giving up"
    )

    # Email delivery (Resend HTTP API)
    resend_api_key: Optional[str] = Field(
        default=None,
        description="Resend API key - optional; alerts are logged only when missing"
    )

    email_from: str = Field(
        default='"Job Site Weather Alerts" <alerts@example.com>'
    )

    # NWS requires an identifying User-Agent
    nws_user_agent: str = Field(
        default="jobsite-weather-alerts (alerts@example.com)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper

    def is_email_configured(self) -> bool:
        """Resend keys always start with 're_'."""
        return bool(self.resend_api_key) and self.resend_api_key.startswith("re_")

    def current_thresholds(self) -> Thresholds:
        return Thresholds(
            heat_index=self.threshold_heat_index,
            cold_temp=self.threshold_cold_temp,
            wind_speed=self.threshold_wind_speed,
            aqi=self.threshold_aqi,
        )

    def forecast_thresholds(self) -> Thresholds:
        return Thresholds(
            heat_index=self.forecast_threshold_heat_index,
            cold_temp=self.forecast_threshold_cold_temp,
            wind_speed=self.forecast_threshold_wind_speed,
            aqi=self.forecast_threshold_aqi,
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    This pattern allows:
    - Easy testing (can reset settings between tests)
    - Lazy loading (only loads when first accessed)
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """
    Reset the global settings instance.

    Useful for testing to ensure clean state between tests.
    """
    global _settings
    _settings = None
