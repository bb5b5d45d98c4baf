"""
Configuration management for nut-exporter.

This module uses Pydantic's BaseSettings to manage configuration
through environment variables. It provides a centralized and typed
way to handle exporter settings.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Exporter settings.

    These settings are loaded from environment variables prefixed with
    ``NUT_EXPORTER_`` (e.g. ``NUT_EXPORTER_HOSTS='["ups1.lan", "ups2.lan:3493"]'``).
    """

    # NUT daemons to poll, "host" or "host:port"
    HOSTS: list[str] = ["localhost"]

    # Deadline for a single NUT connection, in seconds
    TIMEOUT: float = 10.0

    # Exporter HTTP server
    LISTEN_ADDRESS: str = ":9230"
    NAMESPACE: str = "nut"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        env_prefix="NUT_EXPORTER_",
        extra="ignore",
    )

    @field_validator("TIMEOUT")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("TIMEOUT must be greater than zero")
        return value


settings = Settings()
