"""
Configuration Management for PlainFiles

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
File locations, the login attempt budget and logging level all live in
one place and are validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Locations of the flat files backing the registry."""

    model_config = SettingsConfigDict(
        env_prefix="PLAINFILES_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("."),
        description="Directory holding the people, users and log files"
    )
    people_file: str = Field(
        default="people.txt",
        min_length=1,
        description="Person registry file name"
    )
    users_file: str = Field(
        default="Users.txt",
        min_length=1,
        description="Credentials file name"
    )
    log_file: str = Field(
        default="log.txt",
        min_length=1,
        description="Audit log file name"
    )

    @field_validator('data_dir')
    @classmethod
    def validate_data_dir(cls, v: Path) -> Path:
        """Warn if the data directory doesn't exist (files are created on first save)."""
        if not v.exists():
            import warnings
            warnings.warn(
                f"Data directory not found at {v}. "
                "Make sure it exists before saving."
            )
        return v

    @property
    def people_path(self) -> Path:
        return self.data_dir / self.people_file

    @property
    def users_path(self) -> Path:
        return self.data_dir / self.users_file

    @property
    def log_path(self) -> Path:
        return self.data_dir / self.log_file


class AuthSettings(BaseSettings):
    """Login protocol configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PLAINFILES_AUTH_",
        extra="ignore"
    )

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Failed attempts allowed before the user is blocked"
    )
    retry_delay_seconds: float = Field(
        default=1.5,
        ge=0.0,
        description="Pause between a failed attempt and the next prompt"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="WARNING",
        description="Diagnostic log level (audit log is always written)"
    )
    no_city_label: str = Field(
        default="NO CITY",
        min_length=1,
        description="Report label for people without a city"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "auth", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
