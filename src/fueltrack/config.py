"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackerSettings(BaseSettings):
    """Vehicle parameters used for forward-looking predictions."""

    model_config = SettingsConfigDict(env_prefix="TRACKER_")

    tank_capacity: Decimal = Decimal("50")  # same fuel unit as entries


class StorageSettings(BaseSettings):
    """Remote entry store configuration.

    When disabled the tracker runs local-only: entries live in memory and
    nothing is synchronized.
    All fields configurable via STORAGE_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    enabled: bool = True
    db_path: str = "data/fuel_entries.db"


class ApiSettings(BaseSettings):
    """JSON API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "127.0.0.1"
    port: int = 8080
    enabled: bool = True


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    export_dir: str | None = None  # API disabled: write the export here
    tracker: TrackerSettings = TrackerSettings()
    storage: StorageSettings = StorageSettings()
    api: ApiSettings = ApiSettings()
