"""Incident Sync configuration system using Pydantic Settings."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .protocol.messages import PROTOCOL_VERSION


class IncidentSyncConfig(BaseSettings):
    """Main configuration class. Loads from .env file and environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "INCIDENT-SYNC"
    debug: bool = False
    host: str = "127.0.0.1"
    port: int = 8080
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Logging
    log_dir: str = "logs"
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    # Hub
    protocol_version: str = PROTOCOL_VERSION
    seed_on_startup: bool = True
    ws_max_connections: int = 100
    ws_queue_size: int = 100

    # Client
    ws_url: str = "ws://localhost:8080/ws/incidents"
    reading_interval_ms: int = 2000
    default_assignee: str = "user-1"

    # Telemetry simulator
    telemetry_enabled: bool = False
    telemetry_interval_seconds: float = 1.0
    telemetry_max_readings: int = 60

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("ws_max_connections", "ws_queue_size", "telemetry_max_readings")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator("reading_interval_ms")
    @classmethod
    def validate_reading_interval(cls, v: int) -> int:
        if v < 0:
            raise ValueError("reading_interval_ms cannot be negative")
        return v

    @field_validator("telemetry_interval_seconds")
    @classmethod
    def validate_telemetry_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("telemetry_interval_seconds must be positive")
        return v


def get_config() -> IncidentSyncConfig:
    """Factory function to create config instance."""
    return IncidentSyncConfig()
