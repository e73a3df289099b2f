"""Process-wide singletons: one config, one connection manager, one hub."""

from .api.websockets.connections import ConnectionManager
from .config import IncidentSyncConfig, get_config
from .engine.hub import BroadcastHub
from .modules.telemetry_simulator import TelemetrySimulator

_config_instance: IncidentSyncConfig | None = None
_connection_manager: ConnectionManager | None = None
_hub: BroadcastHub | None = None
_telemetry_simulator: TelemetrySimulator | None = None


def get_app_config() -> IncidentSyncConfig:
    """Get the application config singleton."""
    global _config_instance
    if _config_instance is None:
        _config_instance = get_config()
    return _config_instance


def get_connection_manager() -> ConnectionManager:
    global _connection_manager
    if _connection_manager is None:
        config = get_app_config()
        _connection_manager = ConnectionManager(
            max_connections=config.ws_max_connections,
            queue_size=config.ws_queue_size,
        )
    return _connection_manager


def get_hub() -> BroadcastHub:
    """The hub instance handed to the WebSocket endpoint and REST routes."""
    global _hub
    if _hub is None:
        config = get_app_config()
        _hub = BroadcastHub(
            connections=get_connection_manager(),
            protocol_version=config.protocol_version,
        )
    return _hub


def get_telemetry_simulator() -> TelemetrySimulator:
    global _telemetry_simulator
    if _telemetry_simulator is None:
        config = get_app_config()
        _telemetry_simulator = TelemetrySimulator(
            hub=get_hub(),
            interval_seconds=config.telemetry_interval_seconds,
            max_readings=config.telemetry_max_readings,
        )
    return _telemetry_simulator


def reset_singletons() -> None:
    """Forget every singleton so the next getter builds fresh ones."""
    global _config_instance, _connection_manager, _hub, _telemetry_simulator
    _config_instance = None
    _connection_manager = None
    _hub = None
    _telemetry_simulator = None
