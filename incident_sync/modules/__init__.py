"""Background hub modules package."""

from .telemetry_simulator import TelemetrySimulator

__all__ = [
    "TelemetrySimulator",
]
