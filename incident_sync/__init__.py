"""Incident Sync: real-time incident board hub and client reconciler."""

__version__ = "0.1.0"
