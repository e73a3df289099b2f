"""Shared test fixtures."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from incident_sync.engine.seed import default_catalog, seed_incidents
from incident_sync.models.incident import Incident, IncidentState

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def seeded():
    """The four demo incidents, timestamped against a fixed clock."""
    return seed_incidents(now=FIXED_NOW)


@pytest.fixture
def make_incident():
    """Factory for incidents with sensible defaults."""
    def _make(incident_id="inc-1", **overrides):
        fields = {
            "incident_id": incident_id,
            "site_id": "site-1",
            "asset_id": "asset-1",
            "alarm_id": "alarm-100",
            "priority": 1,
            "occurrences": 1,
            "created_at": FIXED_NOW,
            "state_id": IncidentState.OPEN,
            "escalation_level_id": "esc-1",
        }
        fields.update(overrides)
        return Incident(**fields)

    return _make


# --- WebSocket peer fixtures ---

@pytest.fixture
def make_peer():
    """Create a mock WebSocket peer that records every frame it is sent."""
    def _make(send_side_effect=None):
        peer = MagicMock()
        peer.accept = AsyncMock()
        peer.close = AsyncMock()
        peer.send_text = AsyncMock(side_effect=send_side_effect)
        return peer

    return _make

