"""Broadcast Hub — the single authority over the canonical incident collection.

Every inbound mutation from every peer goes through one lock-guarded apply
path, then the resulting event is fanned out to all peers (the sender included).
Fan-out only enqueues, so no peer can stall the hub.
"""

import asyncio
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from ..models.catalog import Catalog
from ..models.incident import Incident, Reading
from ..protocol.messages import (
    PROTOCOL_VERSION,
    AddIncidentMessage,
    IncidentAddedMessage,
    IncidentUpdatedMessage,
    InitMessage,
    Rejection,
    SetReadingIntervalMessage,
    UpdateIncidentMessage,
    encode_message,
    parse_client_message,
)
from ..utils.logging import get_logger
from .incident_store import IncidentStore

if TYPE_CHECKING:
    from ..api.websockets.connections import ConnectionManager

logger = get_logger("engine.hub")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BroadcastHub:
    """Owns the incident store and catalog; brokers every mutation."""

    def __init__(
        self,
        connections: "ConnectionManager",
        store: IncidentStore | None = None,
        catalog: Catalog | None = None,
        protocol_version: str = PROTOCOL_VERSION,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._connections = connections
        self._store = store or IncidentStore()
        self._catalog = catalog or Catalog()
        self._protocol_version = protocol_version
        self._clock = clock
        self._apply_lock = asyncio.Lock()
        self._total_accepted = 0
        self._total_dropped = 0
        self._total_broadcasts = 0

    @property
    def store(self) -> IncidentStore:
        return self._store

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def connections(self) -> "ConnectionManager":
        return self._connections

    def seed(self, incidents: Iterable[Incident], catalog: Catalog | None = None) -> None:
        """Load the startup dataset. Replaces whatever the store held."""
        self._store.replace_all(incidents)
        if catalog is not None:
            self._catalog = catalog
        logger.info("hub_seeded", incidents=len(self._store), catalog_empty=self._catalog.is_empty)

    def init_message(self) -> InitMessage:
        return InitMessage(
            incidents=self._store.snapshot(),
            catalog=self._catalog,
            protocol_version=self._protocol_version,
        )

    # --- Connection lifecycle ---

    async def on_connect(self, peer) -> bool:
        """Accept a peer and queue its init snapshot ahead of any broadcast."""
        if not await self._connections.accept(peer):
            return False
        async with self._apply_lock:
            self._connections.register(peer)
            self._connections.send(peer, encode_message(self.init_message()))
        logger.info("hub_peer_initialized", incidents=len(self._store))
        return True

    async def on_disconnect(self, peer) -> None:
        await self._connections.disconnect(peer)

    async def on_message(self, peer, raw: str | bytes) -> None:
        """Apply one inbound frame. Malformed frames are dropped without reply."""
        message = parse_client_message(raw)
        if isinstance(message, Rejection):
            self._total_dropped += 1
            logger.debug("hub_message_dropped", reason=message.reason)
            return

        self._total_accepted += 1
        if isinstance(message, AddIncidentMessage):
            await self.add_incident(message.incident)
        elif isinstance(message, UpdateIncidentMessage):
            await self.update_incident(message.incident)
        elif isinstance(message, SetReadingIntervalMessage):
            self._connections.set_metadata(peer, "reading_interval_ms", message.interval_ms)
            logger.debug("hub_reading_interval_set", interval_ms=message.interval_ms)

    # --- Authoritative mutations ---

    async def add_incident(self, incident: Incident) -> Incident:
        """Stamp, insert at the front, broadcast ``incidentAdded``."""
        async with self._apply_lock:
            stored = self._store.insert(self._stamp(incident))
            self._broadcast(IncidentAddedMessage(incident=stored))
        logger.info("hub_incident_added", incident_id=stored.incident_id, state=stored.state_id.value)
        return stored

    async def update_incident(self, incident: Incident) -> Incident:
        """Stamp, upsert by id, broadcast ``incidentUpdated``."""
        async with self._apply_lock:
            stored = self._store.upsert(self._stamp(incident))
            self._broadcast(IncidentUpdatedMessage(incident=stored))
        logger.info(
            "hub_incident_updated",
            incident_id=stored.incident_id,
            state=stored.state_id.value,
            assigned_to=stored.assigned_to,
        )
        return stored

    async def apply_reading(self, incident_id: str, reading: Reading, max_readings: int = 60) -> Optional[Incident]:
        """Append a telemetry reading to a stored incident and broadcast the update.

        Only the newest ``max_readings`` points are kept. Returns None if the
        incident is unknown.
        """
        async with self._apply_lock:
            current = self._store.get(incident_id)
            if current is None:
                return None
            readings = [*current.readings, reading][-max_readings:]
            stored = self._store.upsert(self._stamp(current.model_copy(update={"readings": readings})))
            self._broadcast(IncidentUpdatedMessage(incident=stored))
        return stored

    def get_stats(self) -> dict:
        return {
            "connections": self._connections.connection_count,
            "incidents": len(self._store),
            "messages_accepted": self._total_accepted,
            "messages_dropped": self._total_dropped,
            "broadcasts": self._total_broadcasts,
            "peers_evicted": self._connections.total_evicted,
            "protocol_version": self._protocol_version,
        }

    def _stamp(self, incident: Incident) -> Incident:
        return incident.model_copy(update={"updated_at": self._clock()})

    def _broadcast(self, message) -> None:
        delivered = self._connections.broadcast(encode_message(message))
        self._total_broadcasts += 1
        logger.debug("hub_broadcast", type=message.type, peers=delivered)
