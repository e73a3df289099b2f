"""Connection Reconciler — mirrors the hub's incident collection for one connection.

``reduce`` is the pure transition function ``(state, event, now) -> state``;
``ConnectionReconciler`` wraps it with the connection status machine, the
outbound request API and change notification.

Rules, applied strictly in arrival order:
    init             -> wholesale replace of incidents and catalog; the
                        throttle window starts over
    incidentAdded    -> prepend, unconditionally
    incidentUpdated  -> merge by id (replace in place, else prepend), but only
                        if ``reading_interval_ms`` has elapsed since the last
                        accepted update; otherwise dropped outright
"""

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence

from ..engine.incident_store import upsert_incident
from ..models.catalog import Catalog
from ..models.incident import Incident
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
    parse_server_message,
)
from ..utils.logging import get_logger
from .classifier import IncidentBucket, classify, classify_all

logger = get_logger("client.reconciler")

DEFAULT_READING_INTERVAL_MS = 2000

ServerEvent = InitMessage | IncidentAddedMessage | IncidentUpdatedMessage


class ConnectionStatus(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass(frozen=True)
class ReconcilerState:
    """Immutable snapshot of everything a connection knows."""
    incidents: tuple[Incident, ...] = ()
    catalog: Catalog = field(default_factory=Catalog)
    reading_interval_ms: int = DEFAULT_READING_INTERVAL_MS
    last_update_ms: Optional[float] = None
    advisory: Optional[str] = None


def update_window_open(state: ReconcilerState, now_ms: float) -> bool:
    if state.last_update_ms is None:
        return True
    return now_ms - state.last_update_ms >= state.reading_interval_ms


def merge_incident(state: ReconcilerState, incident: Incident) -> ReconcilerState:
    """Upsert by identity without touching the throttle checkpoint."""
    return replace(state, incidents=tuple(upsert_incident(list(state.incidents), incident)))


def reduce(
    state: ReconcilerState,
    event: ServerEvent,
    now_ms: float,
    expected_version: str = PROTOCOL_VERSION,
) -> ReconcilerState:
    """Apply one server event. Returns ``state`` itself when the event is dropped."""
    if isinstance(event, InitMessage):
        advisory = None
        if event.protocol_version and event.protocol_version != expected_version:
            advisory = f"Protocol mismatch: expected {expected_version}, got {event.protocol_version}."
        return replace(
            state,
            incidents=tuple(event.incidents),
            catalog=event.catalog,
            advisory=advisory,
            last_update_ms=None,
        )

    if isinstance(event, IncidentAddedMessage):
        return replace(state, incidents=(event.incident, *state.incidents))

    if isinstance(event, IncidentUpdatedMessage):
        if not update_window_open(state, now_ms):
            return state
        return replace(merge_incident(state, event.incident), last_update_ms=now_ms)

    return state


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


Sender = Callable[[str], Awaitable[None]]
Listener = Callable[[ReconcilerState], None]


class ConnectionReconciler:
    """Local mirror of the hub for a single connection."""

    def __init__(
        self,
        reading_interval_ms: int = DEFAULT_READING_INTERVAL_MS,
        clock: Callable[[], float] = _monotonic_ms,
        expected_version: str = PROTOCOL_VERSION,
    ):
        self._state = ReconcilerState(reading_interval_ms=reading_interval_ms)
        self._status = ConnectionStatus.DISCONNECTED
        self._send: Optional[Sender] = None
        self._clock = clock
        self._expected_version = expected_version
        self._listeners: list[Listener] = []
        self._total_received = 0
        self._total_malformed = 0
        self._total_throttled = 0

    # --- Read side ---

    @property
    def state(self) -> ReconcilerState:
        return self._state

    @property
    def incidents(self) -> list[Incident]:
        return list(self._state.incidents)

    @property
    def catalog(self) -> Catalog:
        return self._state.catalog

    @property
    def advisory(self) -> Optional[str]:
        return self._state.advisory

    @property
    def reading_interval_ms(self) -> int:
        return self._state.reading_interval_ms

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def connected(self) -> bool:
        return self._status == ConnectionStatus.CONNECTED

    def get(self, incident_id: str) -> Optional[Incident]:
        return next((i for i in self._state.incidents if i.incident_id == incident_id), None)

    def classify(
        self,
        bucket: IncidentBucket | str,
        escalation_level_id: Optional[str] = None,
        tag_ids: Optional[Sequence[str]] = None,
    ) -> list[Incident]:
        return classify(self._state.incidents, bucket, escalation_level_id, tag_ids)

    def classify_all(
        self,
        escalation_level_id: Optional[str] = None,
        tag_ids: Optional[Sequence[str]] = None,
    ) -> dict[IncidentBucket, list[Incident]]:
        return classify_all(self._state.incidents, escalation_level_id, tag_ids)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def get_stats(self) -> dict:
        return {
            "status": self._status.value,
            "incidents": len(self._state.incidents),
            "received": self._total_received,
            "malformed": self._total_malformed,
            "throttled": self._total_throttled,
            "reading_interval_ms": self._state.reading_interval_ms,
        }

    # --- Connection status ---

    def mark_connecting(self) -> None:
        self._status = ConnectionStatus.CONNECTING
        logger.debug("reconciler_connecting")

    async def mark_connected(self, send: Sender) -> None:
        """Attach the transport and announce the current reading interval."""
        self._send = send
        self._status = ConnectionStatus.CONNECTED
        self._set_state(replace(self._state, advisory=None, last_update_ms=None))
        logger.info("reconciler_connected")
        await self._transmit(SetReadingIntervalMessage(interval_ms=self._state.reading_interval_ms))

    def mark_disconnected(self) -> None:
        """Drop the transport. Local state is kept until the next init replaces it."""
        self._send = None
        if self._status != ConnectionStatus.DISCONNECTED:
            self._status = ConnectionStatus.DISCONNECTED
            logger.info("reconciler_disconnected")
            self._notify()

    # --- Inbound ---

    def receive(self, raw: str | bytes) -> bool:
        """Validate and apply one frame. Returns True if local state changed."""
        event = parse_server_message(raw)
        if isinstance(event, Rejection):
            self._total_malformed += 1
            logger.debug("reconciler_message_dropped", reason=event.reason)
            return False
        return self.apply(event)

    def apply(self, event: ServerEvent) -> bool:
        self._total_received += 1
        new_state = reduce(self._state, event, self._clock(), self._expected_version)
        if new_state is self._state:
            self._total_throttled += 1
            logger.debug("reconciler_update_throttled", incident_id=event.incident.incident_id)
            return False
        if new_state.advisory and new_state.advisory != self._state.advisory:
            logger.warning("reconciler_protocol_mismatch", advisory=new_state.advisory)
        self._set_state(new_state)
        return True

    # --- Outbound ---

    async def send_incident(self, incident: Incident) -> bool:
        """Request creation. Local state changes only when the hub echoes it back."""
        return await self._transmit(AddIncidentMessage(incident=incident))

    async def update_incident(self, incident: Incident) -> bool:
        """Apply the change optimistically, then request it from the hub."""
        self._set_state(merge_incident(self._state, incident))
        return await self._transmit(UpdateIncidentMessage(incident=incident))

    async def set_reading_interval(self, interval_ms: int) -> bool:
        if interval_ms < 0:
            raise ValueError("interval_ms cannot be negative")
        self._set_state(replace(self._state, reading_interval_ms=interval_ms))
        if not self.connected:
            return False
        return await self._transmit(SetReadingIntervalMessage(interval_ms=interval_ms))

    # --- Internals ---

    def _set_state(self, state: ReconcilerState) -> None:
        self._state = state
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.error("reconciler_listener_error", error=str(e))

    async def _transmit(self, message) -> bool:
        if self._send is None or not self.connected:
            logger.debug("reconciler_send_skipped", type=message.type, status=self._status.value)
            return False
        try:
            await self._send(encode_message(message))
        except Exception as e:
            logger.warning("reconciler_send_failed", type=message.type, error=str(e))
            return False
        return True
