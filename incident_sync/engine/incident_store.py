"""Incident Store — the canonical, ordered, in-memory incident collection.

Newest-first is the natural order. Incidents are never removed. The store is
owned by a single writer (the hub); it does no locking of its own.
"""

from typing import Iterable, Optional

from ..models.incident import Incident
from ..utils.logging import get_logger

logger = get_logger("engine.incident_store")


def upsert_incident(incidents: list[Incident], incident: Incident) -> list[Incident]:
    """Return a new list with ``incident`` merged in by identity.

    The first record with the same ``incident_id`` is replaced in place, keeping
    its position. Without a match the incident is prepended.
    """
    for index, existing in enumerate(incidents):
        if existing.incident_id == incident.incident_id:
            merged = list(incidents)
            merged[index] = incident
            return merged
    return [incident, *incidents]


class IncidentStore:
    """Ordered incident collection with insert and merge-update."""

    def __init__(self, incidents: Iterable[Incident] | None = None):
        self._incidents: list[Incident] = list(incidents or [])

    def __len__(self) -> int:
        return len(self._incidents)

    def snapshot(self) -> list[Incident]:
        """Copy of the current collection. Incidents are immutable, so this is by value."""
        return list(self._incidents)

    def get(self, incident_id: str) -> Optional[Incident]:
        return next((i for i in self._incidents if i.incident_id == incident_id), None)

    def insert(self, incident: Incident) -> Incident:
        """Insert at the front. Does not check for an existing id."""
        self._incidents.insert(0, incident)
        logger.debug("store_inserted", incident_id=incident.incident_id, size=len(self._incidents))
        return incident

    def upsert(self, incident: Incident) -> Incident:
        """Replace the stored incident with the same id, or prepend it.

        The stored ``created_at`` wins over the incoming one. Returns the record
        actually stored.
        """
        existing = self.get(incident.incident_id)
        if existing is not None and existing.created_at != incident.created_at:
            incident = incident.model_copy(update={"created_at": existing.created_at})
        self._incidents = upsert_incident(self._incidents, incident)
        logger.debug(
            "store_upserted",
            incident_id=incident.incident_id,
            replaced=existing is not None,
            size=len(self._incidents),
        )
        return incident

    def replace_all(self, incidents: Iterable[Incident]) -> None:
        self._incidents = list(incidents)
