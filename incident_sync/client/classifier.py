"""Incident classification — pure bucketing and facet filtering.

Filtering runs first (escalation level AND any-of selected tags), then each
surviving incident lands in exactly one bucket decided by its state and
assignment. Input order is preserved in every output.
"""

from enum import Enum
from typing import Iterable, Optional, Sequence

from ..models.incident import Incident, IncidentState


class IncidentBucket(str, Enum):
    NEW = "new"
    ACTIVE = "active"
    OBSERVED = "observed"
    COMPLETED = "completed"


BUCKET_TITLES = {
    IncidentBucket.NEW: "New incidents",
    IncidentBucket.ACTIVE: "Active incidents",
    IncidentBucket.OBSERVED: "Observed incidents",
    IncidentBucket.COMPLETED: "Completed incidents",
}


def bucket_for(incident: Incident) -> IncidentBucket:
    """State decides first; assignment only splits OPEN into new/active."""
    if incident.state_id == IncidentState.CLOSED:
        return IncidentBucket.COMPLETED
    if incident.state_id == IncidentState.OBSERVED:
        return IncidentBucket.OBSERVED
    return IncidentBucket.ACTIVE if incident.is_assigned else IncidentBucket.NEW


def matches_filters(
    incident: Incident,
    escalation_level_id: Optional[str] = None,
    tag_ids: Optional[Sequence[str]] = None,
) -> bool:
    if escalation_level_id and incident.escalation_level_id != escalation_level_id:
        return False
    if tag_ids:
        incident_tags = incident.tag_ids
        if not any(tag in incident_tags for tag in tag_ids):
            return False
    return True


def classify(
    incidents: Iterable[Incident],
    bucket: IncidentBucket | str,
    escalation_level_id: Optional[str] = None,
    tag_ids: Optional[Sequence[str]] = None,
) -> list[Incident]:
    """Incidents passing the filters that fall in ``bucket``, in input order."""
    target = IncidentBucket(bucket)
    return [
        incident
        for incident in incidents
        if matches_filters(incident, escalation_level_id, tag_ids) and bucket_for(incident) == target
    ]


def classify_all(
    incidents: Iterable[Incident],
    escalation_level_id: Optional[str] = None,
    tag_ids: Optional[Sequence[str]] = None,
) -> dict[IncidentBucket, list[Incident]]:
    """All four buckets in a single pass."""
    buckets: dict[IncidentBucket, list[Incident]] = {bucket: [] for bucket in IncidentBucket}
    for incident in incidents:
        if matches_filters(incident, escalation_level_id, tag_ids):
            buckets[bucket_for(incident)].append(incident)
    return buckets
