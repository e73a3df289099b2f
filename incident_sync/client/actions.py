"""Incident actions — the decisions behind board interactions.

Dropping a row on a bucket, submitting the create form and opening the detail
view each reduce to a pure function here; rendering stays with the caller.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from ..models.catalog import Catalog
from ..models.incident import INCIDENT_STATE_LABELS, Incident, IncidentState, Reading
from .classifier import IncidentBucket, bucket_for

UNKNOWN_LABEL = "Unknown"

_BUCKET_STATES = {
    IncidentBucket.NEW: IncidentState.OPEN,
    IncidentBucket.ACTIVE: IncidentState.OPEN,
    IncidentBucket.OBSERVED: IncidentState.OBSERVED,
    IncidentBucket.COMPLETED: IncidentState.CLOSED,
}


def move_to_bucket(
    incident: Incident,
    target: IncidentBucket | str,
    default_assignee: str = "user-1",
) -> Incident:
    """Return the incident as it must look to land in ``target``.

    ``new`` clears the assignee. Every other target keeps it, falling back to
    ``default_assignee`` when the incident has none.
    """
    target = IncidentBucket(target)
    if target == IncidentBucket.NEW:
        assigned_to = None
    else:
        assigned_to = incident.assigned_to or default_assignee
    return incident.model_copy(update={"state_id": _BUCKET_STATES[target], "assigned_to": assigned_to})


def generate_incident_id() -> str:
    return f"inc-{int(time.time() * 1000)}"


def build_incident(
    catalog: Catalog,
    *,
    incident_id: Optional[str] = None,
    site_id: Optional[str] = None,
    asset_id: Optional[str] = None,
    alarm_id: Optional[str] = None,
    priority: int = 1,
    occurrences: int = 1,
    state_id: IncidentState | str = IncidentState.OPEN,
    escalation_level_id: Optional[str] = None,
    skill_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Incident:
    """Build a new incident from form values, filling blanks from the catalog.

    A blank id becomes ``inc-<epoch ms>``. Unset references default to the first
    entry of the matching catalog table, or an empty string when it is empty.
    Raises ``pydantic.ValidationError`` for out-of-range priority/occurrences.
    """
    def first(rows, attr: str) -> str:
        return getattr(rows[0], attr) if rows else ""

    return Incident(
        incident_id=(incident_id or "").strip() or generate_incident_id(),
        site_id=site_id or first(catalog.sites, "id"),
        asset_id=asset_id or first(catalog.assets, "id"),
        alarm_id=alarm_id or first(catalog.alarms, "alarm_id"),
        priority=priority,
        occurrences=occurrences,
        created_at=created_at or datetime.now(timezone.utc),
        state_id=IncidentState(state_id),
        escalation_level_id=escalation_level_id or first(catalog.escalation_levels, "id"),
        lvl1_skill_id=skill_id or (first(catalog.skills, "id") or None),
    )


@dataclass
class IncidentDetail:
    """Display-ready view of one incident."""
    incident_id: str
    site: str
    asset: str
    alarm: str
    alarm_description: str
    escalation_level: str
    skills: list[str]
    priority: int
    occurrences: int
    status: str
    assigned_to: Optional[str]
    bucket: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    readings: list[Reading] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "incidentId": self.incident_id,
            "site": self.site,
            "asset": self.asset,
            "alarm": self.alarm,
            "alarmDescription": self.alarm_description,
            "escalationLevel": self.escalation_level,
            "skills": self.skills,
            "priority": self.priority,
            "occurrences": self.occurrences,
            "status": self.status,
            "assignedTo": self.assigned_to,
            "bucket": self.bucket,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "readings": [r.to_wire() for r in self.readings],
        }


def site_label(catalog: Catalog, site_id: str) -> str:
    site = catalog.find_site(site_id)
    return site.name if site else f"{UNKNOWN_LABEL} site"


def asset_label(catalog: Catalog, asset_id: str) -> str:
    asset = catalog.find_asset(asset_id)
    return asset.display_name if asset else f"{UNKNOWN_LABEL} asset"


def alarm_label(catalog: Catalog, alarm_id: str) -> str:
    alarm = catalog.find_alarm(alarm_id)
    return alarm.code if alarm else f"{UNKNOWN_LABEL} alarm"


def escalation_label(catalog: Catalog, level_id: str) -> str:
    level = catalog.find_escalation_level(level_id)
    return level.name if level else f"{UNKNOWN_LABEL} escalation level"


def skill_label(catalog: Catalog, skill_id: str) -> str:
    skill = catalog.find_skill(skill_id)
    return skill.name if skill else f"{UNKNOWN_LABEL} skill"


def describe_incident(incident: Incident, catalog: Catalog) -> IncidentDetail:
    alarm = catalog.find_alarm(incident.alarm_id)
    return IncidentDetail(
        incident_id=incident.incident_id,
        site=site_label(catalog, incident.site_id),
        asset=asset_label(catalog, incident.asset_id),
        alarm=alarm_label(catalog, incident.alarm_id),
        alarm_description=alarm.description if alarm else "",
        escalation_level=escalation_label(catalog, incident.escalation_level_id),
        skills=[skill_label(catalog, tag) for tag in incident.tag_ids],
        priority=incident.priority,
        occurrences=incident.occurrences,
        status=INCIDENT_STATE_LABELS[incident.state_id],
        assigned_to=incident.assigned_to,
        bucket=bucket_for(incident).value,
        created_at=incident.created_at,
        updated_at=incident.updated_at,
        readings=list(incident.readings),
    )
