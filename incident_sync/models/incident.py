"""Incident model — a tracked facility alarm event and its trend readings."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, Field

from .base import WireModel


class IncidentState(str, Enum):
    OPEN = "OPEN"
    OBSERVED = "OBSERVED"
    CLOSED = "CLOSED"


INCIDENT_STATE_LABELS = {
    IncidentState.OPEN: "Open",
    IncidentState.OBSERVED: "Observed",
    IncidentState.CLOSED: "Closed",
}


class Reading(WireModel):
    """A single time-series point used for the detail trend chart."""
    timestamp: datetime
    temperature: float
    pressure: float


class Incident(WireModel):
    incident_id: str = Field(min_length=1)
    site_id: str
    asset_id: str
    alarm_id: str
    priority: int = Field(ge=1)
    occurrences: int = Field(ge=1)
    created_at: datetime
    updated_at: Optional[datetime] = None
    assigned_to: Optional[str] = None
    state_id: IncidentState
    escalation_level_id: str
    lvl1_skill_id: Optional[str] = None
    lvl2_skill_id: Optional[str] = None
    skill_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("skillIds", "incidentTypeIds", "skill_ids"),
    )
    readings: list[Reading] = Field(default_factory=list)

    @property
    def is_assigned(self) -> bool:
        # Empty string counts as unassigned, same as null/absent
        return bool(self.assigned_to)

    @property
    def tag_ids(self) -> list[str]:
        """Skill / incident-type tags in declaration order, without duplicates."""
        tags: list[str] = []
        for tag in (self.lvl1_skill_id, self.lvl2_skill_id, *self.skill_ids):
            if tag and tag not in tags:
                tags.append(tag)
        return tags
