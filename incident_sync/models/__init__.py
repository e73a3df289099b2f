"""Pydantic wire models package."""

from .base import WireModel
from .catalog import Alarm, Asset, Catalog, EscalationLevel, Site, Skill
from .incident import INCIDENT_STATE_LABELS, Incident, IncidentState, Reading

__all__ = [
    "WireModel",
    "Alarm",
    "Asset",
    "Catalog",
    "EscalationLevel",
    "Site",
    "Skill",
    "INCIDENT_STATE_LABELS",
    "Incident",
    "IncidentState",
    "Reading",
]
