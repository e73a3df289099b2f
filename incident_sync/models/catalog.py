"""Catalog models — read-only reference tables used to label incidents."""

from typing import Optional

from pydantic import AliasChoices, Field, field_validator

from .base import WireModel


class Site(WireModel):
    id: str
    name: str


class Asset(WireModel):
    id: str
    site_id: str
    display_name: str
    model: str = ""
    region_name: str = ""


class Alarm(WireModel):
    alarm_id: str
    code: str
    description: str = ""
    legacy_id: Optional[str] = None


class EscalationLevel(WireModel):
    id: str
    name: str


class Skill(WireModel):
    id: str
    name: str


class Catalog(WireModel):
    """The five lookup tables. Absent or null tables become empty lists."""

    sites: list[Site] = Field(default_factory=list)
    assets: list[Asset] = Field(default_factory=list)
    alarms: list[Alarm] = Field(default_factory=list)
    escalation_levels: list[EscalationLevel] = Field(default_factory=list)
    skills: list[Skill] = Field(
        default_factory=list,
        validation_alias=AliasChoices("skills", "incidentTypes", "incident_types"),
    )

    @field_validator("sites", "assets", "alarms", "escalation_levels", "skills", mode="before")
    @classmethod
    def _null_table_is_empty(cls, v):
        return [] if v is None else v

    def find_site(self, site_id: str) -> Optional[Site]:
        return next((s for s in self.sites if s.id == site_id), None)

    def find_asset(self, asset_id: str) -> Optional[Asset]:
        return next((a for a in self.assets if a.id == asset_id), None)

    def find_alarm(self, alarm_id: str) -> Optional[Alarm]:
        return next((a for a in self.alarms if a.alarm_id == alarm_id), None)

    def find_escalation_level(self, level_id: str) -> Optional[EscalationLevel]:
        return next((e for e in self.escalation_levels if e.id == level_id), None)

    def find_skill(self, skill_id: str) -> Optional[Skill]:
        return next((s for s in self.skills if s.id == skill_id), None)

    @property
    def is_empty(self) -> bool:
        return not (self.sites or self.assets or self.alarms or self.escalation_levels or self.skills)
