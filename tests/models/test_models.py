"""Tests for the incident and catalog wire models."""

import pytest
from pydantic import ValidationError

from incident_sync.models.catalog import Catalog
from incident_sync.models.incident import Incident, IncidentState

INCIDENT_JSON = {
    "incidentId": "inc-5001",
    "siteId": "site-1",
    "assetId": "asset-2",
    "alarmId": "alarm-220",
    "priority": 2,
    "occurrences": 3,
    "createdAt": "2024-05-01T10:00:00Z",
    "stateId": "OPEN",
    "escalationLevelId": "esc-1",
    "lvl1SkillId": "skill-elec",
}


class TestIncident:
    def test_parses_camel_case(self):
        incident = Incident.model_validate(INCIDENT_JSON)
        assert incident.incident_id == "inc-5001"
        assert incident.state_id == IncidentState.OPEN
        assert incident.assigned_to is None
        assert incident.readings == []

    def test_to_wire_round_trips_names(self):
        wire = Incident.model_validate(INCIDENT_JSON).to_wire()
        assert wire["incidentId"] == "inc-5001"
        assert wire["escalationLevelId"] == "esc-1"
        assert "assignedTo" not in wire
        assert "updatedAt" not in wire

    def test_unknown_fields_ignored(self):
        incident = Incident.model_validate({**INCIDENT_JSON, "colour": "red"})
        assert not hasattr(incident, "colour")

    @pytest.mark.parametrize("alias", ["skillIds", "incidentTypeIds"])
    def test_tag_list_aliases(self, alias):
        incident = Incident.model_validate({**INCIDENT_JSON, alias: ["skill-ops", "skill-elec"]})
        assert incident.skill_ids == ["skill-ops", "skill-elec"]

    def test_tag_ids_ordered_and_unique(self, make_incident):
        incident = make_incident(
            lvl1_skill_id="skill-elec",
            lvl2_skill_id="skill-mech",
            skill_ids=["skill-mech", "skill-ops"],
        )
        assert incident.tag_ids == ["skill-elec", "skill-mech", "skill-ops"]

    @pytest.mark.parametrize("assigned_to, expected", [(None, False), ("", False), ("user-1", True)])
    def test_is_assigned(self, make_incident, assigned_to, expected):
        assert make_incident(assigned_to=assigned_to).is_assigned is expected

    @pytest.mark.parametrize("field", ["priority", "occurrences"])
    def test_counts_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            Incident.model_validate({**INCIDENT_JSON, field: 0})

    def test_unknown_state_rejected(self):
        with pytest.raises(ValidationError):
            Incident.model_validate({**INCIDENT_JSON, "stateId": "ARCHIVED"})

    def test_immutable(self, make_incident):
        incident = make_incident()
        with pytest.raises(ValidationError):
            incident.priority = 5


class TestCatalog:
    def test_null_and_missing_tables_are_empty(self):
        catalog = Catalog.model_validate({"sites": None, "alarms": None})
        assert catalog.sites == []
        assert catalog.escalation_levels == []
        assert catalog.is_empty

    def test_incident_types_alias(self):
        catalog = Catalog.model_validate({"incidentTypes": [{"id": "t-1", "name": "Leak"}]})
        assert catalog.find_skill("t-1").name == "Leak"
        assert "skills" in catalog.to_wire()

    def test_lookups(self, catalog):
        assert catalog.find_site("site-2").name == "Harbor District Facility"
        assert catalog.find_asset("asset-4").region_name == "South Yard 1"
        assert catalog.find_alarm("alarm-310").code == "HV-310"
        assert catalog.find_escalation_level("esc-2").name == "Level 2"
        assert catalog.find_site("site-missing") is None
        assert not catalog.is_empty

    def test_wire_names(self, catalog):
        wire = catalog.to_wire()
        assert wire["assets"][0]["displayName"] == "Chiller CH-11"
        assert wire["alarms"][0]["alarmId"] == "alarm-100"
        assert wire["escalationLevels"][1]["id"] == "esc-2"
