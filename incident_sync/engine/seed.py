"""Built-in reference dataset used to seed the hub at startup."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from ..models.catalog import Alarm, Asset, Catalog, EscalationLevel, Site, Skill
from ..models.incident import Incident, IncidentState

ESCALATION_LEVELS = [
    EscalationLevel(id="esc-1", name="Level 1"),
    EscalationLevel(id="esc-2", name="Level 2"),
]

SKILLS = [
    Skill(id="skill-elec", name="Electrical"),
    Skill(id="skill-mech", name="Cooling"),
    Skill(id="skill-scada", name="Controls"),
    Skill(id="skill-ops", name="Facilities"),
]

SITES = [
    Site(id="site-1", name="North Campus Plant"),
    Site(id="site-2", name="Harbor District Facility"),
]

ASSETS = [
    Asset(id="asset-1", site_id="site-1", display_name="Chiller CH-11",
          model="Trane RTAC 250", region_name="Mechanical Room 3"),
    Asset(id="asset-2", site_id="site-1", display_name="AHU AH-19",
          model="Carrier 39HQ", region_name="Roof Zone 2"),
    Asset(id="asset-3", site_id="site-2", display_name="Boiler BL-03",
          model="Cleaver-Brooks CB-500", region_name="Basement Plant 5"),
    Asset(id="asset-4", site_id="site-2", display_name="Cooling Tower CT-21",
          model="BAC FXV", region_name="South Yard 1"),
]

ALARMS = [
    Alarm(alarm_id="alarm-100", code="HV-100", description="High condenser pressure", legacy_id="100"),
    Alarm(alarm_id="alarm-220", code="HV-220", description="Supply air temp deviation", legacy_id="220"),
    Alarm(alarm_id="alarm-310", code="HV-310", description="Boiler flame failure", legacy_id="310"),
    Alarm(alarm_id="alarm-420", code="HV-420", description="BAS comms loss", legacy_id="420"),
]


def default_catalog() -> Catalog:
    return Catalog(
        sites=SITES,
        assets=ASSETS,
        alarms=ALARMS,
        escalation_levels=ESCALATION_LEVELS,
        skills=SKILLS,
    )


def seed_incidents(now: Optional[datetime] = None) -> list[Incident]:
    """Four demo incidents, one per bucket, timestamped relative to ``now``."""
    now = now or datetime.now(timezone.utc)
    return [
        Incident(
            incident_id="inc-1001",
            site_id="site-1",
            asset_id="asset-1",
            alarm_id="alarm-100",
            priority=1,
            occurrences=2,
            created_at=now - timedelta(minutes=12),
            state_id=IncidentState.OPEN,
            escalation_level_id="esc-1",
            lvl1_skill_id="skill-elec",
        ),
        Incident(
            incident_id="inc-1002",
            site_id="site-2",
            asset_id="asset-3",
            alarm_id="alarm-310",
            priority=2,
            occurrences=1,
            created_at=now - timedelta(minutes=42),
            assigned_to="user-2",
            state_id=IncidentState.OPEN,
            escalation_level_id="esc-1",
            lvl1_skill_id="skill-mech",
        ),
        Incident(
            incident_id="inc-1003",
            site_id="site-2",
            asset_id="asset-4",
            alarm_id="alarm-420",
            priority=3,
            occurrences=4,
            created_at=now - timedelta(minutes=90),
            assigned_to="user-1",
            state_id=IncidentState.OBSERVED,
            escalation_level_id="esc-2",
            lvl2_skill_id="skill-scada",
        ),
        Incident(
            incident_id="inc-1004",
            site_id="site-1",
            asset_id="asset-2",
            alarm_id="alarm-220",
            priority=1,
            occurrences=3,
            created_at=now - timedelta(minutes=180),
            updated_at=now - timedelta(minutes=30),
            assigned_to="user-1",
            state_id=IncidentState.CLOSED,
            escalation_level_id="esc-2",
            lvl2_skill_id="skill-ops",
        ),
    ]
