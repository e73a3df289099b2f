"""Read-only incident routes — snapshots of the hub's canonical collection."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ...client.actions import describe_incident
from ...client.classifier import IncidentBucket, classify, classify_all, matches_filters
from ...dependencies import get_hub

router = APIRouter(prefix="/incidents", tags=["incidents"])


@router.get("/")
async def list_incidents(
    bucket: Optional[IncidentBucket] = None,
    escalation_level_id: Optional[str] = None,
    tag: list[str] = Query(default=[]),
):
    """List incidents newest-first, optionally narrowed to one bucket and facets."""
    incidents = get_hub().store.snapshot()
    if bucket is not None:
        rows = classify(incidents, bucket, escalation_level_id, tag)
    else:
        rows = [i for i in incidents if matches_filters(i, escalation_level_id, tag)]
    return [incident.to_wire() for incident in rows]


@router.get("/buckets")
async def list_buckets(
    escalation_level_id: Optional[str] = None,
    tag: list[str] = Query(default=[]),
):
    """All four buckets at once, keyed by bucket name."""
    buckets = classify_all(get_hub().store.snapshot(), escalation_level_id, tag)
    return {bucket.value: [i.to_wire() for i in rows] for bucket, rows in buckets.items()}


@router.get("/{incident_id}")
async def get_incident(incident_id: str):
    """Incident detail with catalog labels resolved."""
    hub = get_hub()
    incident = hub.store.get(incident_id)
    if incident is None:
        raise HTTPException(status_code=404, detail="Incident not found")
    return describe_incident(incident, hub.catalog).to_dict()
