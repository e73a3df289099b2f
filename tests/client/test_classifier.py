"""Tests for incident bucketing and facet filtering."""

import pytest

from incident_sync.client.classifier import (
    BUCKET_TITLES,
    IncidentBucket,
    bucket_for,
    classify,
    classify_all,
    matches_filters,
)
from incident_sync.models.incident import IncidentState


def _ids(incidents) -> list[str]:
    return [i.incident_id for i in incidents]


class TestBucketFor:
    def test_seeded_incidents_cover_every_bucket(self, seeded):
        assert [bucket_for(i) for i in seeded] == [
            IncidentBucket.NEW,
            IncidentBucket.ACTIVE,
            IncidentBucket.OBSERVED,
            IncidentBucket.COMPLETED,
        ]

    def test_empty_assignee_counts_as_unassigned(self, make_incident):
        assert bucket_for(make_incident(assigned_to="")) == IncidentBucket.NEW

    def test_state_wins_over_assignment(self, make_incident):
        assert bucket_for(make_incident(state_id=IncidentState.CLOSED)) == IncidentBucket.COMPLETED
        assert bucket_for(make_incident(state_id=IncidentState.OBSERVED)) == IncidentBucket.OBSERVED

    def test_every_bucket_has_a_title(self):
        assert set(BUCKET_TITLES) == set(IncidentBucket)


class TestFilters:
    def test_no_filters_matches(self, make_incident):
        assert matches_filters(make_incident()) is True
        assert matches_filters(make_incident(), "", []) is True

    def test_escalation_must_match(self, make_incident):
        incident = make_incident(escalation_level_id="esc-2")
        assert matches_filters(incident, "esc-2") is True
        assert matches_filters(incident, "esc-1") is False

    def test_tags_match_any(self, make_incident):
        incident = make_incident(lvl1_skill_id="skill-elec", skill_ids=["skill-ops"])
        assert matches_filters(incident, tag_ids=["skill-mech", "skill-ops"]) is True
        assert matches_filters(incident, tag_ids=["skill-mech"]) is False

    def test_untagged_incident_fails_tag_filter(self, make_incident):
        assert matches_filters(make_incident(), tag_ids=["skill-elec"]) is False


class TestClassify:
    def test_buckets_are_exhaustive_and_exclusive(self, seeded, make_incident):
        incidents = seeded + [
            make_incident("inc-a", assigned_to="user-9"),
            make_incident("inc-b", state_id=IncidentState.CLOSED),
            make_incident("inc-c", assigned_to=""),
        ]
        buckets = classify_all(incidents)

        all_ids = [i for rows in buckets.values() for i in _ids(rows)]
        assert sorted(all_ids) == sorted(_ids(incidents))
        assert len(all_ids) == len(set(all_ids))

    def test_classify_matches_classify_all(self, seeded):
        buckets = classify_all(seeded, "esc-2")
        for bucket in IncidentBucket:
            assert classify(seeded, bucket, "esc-2") == buckets[bucket]

    def test_escalation_filter(self, seeded):
        buckets = classify_all(seeded, "esc-2")
        assert _ids(buckets[IncidentBucket.NEW]) == []
        assert _ids(buckets[IncidentBucket.OBSERVED]) == ["inc-1003"]
        assert _ids(buckets[IncidentBucket.COMPLETED]) == ["inc-1004"]

    def test_tag_filter_is_or(self, seeded):
        buckets = classify_all(seeded, tag_ids=["skill-elec", "skill-scada"])
        assert _ids(buckets[IncidentBucket.NEW]) == ["inc-1001"]
        assert _ids(buckets[IncidentBucket.OBSERVED]) == ["inc-1003"]
        assert buckets[IncidentBucket.ACTIVE] == []

    @pytest.mark.parametrize("escalation", [None, "esc-1", "esc-2"])
    def test_adding_a_tag_never_narrows(self, seeded, make_incident, escalation):
        incidents = seeded + [
            make_incident("inc-a", lvl1_skill_id="skill-mech", escalation_level_id="esc-2"),
            make_incident("inc-b", skill_ids=["skill-ops", "skill-elec"], assigned_to="user-4"),
        ]
        tags = ["skill-elec", "skill-mech", "skill-scada", "skill-ops"]
        for first in tags:
            for second in tags:
                for bucket in IncidentBucket:
                    narrow = _ids(classify(incidents, bucket, escalation, [first]))
                    wide = _ids(classify(incidents, bucket, escalation, [first, second]))
                    assert set(narrow) <= set(wide)

    def test_escalation_and_tags_combine(self, seeded):
        assert classify(seeded, "new", "esc-2", ["skill-elec"]) == []
        assert _ids(classify(seeded, "new", "esc-1", ["skill-elec"])) == ["inc-1001"]

    def test_input_order_preserved(self, make_incident):
        incidents = [make_incident(f"inc-{n}") for n in (5, 3, 9, 1)]
        assert _ids(classify(incidents, IncidentBucket.NEW)) == ["inc-5", "inc-3", "inc-9", "inc-1"]

    def test_unknown_bucket_rejected(self, seeded):
        with pytest.raises(ValueError):
            classify(seeded, "archived")
