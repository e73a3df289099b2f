"""Tests for wire message parsing at the protocol boundary."""

import json

import pytest

from incident_sync.protocol.messages import (
    PROTOCOL_VERSION,
    AddIncidentMessage,
    IncidentAddedMessage,
    IncidentUpdatedMessage,
    InitMessage,
    Rejection,
    SetReadingIntervalMessage,
    UpdateIncidentMessage,
    encode_message,
    parse_client_message,
    parse_server_message,
)


class TestServerMessages:
    def test_init_with_catalog(self, seeded, catalog):
        raw = encode_message(InitMessage(incidents=seeded, catalog=catalog, protocol_version=PROTOCOL_VERSION))
        message = parse_server_message(raw)

        assert isinstance(message, InitMessage)
        assert message.incidents == seeded
        assert message.catalog == catalog
        assert message.protocol_version == "1"

    def test_init_without_catalog(self):
        message = parse_server_message('{"type": "init", "incidents": []}')
        assert isinstance(message, InitMessage)
        assert message.catalog.is_empty
        assert message.protocol_version is None

    def test_dispatch_by_type(self, make_incident):
        incident = make_incident("inc-7")
        added = parse_server_message(encode_message(IncidentAddedMessage(incident=incident)))
        updated = parse_server_message(encode_message(IncidentUpdatedMessage(incident=incident)))

        assert isinstance(added, IncidentAddedMessage)
        assert isinstance(updated, IncidentUpdatedMessage)
        assert updated.incident == incident

    def test_client_message_rejected_on_server_channel(self, make_incident):
        raw = encode_message(AddIncidentMessage(incident=make_incident()))
        assert isinstance(parse_server_message(raw), Rejection)

    @pytest.mark.parametrize("raw", [
        "",
        "not json",
        "[1, 2]",
        '{"incidents": []}',
        '{"type": "init"}',
        '{"type": "incidentAdded", "incident": {"incidentId": "x"}}',
    ])
    def test_malformed(self, raw):
        rejection = parse_server_message(raw)
        assert isinstance(rejection, Rejection)
        assert rejection.reason


class TestClientMessages:
    def test_set_reading_interval(self):
        message = parse_client_message('{"type": "setReadingInterval", "intervalMs": 250}')
        assert isinstance(message, SetReadingIntervalMessage)
        assert message.interval_ms == 250

    def test_negative_interval_rejected(self):
        assert isinstance(parse_client_message('{"type": "setReadingInterval", "intervalMs": -5}'), Rejection)

    def test_update_from_bytes(self, make_incident):
        raw = encode_message(UpdateIncidentMessage(incident=make_incident("inc-8"))).encode("utf-8")
        message = parse_client_message(raw)
        assert isinstance(message, UpdateIncidentMessage)
        assert message.incident.incident_id == "inc-8"

    def test_undecodable_bytes(self):
        assert isinstance(parse_client_message(b"\xff\xfe\x00"), Rejection)


class TestEncode:
    def test_camel_case_and_no_nulls(self, make_incident):
        frame = json.loads(encode_message(AddIncidentMessage(incident=make_incident("inc-9"))))

        assert frame["type"] == "addIncident"
        assert frame["incident"]["incidentId"] == "inc-9"
        assert "assignedTo" not in frame["incident"]

    def test_type_tag_always_present(self):
        assert json.loads(encode_message(SetReadingIntervalMessage(interval_ms=0))) == {
            "type": "setReadingInterval",
            "intervalMs": 0,
        }
