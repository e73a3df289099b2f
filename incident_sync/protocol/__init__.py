"""Wire protocol package."""

from .messages import (
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

__all__ = [
    "PROTOCOL_VERSION",
    "AddIncidentMessage",
    "IncidentAddedMessage",
    "IncidentUpdatedMessage",
    "InitMessage",
    "Rejection",
    "SetReadingIntervalMessage",
    "UpdateIncidentMessage",
    "encode_message",
    "parse_client_message",
    "parse_server_message",
]
