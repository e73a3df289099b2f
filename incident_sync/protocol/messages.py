"""Wire protocol — tagged-union message types and boundary validation.

Every frame is one JSON object with a ``type`` discriminator. Inbound text is
validated once here; anything past this boundary is a typed message.

Server -> client: ``init``, ``incidentAdded``, ``incidentUpdated``.
Client -> server: ``addIncident``, ``updateIncident``, ``setReadingInterval``.
"""

from dataclasses import dataclass
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, TypeAdapter, ValidationError

from ..models.base import WireModel
from ..models.catalog import Catalog
from ..models.incident import Incident

PROTOCOL_VERSION = "1"


# ── Server -> client ──
class InitMessage(WireModel):
    type: Literal["init"] = "init"
    incidents: list[Incident]
    catalog: Catalog = Field(default_factory=Catalog)
    protocol_version: Optional[str] = None


class IncidentAddedMessage(WireModel):
    type: Literal["incidentAdded"] = "incidentAdded"
    incident: Incident


class IncidentUpdatedMessage(WireModel):
    type: Literal["incidentUpdated"] = "incidentUpdated"
    incident: Incident


# ── Client -> server ──
class AddIncidentMessage(WireModel):
    type: Literal["addIncident"] = "addIncident"
    incident: Incident


class UpdateIncidentMessage(WireModel):
    type: Literal["updateIncident"] = "updateIncident"
    incident: Incident


class SetReadingIntervalMessage(WireModel):
    type: Literal["setReadingInterval"] = "setReadingInterval"
    interval_ms: int = Field(ge=0)


ServerMessage = Annotated[
    Union[InitMessage, IncidentAddedMessage, IncidentUpdatedMessage],
    Field(discriminator="type"),
]
ClientMessage = Annotated[
    Union[AddIncidentMessage, UpdateIncidentMessage, SetReadingIntervalMessage],
    Field(discriminator="type"),
]

_server_adapter: TypeAdapter = TypeAdapter(ServerMessage)
_client_adapter: TypeAdapter = TypeAdapter(ClientMessage)


@dataclass(frozen=True)
class Rejection:
    """A frame that failed boundary validation. Never sent back to the peer."""
    reason: str


def _summarize(exc: ValidationError) -> str:
    errors = []
    for error in exc.errors()[:3]:
        loc = ".".join(str(part) for part in error["loc"])
        errors.append(f"{loc}: {error['type']}" if loc else error["type"])
    return "; ".join(errors)


def _parse(adapter: TypeAdapter, raw: str | bytes):
    try:
        return adapter.validate_json(raw)
    except ValidationError as exc:
        return Rejection(reason=_summarize(exc))
    except ValueError as exc:
        # Undecodable bytes
        return Rejection(reason=str(exc))


def parse_server_message(raw: str | bytes) -> "InitMessage | IncidentAddedMessage | IncidentUpdatedMessage | Rejection":
    """Validate a frame received by a client."""
    return _parse(_server_adapter, raw)


def parse_client_message(raw: str | bytes) -> "AddIncidentMessage | UpdateIncidentMessage | SetReadingIntervalMessage | Rejection":
    """Validate a frame received by the hub."""
    return _parse(_client_adapter, raw)


def encode_message(message: WireModel) -> str:
    """Serialize a message to its JSON text frame."""
    return message.model_dump_json(by_alias=True, exclude_none=True)
