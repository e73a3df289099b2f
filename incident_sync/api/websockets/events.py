"""Real-time incident WebSocket endpoint."""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ...dependencies import get_hub
from ...utils.logging import get_logger

logger = get_logger("websocket.events")

router = APIRouter()


@router.websocket("/ws/incidents")
@router.websocket("/")
async def incident_socket(websocket: WebSocket):
    """WebSocket endpoint for the incident board.

    On connect the peer receives one ``init`` frame:
    {"type": "init", "incidents": [...], "catalog": {...}, "protocolVersion": "1"}

    Afterwards it may send ``addIncident`` / ``updateIncident`` /
    ``setReadingInterval`` frames and receives every ``incidentAdded`` /
    ``incidentUpdated`` the hub broadcasts. Unrecognised frames are ignored.
    """
    hub = get_hub()
    if not await hub.on_connect(websocket):
        return

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            if raw is None:
                continue
            await hub.on_message(websocket, raw)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error("ws_error", error=str(e))
    finally:
        await hub.on_disconnect(websocket)
