"""aiohttp WebSocket transport that drives a ConnectionReconciler.

One ``run()`` is one connection. There is no automatic reconnect: calling
``run()`` again opens a fresh connection whose ``init`` replaces local state.
"""

from typing import Optional

import aiohttp

from ..utils.logging import get_logger
from .reconciler import ConnectionReconciler

logger = get_logger("client.socket_client")


class IncidentSocketClient:
    """Connects a reconciler to the hub's WebSocket endpoint."""

    def __init__(
        self,
        url: str,
        reconciler: ConnectionReconciler,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self._url = url
        self._reconciler = reconciler
        self._session = session
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None

    @property
    def reconciler(self) -> ConnectionReconciler:
        return self._reconciler

    async def run(self) -> None:
        """Connect, pump frames into the reconciler until the socket closes."""
        self._reconciler.mark_connecting()
        owns_session = self._session is None
        session = self._session or aiohttp.ClientSession(
            headers={"User-Agent": "IncidentSync-Client/0.1"},
        )
        try:
            async with session.ws_connect(self._url) as ws:
                self._ws = ws
                logger.info("client_connected", url=self._url)
                await self._reconciler.mark_connected(ws.send_str)
                async for msg in ws:
                    if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                        self._reconciler.receive(msg.data)
                    elif msg.type == aiohttp.WSMsgType.ERROR:
                        logger.warning("client_socket_error", error=str(ws.exception()))
                        break
        except aiohttp.ClientError as e:
            logger.warning("client_connection_failed", url=self._url, error=str(e))
        finally:
            self._ws = None
            self._reconciler.mark_disconnected()
            if owns_session:
                await session.close()

    async def close(self) -> None:
        """Close the live socket, if any. ``run()`` then returns."""
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
