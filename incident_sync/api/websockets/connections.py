"""Per-peer WebSocket send queues with failure-isolated fan-out."""

import asyncio
from typing import Any

from fastapi import WebSocket

from ...utils.logging import get_logger

logger = get_logger("websocket.connections")


class ConnectionManager:
    """Manages accepted WebSocket peers, each drained by its own writer task.

    Sending only ever enqueues, so a slow or dead peer cannot stall the caller
    or any other peer. A peer whose queue overflows, or whose socket errors on
    send, is evicted and its pending messages are discarded.
    """

    def __init__(self, max_connections: int = 100, queue_size: int = 100):
        self._connections: dict[WebSocket, asyncio.Queue] = {}
        self._writer_tasks: dict[WebSocket, asyncio.Task] = {}
        self._metadata: dict[WebSocket, dict[str, Any]] = {}
        self._closing: set[asyncio.Task] = set()
        self._max_connections = max_connections
        self._queue_size = queue_size
        self._total_evicted = 0

    async def accept(self, websocket: WebSocket) -> bool:
        """Complete the handshake if under the limit. Returns False if rejected."""
        if len(self._connections) >= self._max_connections:
            await websocket.close(code=1013)  # Try Again Later
            logger.warning("ws_connection_rejected", reason="max_connections", total=len(self._connections))
            return False
        await websocket.accept()
        return True

    def register(self, websocket: WebSocket) -> None:
        """Start the writer for an accepted peer. Synchronous so callers can
        register and enqueue a first message without yielding in between."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        self._connections[websocket] = queue
        self._metadata[websocket] = {}
        self._writer_tasks[websocket] = asyncio.create_task(self._writer(websocket, queue))
        logger.info("ws_client_connected", total=len(self._connections))

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a peer, cancel its writer, and close the socket."""
        known = websocket in self._connections
        self._forget(websocket, cancel_writer=True)
        try:
            await websocket.close()
        except Exception as e:
            logger.debug("ws_close_failed", error=str(e))
        if known:
            logger.info("ws_client_disconnected", total=len(self._connections))

    def send(self, websocket: WebSocket, text: str) -> bool:
        """Enqueue a frame for one peer. Returns False if the peer is gone or evicted."""
        queue = self._connections.get(websocket)
        if queue is None:
            return False
        try:
            queue.put_nowait(text)
        except asyncio.QueueFull:
            logger.warning("ws_client_backpressure_disconnect")
            self._evict(websocket)
            return False
        return True

    def broadcast(self, text: str) -> int:
        """Enqueue a frame for every peer. Returns how many peers accepted it."""
        delivered = 0
        for websocket in list(self._connections):
            if self.send(websocket, text):
                delivered += 1
        return delivered

    def set_metadata(self, websocket: WebSocket, key: str, value: Any) -> None:
        if websocket in self._metadata:
            self._metadata[websocket][key] = value

    def get_metadata(self, websocket: WebSocket, key: str, default: Any = None) -> Any:
        return self._metadata.get(websocket, {}).get(key, default)

    async def flush(self) -> None:
        """Wait until every queued frame has been written or discarded."""
        await asyncio.gather(*(queue.join() for queue in list(self._connections.values())))

    async def close_all(self) -> None:
        """Close all connections gracefully."""
        for websocket in list(self._connections):
            await self.disconnect(websocket)
        if self._closing:
            await asyncio.gather(*self._closing, return_exceptions=True)

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    @property
    def total_evicted(self) -> int:
        return self._total_evicted

    def __contains__(self, websocket: object) -> bool:
        return websocket in self._connections

    def _forget(self, websocket: WebSocket, cancel_writer: bool) -> None:
        self._connections.pop(websocket, None)
        self._metadata.pop(websocket, None)
        task = self._writer_tasks.pop(websocket, None)
        if cancel_writer and task and not task.done() and task is not asyncio.current_task():
            task.cancel()

    def _evict(self, websocket: WebSocket) -> None:
        if websocket not in self._connections:
            return
        self._forget(websocket, cancel_writer=True)
        self._total_evicted += 1
        task = asyncio.create_task(self._close_quietly(websocket))
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)
        logger.info("ws_client_evicted", total=len(self._connections))

    async def _close_quietly(self, websocket: WebSocket) -> None:
        try:
            await websocket.close()
        except Exception as e:
            logger.debug("ws_close_failed", error=str(e))

    @staticmethod
    def _discard_pending(queue: asyncio.Queue) -> None:
        while True:
            try:
                queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            queue.task_done()

    async def _writer(self, websocket: WebSocket, queue: asyncio.Queue) -> None:
        """Per-connection writer coroutine that drains the queue."""
        try:
            while True:
                message = await queue.get()
                try:
                    await websocket.send_text(message)
                finally:
                    queue.task_done()
        except asyncio.CancelledError:
            return
        except Exception as e:
            # Peer closed mid-send: skip it from now on, never retry
            logger.debug("ws_writer_error", error=str(e))
            self._evict(websocket)
        finally:
            self._discard_pending(queue)
