"""Telemetry Simulator — feeds synthetic readings into open incidents.

Stands in for a real sensor feed so the client-side throttle has a
high-frequency update stream to work against. Each tick picks the next
non-closed incident in round-robin order and pushes one reading through the
hub's serialized update path.
"""

import asyncio
import random
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from ..models.incident import Incident, IncidentState, Reading
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from ..engine.hub import BroadcastHub

logger = get_logger("module.telemetry_simulator")

BASE_TEMPERATURE = 45.0
BASE_PRESSURE = 4.0


class TelemetrySimulator:
    """Random-walk reading generator driven by the hub.

    Runs as one background task between ``start()`` and ``stop()``; ``tick()``
    can also be driven by hand.
    """

    name = "telemetry_simulator"

    def __init__(
        self,
        hub: "BroadcastHub",
        interval_seconds: float = 1.0,
        max_readings: int = 60,
        rng: random.Random | None = None,
    ):
        self.interval_seconds = interval_seconds
        self.max_readings = max_readings
        self.running = False
        self.health_status = "initialized"
        self.last_tick: Optional[datetime] = None
        self._hub = hub
        self._rng = rng or random.Random()
        self._cursor = 0
        self._total_readings = 0
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        self.running = True
        self.health_status = "running"
        self._task = asyncio.create_task(self._loop())
        logger.info("telemetry_simulator_started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        self.running = False
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self.health_status = "stopped"
        logger.info("telemetry_simulator_stopped", readings=self._total_readings)

    def get_status(self) -> dict:
        """Snapshot for the /health payload."""
        return {
            "name": self.name,
            "running": self.running,
            "health_status": self.health_status,
            "readings_emitted": self._total_readings,
            "interval_seconds": self.interval_seconds,
            "last_tick": self.last_tick.isoformat() if self.last_tick else None,
        }

    async def tick(self) -> Optional[Incident]:
        """Emit one reading. Returns the updated incident, or None if nothing is live."""
        self.last_tick = datetime.now(timezone.utc)
        live = [i for i in self._hub.store.snapshot() if i.state_id != IncidentState.CLOSED]
        if not live:
            return None
        target = live[self._cursor % len(live)]
        self._cursor += 1
        reading = self.next_reading(target)
        updated = await self._hub.apply_reading(target.incident_id, reading, self.max_readings)
        if updated is not None:
            self._total_readings += 1
        return updated

    def next_reading(self, incident: Incident) -> Reading:
        """Step from the incident's last reading, or from the baseline."""
        if incident.readings:
            last = incident.readings[-1]
            temperature, pressure = last.temperature, last.pressure
        else:
            temperature, pressure = BASE_TEMPERATURE, BASE_PRESSURE
        return Reading(
            timestamp=datetime.now(timezone.utc),
            temperature=round(temperature + self._rng.uniform(-1.5, 1.5), 2),
            pressure=round(max(0.0, pressure + self._rng.uniform(-0.2, 0.2)), 3),
        )

    async def _loop(self) -> None:
        while self.running:
            try:
                await asyncio.sleep(self.interval_seconds)
                if self.running:
                    await self.tick()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("telemetry_tick_error", error=str(e))
