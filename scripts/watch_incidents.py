#!/usr/bin/env python3
"""Incident Board Watcher.

Connects to the hub, mirrors its incidents through a ConnectionReconciler and
prints the bucket breakdown every time local state changes.

Usage:
    python scripts/watch_incidents.py
    python scripts/watch_incidents.py --url ws://10.0.0.5:8080/ws/incidents
    python scripts/watch_incidents.py --escalation esc-1 --tag skill-elec --tag skill-mech
    python scripts/watch_incidents.py --move inc-1001 active
"""

import argparse
import asyncio
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = SCRIPT_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT))

from incident_sync.client.actions import move_to_bucket
from incident_sync.client.classifier import BUCKET_TITLES, IncidentBucket
from incident_sync.client.reconciler import ConnectionReconciler, ConnectionStatus, ReconcilerState
from incident_sync.client.socket_client import IncidentSocketClient
from incident_sync.config import IncidentSyncConfig, get_config
from incident_sync.utils.logging import get_logger, setup_logging

logger = get_logger("scripts.watch_incidents")


def render(reconciler: ConnectionReconciler, escalation: str | None, tags: list[str]) -> str:
    lines = [f"[{reconciler.status.value}] {len(reconciler.incidents)} incidents"]
    if reconciler.advisory:
        lines.append(f"  ! {reconciler.advisory}")
    for bucket, rows in reconciler.classify_all(escalation, tags).items():
        ids = ", ".join(i.incident_id for i in rows) or "-"
        lines.append(f"  {BUCKET_TITLES[bucket]:<22} {len(rows):>3}  {ids}")
    return "\n".join(lines)


async def watch(args: argparse.Namespace, config: IncidentSyncConfig) -> None:
    reconciler = ConnectionReconciler(reading_interval_ms=args.interval)
    client = IncidentSocketClient(args.url or config.ws_url, reconciler)
    pending_move = list(args.move) if args.move else None

    def on_change(state: ReconcilerState) -> None:
        print(render(reconciler, args.escalation, args.tag), flush=True)

    reconciler.subscribe(on_change)

    async def apply_move_once() -> None:
        # Wait for the init snapshot before looking the incident up
        while not reconciler.incidents and reconciler.status != ConnectionStatus.DISCONNECTED:
            await asyncio.sleep(0.1)
        incident_id, target = pending_move
        incident = reconciler.get(incident_id)
        if incident is None:
            logger.warning("watch_move_unknown_incident", incident_id=incident_id)
            return
        await reconciler.update_incident(move_to_bucket(incident, target, config.default_assignee))

    tasks = [asyncio.create_task(client.run())]
    if pending_move:
        tasks.append(asyncio.create_task(apply_move_once()))
    try:
        await tasks[0]
    finally:
        for task in tasks[1:]:
            task.cancel()


def build_parser(config: IncidentSyncConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Watch the incident board from the terminal.")
    parser.add_argument("--url", help="Hub WebSocket URL (defaults to WS_URL / config)")
    parser.add_argument("--escalation", help="Only show incidents at this escalation level id")
    parser.add_argument("--tag", action="append", default=[], help="Skill / incident-type id (repeatable, OR)")
    parser.add_argument(
        "--interval",
        type=int,
        default=config.reading_interval_ms,
        help="Update acceptance window in ms (defaults to READING_INTERVAL_MS / config)",
    )
    parser.add_argument(
        "--move",
        nargs=2,
        metavar=("INCIDENT_ID", "BUCKET"),
        help=f"Move one incident after connecting ({', '.join(b.value for b in IncidentBucket)})",
    )
    parser.add_argument("--debug", action="store_true", help="Human-readable debug logging")
    return parser


def main() -> int:
    config = get_config()
    parser = build_parser(config)
    args = parser.parse_args()

    if args.move and args.move[1] not in {b.value for b in IncidentBucket}:
        parser.error(f"unknown bucket: {args.move[1]}")

    if args.interval < 0:
        parser.error("--interval cannot be negative")

    setup_logging(config.model_copy(update={"debug": args.debug or config.debug}), log_to_file=False)
    try:
        asyncio.run(watch(args, config))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
