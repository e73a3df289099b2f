#!/usr/bin/env python3
"""Incident Sync External Health Monitor.

Standalone script (stdlib only) that hits the hub's /health endpoint and
reports status. Designed for cron or a systemd timer.

Exit codes:
    0 — healthy
    1 — unhealthy or unreachable

Usage:
    python scripts/health_check.py
    python scripts/health_check.py --url http://10.0.0.5:8080/health
    python scripts/health_check.py --min-connections 1
"""

import argparse
import json
import logging
import sys
import urllib.error
import urllib.request
from datetime import datetime, timezone

logger = logging.getLogger("incident_sync.health_check")
logger.setLevel(logging.INFO)

_console_handler = logging.StreamHandler(sys.stdout)
_console_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
logger.addHandler(_console_handler)


def check_health(url: str, timeout: int = 10) -> tuple[bool, dict]:
    """Hit the health endpoint and return (is_healthy, response_data)."""
    req = urllib.request.Request(url, headers={"Accept": "application/json"})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            data = json.loads(resp.read().decode("utf-8"))
            return data.get("status") == "healthy", data
    except urllib.error.HTTPError as e:
        return False, {"error": f"HTTP {e.code}", "reason": str(e.reason)}
    except urllib.error.URLError as e:
        return False, {"error": "unreachable", "reason": str(e.reason)}
    except (ValueError, OSError) as e:
        return False, {"error": "exception", "reason": str(e)}


def main() -> int:
    parser = argparse.ArgumentParser(description="Incident Sync Health Monitor")
    parser.add_argument("--url", default="http://127.0.0.1:8080/health", help="Health endpoint URL")
    parser.add_argument("--timeout", type=int, default=10, help="Request timeout in seconds")
    parser.add_argument("--min-connections", type=int, default=0, help="Fail if fewer viewers are connected")
    args = parser.parse_args()

    now = datetime.now(timezone.utc).isoformat()
    is_healthy, data = check_health(args.url, timeout=args.timeout)

    connections = data.get("hub", {}).get("connections", 0)
    if is_healthy and connections < args.min_connections:
        is_healthy = False
        data["error"] = f"only {connections} connection(s), expected {args.min_connections}"

    if is_healthy:
        hub = data.get("hub", {})
        logger.info(
            "HEALTHY — %s — %s — %s incidents, %s connections",
            args.url, now, hub.get("incidents"), hub.get("connections"),
        )
        return 0
    logger.error("UNHEALTHY — %s — %s — %s", args.url, now, json.dumps(data))
    return 1


if __name__ == "__main__":
    sys.exit(main())
