"""Tests for the terminal watcher's argument handling."""

import importlib.util
from pathlib import Path

import pytest

from incident_sync.config import IncidentSyncConfig

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "watch_incidents.py"


@pytest.fixture(scope="module")
def watcher():
    spec = importlib.util.spec_from_file_location("watch_incidents", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestBuildParser:
    def test_interval_defaults_to_config(self, watcher):
        parser = watcher.build_parser(IncidentSyncConfig(_env_file=None, reading_interval_ms=750))
        assert parser.parse_args([]).interval == 750

    def test_interval_flag_wins(self, watcher):
        parser = watcher.build_parser(IncidentSyncConfig(_env_file=None, reading_interval_ms=750))
        assert parser.parse_args(["--interval", "0"]).interval == 0

    def test_repeatable_tags_and_move(self, watcher):
        parser = watcher.build_parser(IncidentSyncConfig(_env_file=None))
        args = parser.parse_args(["--tag", "skill-elec", "--tag", "skill-ops", "--move", "inc-1001", "active"])
        assert args.tag == ["skill-elec", "skill-ops"]
        assert args.move == ["inc-1001", "active"]
