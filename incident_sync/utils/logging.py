"""Structured logging for the hub and its clients (structlog + rotating file)."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from ..config import IncidentSyncConfig

LOG_FILENAME = "incident_sync.log"


def _service_fields(app_name: str, protocol_version: str):
    """Processor stamping every event with the service name and wire protocol version."""
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", app_name)
        event_dict.setdefault("protocol_version", protocol_version)
        return event_dict

    return processor


def setup_logging(config: "IncidentSyncConfig", log_to_file: bool = True) -> None:
    """Configure structlog and the stdlib root logger from the app config.

    Debug mode renders human-readable console lines; otherwise every event is one
    JSON object on stdout. The server also writes to ``<log_dir>/incident_sync.log``
    when the directory is writable; command-line clients pass ``log_to_file=False``.
    """
    log_level = logging.DEBUG if config.debug else logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _service_fields(config.app_name, config.protocol_version),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if config.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn and aiohttp log through the stdlib root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(stdout_handler)

    if not log_to_file:
        return
    try:
        os.makedirs(config.log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(config.log_dir, LOG_FILENAME),
            maxBytes=config.log_max_bytes,
            backupCount=config.log_backup_count,
            encoding="utf-8",
        )
    except OSError:
        return
    file_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(file_handler)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structured logger."""
    return structlog.get_logger(name)
