"""
peridio_sdk.tier0_core.logging
───────────────────────────────
Structured logs via structlog. The client only emits ``debug`` events for
request/response tracing, routed through the stdlib ``peridio_sdk`` logger
hierarchy. Host applications decide whether and how to surface them.

Getting a logger has no side effects: no configuration is read and the
global structlog setup is left alone. ``configure_logging()`` is opt-in and
attaches a rendering handler to the ``peridio_sdk`` logger only.

Configure via: PERIDIO_LOG_LEVEL, PERIDIO_LOG_FORMAT=json|console
"""
from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from peridio_sdk.tier0_core.redact import structlog_redact_processor

ROOT_LOGGER = "peridio_sdk"

# Runs per event on loggers from get_logger; the event dict is handed to
# stdlib logging for ProcessorFormatter to render.
_PROCESSORS: list[Any] = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog_redact_processor,
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]


# ── Configuration ─────────────────────────────────────────────────────────────

def _build_handler(log_format: str) -> logging.Handler:
    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog_redact_processor,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    return handler


# ── Public API ────────────────────────────────────────────────────────────────

def configure_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Render ``peridio_sdk`` events to stdout. Falls back to PeridioConfig
    values. Safe to call more than once; the last call wins.
    """
    from peridio_sdk.tier0_core.config import get_config

    if log_level is None or log_format is None:
        config = get_config()
        log_level = log_level or config.log_level
        log_format = log_format or config.log_format

    sdk_logger = logging.getLogger(ROOT_LOGGER)
    sdk_logger.handlers = [_build_handler(log_format)]
    sdk_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structured logger bound to the given name.

    Usage:
        log = get_logger(__name__)
        log.debug("api.request", method="GET", url="https://.../products")
    """
    return structlog.wrap_logger(
        logging.getLogger(name or ROOT_LOGGER),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )


__all__ = ["configure_logging", "get_logger", "ROOT_LOGGER"]
