"""structlog wiring for dedupe decisions and sync runs.

Every event is a JSON line carrying the service name and deployment
environment; the level comes from ``Settings.log_level``.
"""
from __future__ import annotations

import logging

import structlog

from .config import get_settings

SERVICE_NAME = "rumor-dedupe"

SHARED_PROCESSORS = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.filter_by_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.JSONRenderer(ensure_ascii=False),
)


def configure_logging() -> None:
    """Configure stdlib and structlog once per process."""
    if getattr(configure_logging, "_configured", False):
        return

    level = get_settings().log_level
    logging.basicConfig(format="%(message)s")
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=list(SHARED_PROCESSORS),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    configure_logging._configured = True  # type: ignore[attr-defined]


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    configure_logging()
    return structlog.get_logger(name).bind(service=SERVICE_NAME, env=get_settings().env)
