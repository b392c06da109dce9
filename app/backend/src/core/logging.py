"""Structured logging configuration."""

from __future__ import annotations

import logging

import structlog

from app.backend.src.core.config import get_settings


def configure_logging(level: str | None = None) -> None:
    """Configure basic JSON-style logging for the ingest tooling."""

    resolved = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=resolved,
        format='{"level": "%(levelname)s", "message": "%(message)s"}',
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(resolved)
        ),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
