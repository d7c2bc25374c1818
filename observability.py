"""Observability helpers: structured JSON (or console) logging via structlog.

Import `init_observability` and call it early in your FastAPI app to activate.
"""
from __future__ import annotations

import logging

import structlog

from settings import get_settings

__all__ = [
    "init_observability",
]


def _setup_logging(log_format: str, log_level: str) -> None:
    """Configure structlog for structured logging (JSON or console)."""

    # Define shared processors
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Choose renderer based on format
    if log_format == "json":
        final_processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer()

    # Configure structlog
    structlog.configure(
        processors=shared_processors + [final_processor],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure standard logging root logger once; init may run again under tests
    root_logger = logging.getLogger()
    if not any(getattr(h, "_job_tracker", False) for h in root_logger.handlers):
        handler = logging.StreamHandler()
        handler._job_tracker = True  # type: ignore[attr-defined]
        # No formatter needed here, structlog handles it via processors
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # Silence noisy loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def init_observability() -> None:
    """Setup logging. Call once at process start."""

    settings = get_settings()
    _setup_logging(settings.log_format.lower(), settings.log_level.upper())

    structlog.get_logger(__name__).info(
        "Observability initialized", log_format=settings.log_format
    )
