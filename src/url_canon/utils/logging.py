"""Structlog configuration for applications embedding url_canon."""

from __future__ import annotations

import logging
import sys

import structlog

from url_canon.config import settings


def configure_logging(environment: str | None = None, log_level: str | None = None) -> None:
    """Route structlog output through the stdlib root logger.

    ``production`` renders newline-delimited JSON; any other environment
    gets the console renderer. Both arguments default to the values in
    :data:`~url_canon.config.settings`.

    Args:
        environment: ``"production"`` or ``"development"``.
        log_level:   Standard level name, e.g. ``"DEBUG"``.
    """
    environment = environment or settings.environment
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    if environment == "production":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)
