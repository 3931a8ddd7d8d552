"""
Structured logging for gradetrack using structlog.

Console output is human-readable for local development and tests; setting
LOG_FORMAT=json switches to one JSON object per line for log aggregation.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.typing import Processor

from gradetrack.config.settings import settings


def add_service_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Stamp every event with the service name and deployment environment."""
    event_dict.setdefault("service.name", settings.service_name)
    event_dict.setdefault("deployment.environment", settings.environment)
    return event_dict


def configure_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Configure stdlib logging and structlog for the process.

    Args:
        log_level: Level name such as "DEBUG" (defaults to LOG_LEVEL)
        log_format: "json" or "console" (defaults to LOG_FORMAT)
    """
    level_name = (log_level or settings.log_level).upper()
    use_json = (log_format or settings.log_format) == "json"

    processors: list[Processor] = [
        merge_contextvars,
        add_service_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
    ]
    if use_json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors += [structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=False)]

    logging.basicConfig(
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        level=getattr(logging, level_name, logging.INFO),
        force=True,
    )

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def create_logger(name: str | None = None) -> Any:
    """Return a lazy structlog logger, optionally bound to a component name.

    The logger resolves its configuration on first use and caches it, so call
    configure_logging() before the first event is emitted.
    """
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()
