"""
Logging for clprompt: structlog with dotted event names.

Every module asks for ``get_logger("<area>")``; HTTP requests, slide ids and
project names travel through structlog contextvars.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import structlog

from clprompt.infra.config.settings import Settings, get_settings

RENDERERS = ("json", "console")
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def build_processors(log_format: str) -> List[Any]:
    """Processor chain ending in the JSON or console renderer."""
    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer(sort_keys=True)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog once at startup from ``LOG_LEVEL`` and ``LOG_FORMAT``."""
    settings = settings or get_settings()
    level = logging.getLevelName((settings.log_level or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO
    log_format = (settings.log_format or "json").lower()
    if log_format not in RENDERERS:
        log_format = "json"

    logging.basicConfig(level=level, format="%(message)s")
    # HTTP client libraries log every request at INFO.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=build_processors(log_format),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def get_logger(area: str) -> Any:
    return structlog.get_logger(area)


def bind_context(**values: Any) -> None:
    """Attach ``request_id``, ``slide_id``, ``project`` and the like to later events."""
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
