"""Structured logging setup using structlog.

One processor chain feeds either a coloured console renderer (development)
or a JSON renderer (production, or whenever ``APP_ENV=production``).  The
standard-library root logger is routed through the same chain so uvicorn
and httpx records look like ours.

The catalog API takes its access token and anti-bot answer as query
parameters, so request URLs are credentials.  :func:`redact_secrets` masks
them in every record, and httpx's per-request INFO lines are switched off.
"""

import logging
import os
import re
import sys
from typing import Any

import structlog

_SECRET_FIELDS = frozenset({"access_token", "captcha_key"})
_SECRET_QUERY_PARAM = re.compile(r"\b(access_token|captcha_key)=[^&\s'\"]+")
_MASK = "***"

# These log each request line, URL included, at INFO.
_QUIET_LOGGERS = ("httpx", "httpcore")


def redact_secrets(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Mask credential fields and credential query parameters in *event_dict*."""
    for key, value in event_dict.items():
        if key in _SECRET_FIELDS:
            event_dict[key] = _MASK
        elif isinstance(value, str):
            event_dict[key] = _SECRET_QUERY_PARAM.sub(rf"\1={_MASK}", value)
    return event_dict


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON rendering regardless of ``APP_ENV``.

    Returns:
        A configured structlog BoundLogger.
    """
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *shared_processors,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound to *name*, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)
