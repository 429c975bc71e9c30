"""Structured logging for the gateway.

Events are structlog key/value records. Every request gets a ``request_id``
bound for its lifetime, and credential-like fields are masked before any
renderer sees them.
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Mapping

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

REDACTED = "[REDACTED]"
SENSITIVE_KEYS = frozenset({
    "authorization",
    "client_secret",
    "credential",
    "password",
    "secret",
    "token",
    "api_key",
})

# Standard-library loggers that are chatty at INFO
NOISY_LOGGERS = ("azure", "azure.identity", "uvicorn.access")


def _redact(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_KEYS else _redact(item)
            for key, item in value.items()
        }
    return value


def redact_sensitive(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask credential-like fields, including inside nested mappings."""
    return _redact(event_dict)


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structured logging for the gateway.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines instead of console output
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_sensitive,
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(name)s %(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Return a structlog logger, optionally pre-bound with context."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


@contextmanager
def request_context(**context: Any) -> Iterator[str]:
    """
    Bind a fresh ``request_id`` plus ``context`` for the duration of a request.

    Yields the request id. The bound values are removed on exit, even when
    the body raises.
    """
    request_id = uuid.uuid4().hex
    with structlog.contextvars.bound_contextvars(request_id=request_id, **context):
        yield request_id
