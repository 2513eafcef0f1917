"""Structured logging for the consumer helpers.

The schema engine never logs; environment loading, request ingress and
session checks do, through structlog. Events are key/value pairs:

    logger.warning("query_params_invalid", issues=[...])

Output is colored console text in development and one JSON object per
line when ``LOG_JSON`` is set. Values under sensitive keys (passwords,
tokens) are replaced before rendering, at any nesting depth, and Issue
objects passed as values are rendered as plain dicts.
"""
import logging
import sys
from collections.abc import Sequence
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from shared_types.config import settings
from shared_types.validation.issues import Issue

SENSITIVE_KEYS = frozenset({"password", "token", "secret", "authorization", "cookie", "session"})
REDACTED = "[REDACTED]"
MAX_REDACT_DEPTH = 6


def _redact(value: Any, depth: int = 0) -> Any:
    if depth > MAX_REDACT_DEPTH: return value
    if isinstance(value, dict):
        return {k: REDACTED if isinstance(k, str) and k.lower() in SENSITIVE_KEYS else _redact(v, depth + 1)
            for k, v in value.items()}
    if isinstance(value, (list, tuple)): return [_redact(v, depth + 1) for v in value]
    return value


def redact_sensitive(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    return _redact(event_dict)


def render_issues(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Turn Issue values (or sequences of them) into JSON-ready dicts."""
    for key, value in event_dict.items():
        if isinstance(value, Issue):
            event_dict[key] = value.to_dict()
        elif isinstance(value, Sequence) and not isinstance(value, str) and value and isinstance(value[0], Issue):
            event_dict[key] = [issue.to_dict() for issue in value]
    return event_dict


def add_service(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", settings.SERVICE_NAME)
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors shared by structlog loggers and foreign (stdlib) records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service,
        render_issues,
        redact_sensitive,
    ]


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Route structlog through the stdlib root logger.

    Args:
        level: Log level name; defaults to ``settings.LOG_LEVEL``.
        json_logs: JSON lines when True, colored console otherwise; defaults to ``LOG_JSON`` (always on in production).
    """
    level = level or settings.LOG_LEVEL
    if json_logs is None: json_logs = settings.LOG_JSON or settings.is_production
    shared = get_shared_processors()

    renderer = (structlog.processors.JSONRenderer() if json_logs
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    structlog.configure(
        processors=[*shared, structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
