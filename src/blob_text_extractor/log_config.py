"""Structured logging setup shared by the web app and the Functions host."""

import logging
from typing import Any

import structlog


def configure_logging(log_level: str, service: str = "blob-text-extractor") -> None:
    """
    Configure structured JSON logging.

    Values bound with ``structlog.contextvars`` (such as the event id of the
    blob being processed) are merged into every line.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR).
        service: Value of the ``service`` key on every line.
    """
    level = logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO)

    def add_service(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service)
        return event_dict

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
