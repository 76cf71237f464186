"""
Structured logging for rowlink.

The core only emits events; configuring where they go is the host's job.
Module loggers are lazy, so a ``configure_logging`` call made after import
still decides their level, format and destination.

Events emitted by the core (all DEBUG unless ``echo_sql`` is on):

    =========================  ==========================================
    Event                      Keys
    =========================  ==========================================
    ``connection_opened``      backend, persistent
    ``schema_registry_loaded`` tables
    ``statement_executed``     sql, params (INFO with ``echo_sql``)
    ``mutation_flushed``       table, id, position, fields
    ``row_deleted``            table, id
    ``relation_linked``        table, id, relation, other_id
    ``relation_unlinked``      table, id, relation, other_id
    =========================  ==========================================

Architecture:
    ::

        configure_logging(level="DEBUG", json_format=False, service="rowlink")
            ↓
        structlog processor chain:
          1. TimeStamper (iso, optional)
          2. add_log_level
          3. StackInfoRenderer / set_exc_info
          4. service.name
          5. JSONRenderer (or ConsoleRenderer)

        logger = get_logger(__name__)      # every event carries logger_name
        logger.debug("statement_executed", sql="SELECT * FROM Users ;")

Tags:
    logging, structlog, observability, rowlink
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from rowlink.core.settings import RowLinkSettings

_service_name = "rowlink"


def _add_service_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service.name", _service_name)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "rowlink",
    add_timestamp: bool = True,
) -> None:
    """Route rowlink events to stderr.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON lines, False for console, None for JSON
            unless stderr is a terminal
        service: Value of the ``service.name`` key
        add_timestamp: Include an ISO timestamp
    """
    global _service_name
    _service_name = service

    if json_format is None:
        json_format = not sys.stderr.isatty()

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_name,
    ]
    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def configure_from_settings(settings: RowLinkSettings) -> None:
    """``configure_logging`` driven by ``ROWLINK_LOG_LEVEL``/``ROWLINK_LOG_FORMAT``."""
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")


def get_logger(name: str | None = None) -> Any:
    """Lazy structlog logger; ``name`` is attached to every event as ``logger_name``."""
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(logger_name=name)


__all__ = [
    "configure_from_settings",
    "configure_logging",
    "get_logger",
]
