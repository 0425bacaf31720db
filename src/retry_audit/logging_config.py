"""Structured logging configuration using structlog.

Retry narration is emitted as structlog events. Production renders JSON
lines (one per attempt or disposition) for log aggregators; development
renders the same events on a colored console.
"""

import logging
import sys
from typing import IO, Any

import structlog
from structlog.types import EventDict, WrappedLogger

from retry_audit.retry.narrator import Disposition

_FINAL_BY_DISPOSITION = {d.value: d is not Disposition.RETRYING for d in Disposition}


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every event with the application name."""
    event_dict["app"] = "retry-audit"
    return event_dict


def mark_terminal_disposition(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ``terminal`` to narrated events: True once the loop stops retrying.

    Aggregators can select final outcomes without parsing messages. Events
    without a known disposition pass through unchanged.
    """
    disposition = event_dict.get("disposition")
    disposition = getattr(disposition, "value", disposition)
    if disposition in _FINAL_BY_DISPOSITION:
        event_dict["terminal"] = _FINAL_BY_DISPOSITION[disposition]
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    stream: IO[Any] | None = None,
) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: "production" selects the JSON renderer, anything else the console
        stream: Output stream for the root handler (defaults to stdout)

    Narrator output at INFO (dispositions, success) is dropped when
    log_level is WARNING or above; per-attempt warnings are kept.
    """
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        mark_terminal_disposition,
    ]

    is_production = environment.lower() == "production"

    if is_production:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream is None)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level_int)

    root_logger = logging.getLogger()
    # Replace, never stack, handlers on reconfiguration
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level_int)

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if is_production else "console",
    )
