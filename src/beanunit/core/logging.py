# src/beanunit/core/logging.py
"""Structured log events for the verification engine.

Every module logs through get_logger(__name__), which is backed by the
stdlib logger of the same name. Importing beanunit sets up nothing, so
until configure_logging() (or BeanunitSettings.apply_logging()) runs,
events follow whatever the host has configured for stdlib logging and
DEBUG events stay hidden behind its default WARNING level.

Events are rendered by a ProcessorFormatter attached to the "beanunit"
stdlib logger, so structlog events and plain logging records from the
same package come out in one format.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

PACKAGE_LOGGER = "beanunit"


def _strip_formatter_bookkeeping(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Drop the _record/_from_structlog keys ProcessorFormatter always adds."""
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def _drop_unset_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Omit keys bound to None (a violation without a property, say)."""
    return {key: value for key, value in event_dict.items() if value is not None}


def _renderers(json_output: bool) -> list[Any]:
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=False)]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "WARNING",
) -> None:
    """Send beanunit's events to stderr.

    Only the "beanunit" logger tree is touched: its handlers are replaced
    and it stops propagating. The root logger belongs to the test runner.

    Args:
        json_output: One JSON object per line instead of console text
        level: DEBUG shows every property checked; WARNING (default) only violations
    """
    pre_chain: list[Any] = [
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _drop_unset_fields,
    ]

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure logging; cached loggers would keep the old chain
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(
            processors=[_strip_formatter_bookkeeping, *_renderers(json_output)],
            foreign_pre_chain=pre_chain,
        )
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers = [handler]
    package_logger.propagate = False
    set_package_level(level)


def set_package_level(level: str) -> None:
    """Gate beanunit events at level without touching handlers or format."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(getattr(logging, level.upper()))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Bound structlog logger for a module (pass __name__).

    The logger wraps the stdlib logger of the same name, so the "beanunit"
    logger level filters events even before configure_logging() runs.
    """
    logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return logger
