"""Structured logging configuration for the semembed service.

Logging is standardized on ``structlog``. It produces either JSON (for
machines) or a pretty console format (for humans) and binds the service name
so logs stay useful when aggregated.

Typical usage
- Call ``configure_logging(service_name, log_level, log_format)`` at startup
- Acquire loggers via ``structlog.get_logger(name)``
"""

import logging
import sys

import structlog
from structlog.stdlib import LoggerFactory, add_logger_name


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    log_format: str = "json",
) -> None:
    """Configure structured logging for the service.

    Parameters
    - service_name: Logical service identifier bound to each log line
    - log_level: ``DEBUG``, ``INFO``, ``WARNING``, ``ERROR`` (case-insensitive)
    - log_format: ``json`` for production; ``console`` for local dev
    """

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_logger_name,
    ]

    if log_format == "json":
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Add service context
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)
