"""
Structured logging configuration
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.types import EventDict, Processor

from pedometer.config import Settings


def setup_logging(
    service_name: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> structlog.BoundLogger:
    """
    Configure structured logging for the service

    Args:
        service_name: Name used to tag every log line (defaults to settings)
        settings: Optional settings object (will create default if not provided)

    Returns:
        Configured logger instance
    """
    # Fall back to environment settings for anything not passed in
    if settings is None:
        settings = Settings()
    if service_name is None:
        service_name = settings.service_name

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
    )

    # Processors for structlog
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Add service name to all logs
    def add_service_name(logger, method_name, event_dict: EventDict) -> EventDict:
        event_dict["service"] = service_name
        event_dict["environment"] = settings.environment
        return event_dict

    processors.append(add_service_name)

    # JSON or console rendering based on environment
    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    # Configure structlog
    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger(service_name)


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a logger instance

    Args:
        name: Optional logger name (defaults to caller's module)

    Returns:
        Logger instance
    """
    return structlog.get_logger(name)
