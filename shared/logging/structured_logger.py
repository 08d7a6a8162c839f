"""Structured logging for the Student Records API.

Every event is stamped with the service identity (name, version,
environment) and with whatever request context the middleware has bound,
such as the correlation ID. Events render as one JSON object per line, or
as aligned key=value text for local work.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def service_context(service: str, version: str, environment: str) -> Processor:
    """Build a processor that stamps the service identity on each event.

    Values already present on the event are left alone.

    Args:
        service: Service name
        version: Service version
        environment: Deployment environment

    Returns:
        structlog processor
    """
    identity = {"service": service, "version": version, "environment": environment}

    def add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in identity.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_service_context


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: str = "student-records-api",
    service_version: str = "0.0.0",
    environment: str = "production",
    colors: bool = False,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of console output
        service_name: Service name stamped on every event
        service_version: Service version stamped on every event
        environment: Deployment environment stamped on every event
        colors: Colorize console output (ignored for JSON)
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        service_context(service_name, service_version, environment),
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )
    # uvicorn's access log would duplicate request_completed events.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def bind_context(**kwargs: Any) -> None:
    """Bind request-scoped values to every subsequent event in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove request-scoped values bound with ``bind_context``."""
    structlog.contextvars.unbind_contextvars(*keys)
