"""Structured logging module using structlog."""

from .structured_logger import bind_context, configure_logging, service_context, unbind_context

__all__ = ["configure_logging", "service_context", "bind_context", "unbind_context"]
