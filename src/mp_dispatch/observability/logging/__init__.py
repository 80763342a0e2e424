"""Observability – structured logging helpers."""
from mp_dispatch.observability.logging.factory import JsonLoggerFactory, configure_logging
from mp_dispatch.observability.logging.processors import add_request_type, get_logger

__all__ = [
    "JsonLoggerFactory",
    "add_request_type",
    "configure_logging",
    "get_logger",
]
