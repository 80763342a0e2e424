"""Observability – logging sink used by the reference behaviors."""
from mp_dispatch.observability.logging import JsonLoggerFactory, configure_logging, get_logger

__all__ = ["JsonLoggerFactory", "configure_logging", "get_logger"]
