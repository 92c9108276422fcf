"""Logging setup for bidi-detector."""

from .logger import EventType, JSONFormatter, configure_logging

__all__ = ["EventType", "JSONFormatter", "configure_logging"]
