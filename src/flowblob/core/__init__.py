"""Core infrastructure: logging and settings loading."""

from flowblob.core.config import FlowblobSettings, LoggingSettings, load_settings
from flowblob.core.logging import configure_logging, get_logger

__all__ = [
    "FlowblobSettings",
    "LoggingSettings",
    "configure_logging",
    "get_logger",
    "load_settings",
]
