"""Retrie Logging — logging port and structlog adapter."""

from retrie.logging.port import LoggingPort, configure_logging
from retrie.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter", "configure_logging"]
