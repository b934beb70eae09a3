"""
Structured logging configuration for mapping validation

Provides JSON-formatted or coloured console logging with contextual
information attached through `extra`.

Usage:
    from datamapping.utils.logging import setup_logging, get_logger

    # Setup logging (call once at application startup)
    setup_logging(level="INFO", log_file="/var/log/datamapping/run.log")

    logger = get_logger(__name__)
    logger.warning("Mapping failed", extra={"mapping": "orders#total -> ledger#amount"})
"""

from .config import configure_from_env, get_logger, setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "get_logger",
    "shutdown_logging",
    "configure_from_env",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
