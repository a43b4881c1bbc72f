"""Logging configuration for the bigo MCP server."""
import sys
from typing import Any, List, Optional

import structlog

LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
}


def configure_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure structured JSON logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path to append logs to (stderr by default)
    """
    numeric_level = LEVELS.get(log_level.upper(), LEVELS["INFO"])

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    # stdout carries the MCP stdio transport, so logs never go there
    output = sys.stderr if log_file is None else open(log_file, "a")

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a logger bound to a component name.

    Args:
        name: Logger name (module, detector or tool name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
