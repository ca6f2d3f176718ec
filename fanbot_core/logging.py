"""
Logging Configuration

Structured logging setup shared by the CLI and the conversation loop.
Supports JSON output for unattended runs and a human-readable console
format for development.
"""

import logging
import sys

import structlog


def configure_logging(level: str = "info", fmt: str = "pretty") -> None:
    """
    Configure structlog on top of the standard library logging module.

    Args:
        level: Log level name (debug, info, warning, error)
        fmt: "json" for machine-readable output, "pretty" for console output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True,
    )

    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
