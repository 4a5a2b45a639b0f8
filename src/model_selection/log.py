"""Structured logging setup."""

import logging
import sys

import structlog
from structlog.types import Processor


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog for the model selection tools.

    Args:
        level: Minimum log level name (e.g. "DEBUG", "INFO")
        json_logs: Render JSON lines instead of console output
    """
    processors: list[Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer formats exceptions itself
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
