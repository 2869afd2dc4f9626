"""Structured logging setup"""

import logging
import sys

import structlog


def _stderr_logger(*args) -> structlog.PrintLogger:
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: str = "WARNING") -> None:
    """Configure structlog to write key-value lines to stderr at the given level.

    The CLI calls this at startup with the configured level. sys.stderr is
    looked up per logger so a swapped stream (test runners) is honoured.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str):
    """Module logger for library code.

    Until the application configures structlog, library events are filtered at
    WARNING and written to stderr; a later configure_logging or
    structlog.configure call replaces this default.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)
