"""structlog setup shared by the client and the command-line script.

Console rendering for interactive use, JSON lines for cron jobs and
services. Library code only calls get_logger(); configuring output is left
to the application (setup_logging), so importing jecnasupl never touches
global logging state.
"""

import logging
import sys
from typing import TextIO

import structlog


def setup_logging(
    json_output: bool = False,
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and route stdlib logging to the same stream.

    Args:
        json_output: Render JSON lines instead of coloured console output.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL; unknown names mean INFO.
        stream: Where to write; defaults to stderr so stdout stays free for
            the script's JSON.
    """
    stream = stream or sys.stderr
    level = getattr(logging, log_level.upper(), logging.INFO)

    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(stream)]
    root.setLevel(level)
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger bound to a module name (pass __name__)."""
    return structlog.get_logger(name)
