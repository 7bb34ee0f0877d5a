from __future__ import annotations

import logging
import sys

import structlog


def _stderr_logger(*args):
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Route structlog through stderr so stdout stays free for exports."""

    log_level = getattr(logging, level.upper(), logging.INFO)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
