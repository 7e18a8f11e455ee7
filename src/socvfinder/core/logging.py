# src/socvfinder/core/logging.py
"""Structured logging setup.

All modules log through structlog. ``configure_logging`` is called once by
the entry point; library code only calls ``get_logger``.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(*, json_output: bool = False, level: str = "INFO") -> None:
    """Configure structlog to render to stderr.

    Args:
        json_output: Render one JSON object per line instead of console text
        level: Minimum level name (DEBUG, INFO, ...)
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Get a bound structlog logger."""
    if name is not None:
        initial_values.setdefault("logger_name", name)
    return structlog.get_logger(**initial_values)


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Resolved per logger so a swapped sys.stderr (CLI runners, capture) is honoured
    return structlog.PrintLogger(file=sys.stderr)
