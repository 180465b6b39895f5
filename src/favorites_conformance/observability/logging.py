"""Structured logging for conformance runs.

Every request the suite sends and every scenario verdict is one structlog
event. While a scenario runs, its name is bound into the logging context,
so request-level events (``http.request``, ``session.acquired``) can be
grouped by scenario without passing the name down to the client.

Examples:
    Configure once per process::

        configure_logging(level="INFO", json_output=True)

    Group events under a scenario::

        logger = get_logger(__name__)
        with scenario_context("valid-spot"):
            logger.info("http.request", endpoint="favorites", status_code=200)

    Output (JSON)::

        {"endpoint": "favorites", "status_code": 200, "event": "http.request",
         "scenario": "valid-spot", "level": "info",
         "timestamp": "2024-01-01T00:00:00.000000Z"}
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TextIO

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for a conformance run.

    Args:
        level: Minimum level emitted (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: One JSON object per line if True, colored console
            lines otherwise.
        stream: Where events are written. Defaults to stderr, leaving
            stdout to the test report.
    """
    threshold = logging.getLevelName(level.upper())
    if not isinstance(threshold, int):
        raise ValueError(f"Unknown log level: {level!r}")

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)


@contextmanager
def scenario_context(name: str) -> Iterator[None]:
    """Bind ``scenario=name`` to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(scenario=name):
        yield
