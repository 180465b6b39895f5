"""Observability utilities for the conformance suite.

This package provides:
- Prometheus metrics for requests sent and scenario verdicts
- Structured logging, with the running scenario bound to every event
"""

from favorites_conformance.observability.logging import (
    configure_logging,
    get_logger,
    scenario_context,
)
from favorites_conformance.observability.metrics import record_request, record_scenario

__all__ = [
    "configure_logging",
    "get_logger",
    "record_request",
    "record_scenario",
    "scenario_context",
]
