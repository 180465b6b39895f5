"""Prometheus metrics for the conformance suite.

Metrics include:

- HTTP request counters by endpoint and status code
- HTTP request latency histograms by endpoint
- Scenario verdict counters

Examples:
    Recording a request::

        from favorites_conformance.observability.metrics import record_request

        record_request(endpoint="favorites", status_code=200, duration_seconds=0.084)

    Recording a scenario verdict::

        from favorites_conformance.observability.metrics import record_scenario

        record_scenario(outcome="passed")
"""

from prometheus_client import Counter, Histogram

# Labels: endpoint (tokens, favorites), status_code ("error" on transport failure)
http_requests_total = Counter(
    "favorites_http_requests_total",
    "Total number of HTTP requests sent to the favorites service",
    ["endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "favorites_http_request_duration_seconds",
    "Round-trip time of requests sent to the favorites service",
    ["endpoint"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Labels: outcome (passed, failed, error)
scenarios_total = Counter(
    "favorites_scenarios_total",
    "Total number of scenarios run, by outcome",
    ["outcome"],
)


def record_request(endpoint: str, status_code: int | None, duration_seconds: float) -> None:
    """Record one request to the service.

    Args:
        endpoint: Logical endpoint name ("tokens" or "favorites")
        status_code: HTTP status, or None when the transport failed
        duration_seconds: Round-trip time

    Examples:
        >>> record_request("tokens", 200, 0.05)
        >>> record_request("favorites", None, 10.0)
    """
    label = str(status_code) if status_code is not None else "error"
    http_requests_total.labels(endpoint=endpoint, status_code=label).inc()
    http_request_duration_seconds.labels(endpoint=endpoint).observe(duration_seconds)


def record_scenario(outcome: str) -> None:
    """Record a scenario verdict ("passed", "failed" or "error")."""
    scenarios_total.labels(outcome=outcome).inc()
