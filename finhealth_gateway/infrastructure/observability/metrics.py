"""Prometheus metrics for monitoring report caching, remote scoring and widget sync"""

from prometheus_client import Counter, Histogram

# Report cache metrics
cache_lookup_counter = Counter(
    "finhealth_report_cache_lookups_total",
    "Report cache lookups",
    ["result"],  # hit | stale | miss | error
)

# Remote scoring metrics
report_fetch_latency_histogram = Histogram(
    "report_fetch_latency_seconds",
    "Remote scoring endpoint response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

report_fetch_failures_counter = Counter(
    "report_fetch_failures_total",
    "Failed remote scoring calls",
)

# Widget metrics
widget_sync_failures_counter = Counter(
    "widget_sync_failures_total",
    "Failed widget pushes",
)

# Scoring outcomes
health_score_counter = Counter(
    "finhealth_health_score_total",
    "Health scores computed by status",
    ["status", "source"],  # Good | Warning | Danger ; local | remote
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_cache_lookup(result: str) -> None:
    """Record the outcome of a report cache lookup"""
    cache_lookup_counter.labels(result=result).inc()


def record_health_score(status: str, source: str) -> None:
    """Record score distribution for monitoring the share of unhealthy reports"""
    health_score_counter.labels(status=status, source=source).inc()
