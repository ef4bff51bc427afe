"""Prometheus metrics for store traffic, member actions and loan reminders"""

from typing import Optional

from prometheus_client import Counter, Histogram

# Remote store metrics
store_request_counter = Counter(
    "perpus_store_requests_total",
    "Requests sent to the remote data store",
    ["operation", "outcome"],  # get | push | update; ok | error
)

store_latency_histogram = Histogram(
    "perpus_store_latency_seconds",
    "Remote data store response time",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# Member actions
login_counter = Counter(
    "perpus_login_total",
    "Login attempts by outcome",
    ["outcome"],  # success | email_not_found | wrong_password | no_members | transport_error
)

registration_counter = Counter(
    "perpus_registration_total",
    "Registrations by outcome",
    ["outcome"],  # success | email_taken | transport_error
)

reminder_counter = Counter(
    "perpus_reminder_total",
    "Dashboard reminders computed by severity",
    ["severity"],  # error | success | none
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_login(code: Optional[str]) -> None:
    """Count a login attempt; code is None on success"""
    login_counter.labels(outcome=code or "success").inc()


def record_registration(code: Optional[str]) -> None:
    registration_counter.labels(outcome=code or "success").inc()


def record_reminder(severity: Optional[str]) -> None:
    reminder_counter.labels(severity=severity or "none").inc()
