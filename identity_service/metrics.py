"""Prometheus counters for identity workflows."""

from __future__ import annotations

from prometheus_client import Counter

AUTH_EVENTS = Counter(
    "identity_auth_events_total",
    "Authentication workflow outcomes",
    ["operation", "outcome"],
)

ACCOUNTS_REGISTERED = Counter(
    "identity_accounts_registered_total",
    "Accounts successfully registered",
)


def record(operation: str, outcome: str) -> None:
    AUTH_EVENTS.labels(operation=operation, outcome=outcome).inc()
