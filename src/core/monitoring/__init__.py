"""
Core Monitoring Module
======================

Prometheus observability for scorecard evaluation.

Usage:
    from src.core.monitoring import (
        get_or_create_counter,
        get_or_create_histogram,
        track_execution,
    )
"""

from src.core.monitoring.metrics import (
    PROMETHEUS_ENABLED,
    get_or_create_counter,
    get_or_create_histogram,
    LATENCY_BUCKETS_FAST,
    evaluation_counter,
    evaluation_duration,
    track_execution,
)

__all__ = [
    "PROMETHEUS_ENABLED",
    "get_or_create_counter",
    "get_or_create_histogram",
    "LATENCY_BUCKETS_FAST",
    "evaluation_counter",
    "evaluation_duration",
    "track_execution",
]
