"""
Core Monitoring Metrics
=======================

Prometheus metrics for scorecard evaluation.

This module provides:
1. Safe metric creation helpers (avoid duplicate registration errors)
2. Standard latency buckets
3. Evaluation metric definitions
4. track_execution decorator

Usage:
    from src.core.monitoring import track_execution, evaluation_counter

    @track_execution(counter=evaluation_counter, labels={"model": "credit_v1"})
    def score(...):
        ...
"""

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, List, Optional

from prometheus_client import Counter, Histogram, REGISTRY

from src.core.config import get_settings

logger = logging.getLogger(__name__)

PROMETHEUS_ENABLED = get_settings().metrics_enabled


# =============================================================================
# SAFE METRIC CREATION HELPERS
# =============================================================================

def get_or_create_counter(
    name: str,
    description: str,
    labelnames: List[str],
) -> Optional[Counter]:
    """
    Get existing counter or create new one.
    Safely handles duplicate registration errors from Prometheus.
    """
    if not PROMETHEUS_ENABLED:
        return None
    try:
        return Counter(name, description, labelnames)
    except ValueError:
        return REGISTRY._names_to_collectors.get(name)


def get_or_create_histogram(
    name: str,
    description: str,
    labelnames: List[str],
    buckets: Optional[List[float]] = None,
) -> Optional[Histogram]:
    """
    Get existing histogram or create new one.
    Safely handles duplicate registration errors from Prometheus.
    """
    if not PROMETHEUS_ENABLED:
        return None
    try:
        if buckets:
            return Histogram(name, description, labelnames, buckets=buckets)
        return Histogram(name, description, labelnames)
    except ValueError:
        return REGISTRY._names_to_collectors.get(name)


# =============================================================================
# STANDARD BUCKETS
# =============================================================================

# Latency buckets (in seconds); a scorecard pass is an in-memory loop
LATENCY_BUCKETS_FAST = [0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25]


# =============================================================================
# EVALUATION METRICS
# =============================================================================

evaluation_counter = get_or_create_counter(
    'scorecard_evaluations_total',
    'Total number of scorecard evaluations',
    ['model', 'status']
)

evaluation_duration = get_or_create_histogram(
    'scorecard_evaluation_duration_seconds',
    'Scorecard evaluation duration in seconds',
    ['model'],
    buckets=LATENCY_BUCKETS_FAST
)


# =============================================================================
# DECORATORS
# =============================================================================

def track_execution(
    counter: Optional[Counter] = None,
    histogram: Optional[Histogram] = None,
    labels: Optional[Dict[str, str]] = None,
    label_fn: Optional[Callable[..., Dict[str, str]]] = None,
    status_fn: Optional[Callable[[Any], str]] = None,
):
    """
    Decorator to track function execution.
    Records execution count (via counter) and duration (via histogram).

    The status label is "success", or ``status_fn(result)`` when given.
    A raised exception records its ``error_code`` when it has one, else
    "error".

    Args:
        counter: Counter labelled with ``labels`` plus "status"
        histogram: Histogram labelled with ``labels``
        labels: Static label values
        label_fn: Called with the wrapped call's arguments for per-call labels
        status_fn: Maps a successful result to its status label

    Usage:
        @track_execution(counter=my_counter, histogram=my_histogram, labels={"model": "v1"})
        def my_function():
            ...
    """
    labels = labels or {}

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            status = "success"
            try:
                result = func(*args, **kwargs)
                if status_fn is not None:
                    status = status_fn(result)
                return result
            except Exception as e:
                status = getattr(e, "error_code", "error")
                raise
            finally:
                duration = time.perf_counter() - start_time
                label_values = dict(labels)
                if label_fn is not None:
                    label_values.update(label_fn(*args, **kwargs))

                if counter is not None:
                    try:
                        counter.labels(**label_values, status=status).inc()
                    except Exception as e:
                        logger.debug(f"Failed to increment counter: {e}")

                if histogram is not None:
                    try:
                        histogram.labels(**label_values).observe(duration)
                    except Exception as e:
                        logger.debug(f"Failed to observe histogram: {e}")

        return wrapper
    return decorator
