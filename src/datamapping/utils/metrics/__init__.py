"""
Prometheus metrics for mapping validation

Usage:
    from datamapping.utils.metrics import initialize_metrics

    metrics = initialize_metrics(port=9091)
    results = validate_mappings(mappings, metrics=metrics["validation"])
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from prometheus_client import REGISTRY, CollectorRegistry

from .publisher import MetricsPublisher
from .validation import ValidationMetrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_or_create_metric(
    metric_factory: Callable[[], T],
    metric_name: str,
    registry: CollectorRegistry = REGISTRY,
) -> T:
    """
    Create a metric, or return the already registered one of the same name.

    Module-level metrics are created at import time; re-importing a module
    (e.g. importlib.reload in tests) must not fail on duplicate registration.

    Args:
        metric_factory: Callable that creates the metric (e.g., lambda: Counter(...))
        metric_name: Name of the metric for lookup if already registered
        registry: Prometheus registry to use (default: global REGISTRY)

    Returns:
        The metric instance (either newly created or existing)

    Example:
        VALIDATIONS = get_or_create_metric(
            lambda: Counter("validations_total", "Validations", ["family"]),
            "validations_total",
        )
    """
    try:
        return metric_factory()
    except ValueError:
        existing = registry._names_to_collectors.get(metric_name)
        if existing is not None:
            return existing
        raise


def initialize_metrics(
    port: int = 9091,
    registry: CollectorRegistry | None = None,
) -> dict[str, Any]:
    """
    Initialize all metrics and start the metrics server

    Args:
        port: Port to expose metrics on (default: 9091)
        registry: Custom Prometheus registry (default: global REGISTRY)

    Returns:
        Dictionary with "publisher" and "validation" entries
    """
    logger.info(f"Initializing metrics on port {port}")

    publisher = MetricsPublisher(port=port, registry=registry)
    publisher.start()

    return {
        "publisher": publisher,
        "validation": ValidationMetrics(registry=registry),
    }


__all__ = [
    "MetricsPublisher",
    "ValidationMetrics",
    "initialize_metrics",
    "get_or_create_metric",
]
