"""
Metrics for mapping validation runs.

Tracks batch runs, mismatching mappings and validator errors so that
scheduled validation jobs can be monitored and alerted on.
"""

import logging
import time

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
)

logger = logging.getLogger(__name__)


class ValidationMetrics:
    """
    Metrics for mapping validation batches

    Every metric is registered on the given registry, so tests can use a
    fresh CollectorRegistry per instance.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize validation metrics

        Args:
            registry: Custom Prometheus registry (default: global REGISTRY)
        """
        self.registry = registry or REGISTRY

        self.batch_runs_total = Counter(
            "datamapping_batch_runs_total",
            "Total number of mapping validation batches",
            ["batch", "status"],
            registry=self.registry,
        )

        self.batch_duration_seconds = Histogram(
            "datamapping_batch_duration_seconds",
            "Duration of mapping validation batches in seconds",
            ["batch"],
            buckets=(0.01, 0.05, 0.1, 0.5, 1, 5, 10, 30, 60, 300),
            registry=self.registry,
        )

        self.batch_last_run_timestamp = Gauge(
            "datamapping_batch_last_run_timestamp",
            "Timestamp of the last mapping validation batch",
            ["batch"],
            registry=self.registry,
        )

        self.mappings_validated_total = Counter(
            "datamapping_mappings_validated_total",
            "Total number of mappings validated",
            ["batch"],
            registry=self.registry,
        )

        self.mapping_mismatches_total = Counter(
            "datamapping_mapping_mismatches_total",
            "Total number of mappings whose source and destination differ",
            ["batch"],
            registry=self.registry,
        )

        self.mapping_errors_total = Counter(
            "datamapping_mapping_errors_total",
            "Total number of mappings that raised during validation",
            ["batch", "error_type"],
            registry=self.registry,
        )

    def record_batch_run(
        self,
        batch: str,
        passed: bool,
        duration: float,
        mappings_validated: int,
    ) -> None:
        """
        Record a completed validation batch

        Args:
            batch: Batch label
            passed: Whether every mapping in the batch matched
            duration: Duration in seconds
            mappings_validated: Number of mappings in the batch
        """
        status = "pass" if passed else "fail"

        self.batch_runs_total.labels(batch=batch, status=status).inc()
        self.batch_duration_seconds.labels(batch=batch).observe(duration)
        self.batch_last_run_timestamp.labels(batch=batch).set(time.time())
        self.mappings_validated_total.labels(batch=batch).inc(mappings_validated)

        logger.info(
            f"Recorded validation batch: batch={batch}, status={status}, "
            f"duration={duration:.3f}s, mappings={mappings_validated}"
        )

    def record_mismatch(self, batch: str) -> None:
        self.mapping_mismatches_total.labels(batch=batch).inc()

    def record_error(self, batch: str, error_type: str) -> None:
        self.mapping_errors_total.labels(batch=batch, error_type=error_type).inc()
