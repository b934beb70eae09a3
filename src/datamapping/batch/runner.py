"""
Batch validation of mappings.

Validates every mapping of a batch, collecting one result per mapping. A
mapping that raises is reported as an error result; the rest of the batch
still runs.
"""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass

from opentelemetry import trace

from datamapping.utils.metrics import ValidationMetrics
from datamapping.utils.tracing import trace_operation
from datamapping.validators.base import DataMappingValidator

logger = logging.getLogger(__name__)

DEFAULT_BATCH = "default"


@dataclass(frozen=True)
class MappingResult:
    """
    Outcome of validating one mapping.

    Attributes:
        name: Mapping name (str() of the mapping)
        passed: True when source and destination are equivalent
        differences: Difference description returned by validate(), if any
        error: "<ExceptionType>: <message>" when validation raised
    """

    name: str
    passed: bool
    differences: str | None = None
    error: str | None = None

    @property
    def status(self) -> str:
        if self.error is not None:
            return "ERROR"
        return "PASS" if self.passed else "FAIL"


def validate_mapping(
    mapping: DataMappingValidator,
    metrics: ValidationMetrics | None = None,
    batch: str = DEFAULT_BATCH,
) -> MappingResult:
    """
    Validate a single mapping inside its own span

    Args:
        mapping: Mapping to validate
        metrics: Optional metrics to record mismatches and errors on
        batch: Batch label for metrics

    Returns:
        MappingResult for the mapping; never raises for validation errors
    """
    name = str(mapping)

    with trace_operation(
        "validate_mapping",
        kind=trace.SpanKind.INTERNAL,
        mapping=name,
        family=mapping.family,
    ) as span:
        try:
            differences = mapping.validate()
        except Exception as e:
            logger.error(f"Mapping {name} raised during validation: {e}", exc_info=True)
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)

            if metrics is not None:
                metrics.record_error(batch, type(e).__name__)

            return MappingResult(
                name=name,
                passed=False,
                error=f"{type(e).__name__}: {e}",
            )

        passed = differences is None
        span.set_attribute("passed", passed)

        if not passed:
            logger.warning(f"Mapping {name} failed:\n{differences}")
            if metrics is not None:
                metrics.record_mismatch(batch)

        return MappingResult(name=name, passed=passed, differences=differences)


def validate_mappings(
    mappings: Iterable[DataMappingValidator],
    metrics: ValidationMetrics | None = None,
    batch: str = DEFAULT_BATCH,
) -> list[MappingResult]:
    """
    Validate a batch of mappings sequentially

    Args:
        mappings: Mappings to validate
        metrics: Optional metrics for the batch
        batch: Batch label for metrics and spans

    Returns:
        One MappingResult per mapping, in input order

    Example:
        >>> results = validate_mappings(mappings, batch="nightly")
        >>> failures = [r for r in results if not r.passed]
    """
    mappings = list(mappings)

    with trace_operation(
        "validate_mappings",
        kind=trace.SpanKind.INTERNAL,
        batch=batch,
        mapping_count=len(mappings),
    ) as span:
        start_time = time.perf_counter()

        results = [validate_mapping(mapping, metrics, batch) for mapping in mappings]

        duration = time.perf_counter() - start_time
        failed = sum(1 for result in results if not result.passed)
        span.set_attribute("failed_count", failed)

        if metrics is not None:
            metrics.record_batch_run(batch, failed == 0, duration, len(results))

        logger.info(
            f"Validated {len(results)} mapping(s) in batch {batch}: "
            f"{len(results) - failed} passed, {failed} failed ({duration:.3f}s)"
        )

    return results
