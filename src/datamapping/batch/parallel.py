"""
Parallel batch validation.

Mappings are independent of each other once constructed (and consolidated),
so a batch can be validated on a thread pool.
"""

import logging
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed

from opentelemetry import trace

from datamapping.utils.metrics import ValidationMetrics
from datamapping.utils.tracing import trace_operation
from datamapping.validators.base import DataMappingValidator

from .runner import DEFAULT_BATCH, MappingResult, validate_mapping

logger = logging.getLogger(__name__)


class ParallelValidator:
    """
    Validates mappings concurrently using ThreadPoolExecutor.

    Consolidation mutates mappings and must be finished before a batch is
    handed to this class.
    """

    def __init__(
        self,
        max_workers: int = 4,
        metrics: ValidationMetrics | None = None,
        batch: str = DEFAULT_BATCH,
    ):
        """
        Initialize parallel validator.

        Args:
            max_workers: Maximum concurrent workers (default: 4)
            metrics: Optional metrics for the batch
            batch: Batch label for metrics and spans

        Raises:
            ValueError: If max_workers is less than 1
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        self.max_workers = max_workers
        self.metrics = metrics
        self.batch = batch

        logger.info(f"ParallelValidator initialized: max_workers={max_workers}, batch={batch}")

    def validate(self, mappings: Iterable[DataMappingValidator]) -> list[MappingResult]:
        """
        Validate mappings in parallel

        Args:
            mappings: Mappings to validate

        Returns:
            One MappingResult per mapping, in input order
        """
        mappings = list(mappings)

        with trace_operation(
            "parallel_validate_mappings",
            kind=trace.SpanKind.INTERNAL,
            batch=self.batch,
            mapping_count=len(mappings),
            max_workers=self.max_workers,
        ):
            if not mappings:
                logger.warning("No mappings to validate")
                return []

            start_time = time.perf_counter()
            results: list[MappingResult | None] = [None] * len(mappings)

            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                future_to_index = {
                    executor.submit(validate_mapping, mapping, self.metrics, self.batch): index
                    for index, mapping in enumerate(mappings)
                }

                for completed, future in enumerate(as_completed(future_to_index), 1):
                    index = future_to_index[future]
                    results[index] = future.result()
                    logger.debug(
                        f"Mapping {results[index].name} validated "
                        f"({completed}/{len(mappings)})"
                    )

            duration = time.perf_counter() - start_time
            failed = sum(1 for result in results if not result.passed)

            if self.metrics is not None:
                self.metrics.record_batch_run(self.batch, failed == 0, duration, len(results))

            logger.info(
                f"Parallel validation of batch {self.batch} complete: "
                f"{len(results) - failed}/{len(results)} passed ({duration:.3f}s)"
            )

            return results
