"""
Batch validation of mappings, sequential or on a thread pool.
"""

from .parallel import ParallelValidator
from .runner import MappingResult, validate_mapping, validate_mappings

__all__ = [
    "MappingResult",
    "validate_mapping",
    "validate_mappings",
    "ParallelValidator",
]
