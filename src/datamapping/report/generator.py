"""
Report generation from batch validation results.

Turns a list of MappingResult objects into a report dictionary with overall
status, counts, per-mapping discrepancies and recommendations.
"""

from datetime import UTC, datetime
from typing import Any

from datamapping.batch import MappingResult


class DiscrepancyType:
    """Constants for discrepancy types."""

    MISMATCH = "MISMATCH"
    VALIDATION_ERROR = "VALIDATION_ERROR"


def _create_discrepancy(result: MappingResult) -> dict[str, Any]:
    """
    Create a discrepancy record for a failed mapping.

    Args:
        result: Result of a mapping that did not pass

    Returns:
        Discrepancy dictionary
    """
    if result.error is not None:
        return {
            "mapping": result.name,
            "issue_type": DiscrepancyType.VALIDATION_ERROR,
            "differences": [],
            "error": result.error,
        }

    return {
        "mapping": result.name,
        "issue_type": DiscrepancyType.MISMATCH,
        "differences": (result.differences or "").splitlines(),
        "error": None,
    }


def generate_report(results: list[MappingResult]) -> dict[str, Any]:
    """
    Generate a validation report from batch results

    Args:
        results: Results returned by validate_mappings() or ParallelValidator

    Returns:
        Dictionary containing:
        - status: PASS, FAIL, or NO_DATA
        - total_mappings: Number of mappings validated
        - mappings_passed: Number of mappings that matched
        - mappings_failed: Number of mappings with differences
        - mappings_errored: Number of mappings whose validation raised
        - discrepancies: List of discrepancy details
        - summary: Human-readable summary
        - recommendations: List of recommended actions
        - timestamp: Report generation timestamp
    """
    if not results:
        return {
            "status": "NO_DATA",
            "total_mappings": 0,
            "mappings_passed": 0,
            "mappings_failed": 0,
            "mappings_errored": 0,
            "discrepancies": [],
            "summary": "No mapping results available",
            "recommendations": [],
            "timestamp": datetime.now(UTC).isoformat(),
        }

    passed = sum(1 for result in results if result.passed)
    errored = sum(1 for result in results if result.error is not None)
    failed = len(results) - passed - errored

    discrepancies = [_create_discrepancy(result) for result in results if not result.passed]

    return {
        "status": "PASS" if not discrepancies else "FAIL",
        "total_mappings": len(results),
        "mappings_passed": passed,
        "mappings_failed": failed,
        "mappings_errored": errored,
        "discrepancies": discrepancies,
        "summary": _generate_summary(len(results), passed, failed, errored),
        "recommendations": _generate_recommendations(discrepancies),
        "timestamp": datetime.now(UTC).isoformat(),
    }


def _generate_summary(total: int, passed: int, failed: int, errored: int) -> str:
    if passed == total:
        return f"All {total} mappings passed validation."

    summary = f"Validation found differences in {failed} of {total} mappings."
    if errored:
        summary += f" {errored} mapping(s) could not be validated."
    return summary + f" {passed} mappings match."


def _generate_recommendations(discrepancies: list[dict[str, Any]]) -> list[str]:
    """
    Generate actionable recommendations based on discrepancies

    Args:
        discrepancies: List of discrepancy details

    Returns:
        List of recommendation strings
    """
    if not discrepancies:
        return ["Source and destination data are consistent."]

    recommendations = []

    errors = [d for d in discrepancies if d["issue_type"] == DiscrepancyType.VALIDATION_ERROR]
    if errors:
        recommendations.append(
            f"{len(errors)} mapping(s) raised during validation. "
            "Check their input values and custom comparators."
        )

    missing = sum(
        1
        for d in discrepancies
        for line in d["differences"]
        if line.startswith("Destination Collection does not contain")
    )
    if missing:
        recommendations.append(
            f"{missing} source entr{'y is' if missing == 1 else 'ies are'} missing "
            "from the destination. Check that the migration loaded every record."
        )

    extra = sum(
        1
        for d in discrepancies
        for line in d["differences"]
        if line.startswith("Source Collection does not contain")
    )
    if extra:
        recommendations.append(
            f"{extra} destination entr{'y has' if extra == 1 else 'ies have'} no "
            "source counterpart. Look for duplicate or unexpected inserts."
        )

    return recommendations
