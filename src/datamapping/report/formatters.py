"""
Report formatting and export utilities.

Exports validation reports as JSON, CSV, or console/terminal text.
"""

import csv
import json
from typing import Any


def export_report_json(report: dict[str, Any], output_path: str) -> None:
    """
    Export report to JSON file

    Args:
        report: Report dictionary
        output_path: Path to output file
    """
    with open(output_path, 'w') as f:
        json.dump(report, f, indent=2)


def export_report_csv(report: dict[str, Any], output_path: str) -> None:
    """
    Export report to CSV file, one row per difference line

    Args:
        report: Report dictionary
        output_path: Path to output file
    """
    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)

        writer.writerow(["Mapping", "Issue Type", "Detail"])

        for discrepancy in report.get("discrepancies", []):
            details = discrepancy.get("differences") or [discrepancy.get("error") or ""]
            for detail in details:
                writer.writerow([
                    discrepancy.get("mapping", ""),
                    discrepancy.get("issue_type", ""),
                    detail,
                ])


def format_report_console(report: dict[str, Any]) -> str:
    """
    Format report for console output

    Args:
        report: Report dictionary

    Returns:
        Formatted string for console display
    """
    lines = []

    lines.append("=" * 80)
    lines.append("DATA MAPPING VALIDATION REPORT")
    lines.append("=" * 80)
    lines.append(f"Status: {report['status']}")
    lines.append(f"Timestamp: {report['timestamp']}")
    lines.append(f"Total Mappings: {report['total_mappings']}")
    lines.append(f"Mappings Passed: {report['mappings_passed']}")
    lines.append(f"Mappings Failed: {report['mappings_failed']}")
    lines.append(f"Mappings Errored: {report['mappings_errored']}")
    lines.append("")

    lines.append("SUMMARY")
    lines.append("-" * 80)
    lines.append(report['summary'])
    lines.append("")

    if report['discrepancies']:
        lines.append("DISCREPANCIES")
        lines.append("-" * 80)

        for disc in report['discrepancies']:
            lines.append(f"Mapping: {disc['mapping']}")
            lines.append(f"  Issue: {disc['issue_type']}")
            if disc['error']:
                lines.append(f"  Error: {disc['error']}")
            for difference in disc['differences']:
                lines.append(f"  {difference}")
            lines.append("")

    if report['recommendations']:
        lines.append("RECOMMENDATIONS")
        lines.append("-" * 80)
        for i, rec in enumerate(report['recommendations'], 1):
            lines.append(f"{i}. {rec}")
        lines.append("")

    lines.append("=" * 80)

    return "\n".join(lines)
