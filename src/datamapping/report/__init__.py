"""
Validation report generation and formatting.

Builds reports from batch validation results, with JSON, CSV and console
output formats.
"""

from .formatters import export_report_csv, export_report_json, format_report_console
from .generator import DiscrepancyType, generate_report

__all__ = [
    'generate_report',
    'DiscrepancyType',
    'export_report_json',
    'export_report_csv',
    'format_report_console',
]
