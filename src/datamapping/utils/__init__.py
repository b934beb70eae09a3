"""Logging, metrics and tracing utilities."""
