"""
Pytest configuration and fixtures for datamapping tests.
Provides shared fixtures for rows, metrics registries and environment setup.
"""

import pytest
from prometheus_client import CollectorRegistry

from datamapping.rows import Row


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(autouse=True)
def no_trace_export(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tracing local: no collector endpoint and no console exporter."""
    monkeypatch.delenv("OTLP_ENDPOINT", raising=False)
    monkeypatch.delenv("TRACE_CONSOLE", raising=False)


@pytest.fixture
def registry() -> CollectorRegistry:
    """Fresh Prometheus registry so metric instances never collide."""
    return CollectorRegistry()


@pytest.fixture
def customer_rows() -> list[Row]:
    """Source-side customer rows."""
    return [
        Row("customers", {"id": 1, "name": "Alice", "balance": "10.50"}, schema="dbo"),
        Row("customers", {"id": 2, "name": "Bob", "balance": "3.00"}, schema="dbo"),
        Row("customers", {"id": 3, "name": "Carol", "balance": None}, schema="dbo"),
    ]


@pytest.fixture
def migrated_rows() -> list[Row]:
    """Destination-side rows for the same customers."""
    return [
        Row("clients", {"client_id": 1, "full_name": "Alice"}, schema="public"),
        Row("clients", {"client_id": 2, "full_name": "Bob"}, schema="public"),
        Row("clients", {"client_id": 3, "full_name": "Carol"}, schema="public"),
    ]
