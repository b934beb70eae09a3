"""
Unit tests for datamapping.utils.metrics

Tests cover the metrics publisher, validation batch metrics and the
module-level helpers. Every test uses its own registry.
"""

from unittest.mock import MagicMock, patch

import pytest
from prometheus_client import Counter

from datamapping.utils.metrics import (
    MetricsPublisher,
    ValidationMetrics,
    get_or_create_metric,
    initialize_metrics,
)


class TestMetricsPublisher:
    """Test MetricsPublisher class"""

    def test_init_with_default_port(self):
        """Test initialization with default port"""
        # Arrange & Act
        publisher = MetricsPublisher()

        # Assert
        assert publisher.port == 9091
        assert publisher.registry is not None
        assert publisher.is_started() is False

    def test_init_with_custom_registry(self, registry):
        publisher = MetricsPublisher(port=8080, registry=registry)

        assert publisher.port == 8080
        assert publisher.registry is registry

    @patch("datamapping.utils.metrics.publisher.start_http_server")
    @patch("datamapping.utils.metrics.publisher.logger")
    def test_start_successful(self, mock_logger, mock_start_http_server, registry):
        """Test successful server start"""
        # Arrange
        publisher = MetricsPublisher(port=9091, registry=registry)

        # Act
        publisher.start()

        # Assert
        mock_start_http_server.assert_called_once_with(9091, registry=registry)
        assert publisher.is_started() is True
        assert "Metrics server started on port 9091" in mock_logger.info.call_args[0][0]

    @patch("datamapping.utils.metrics.publisher.start_http_server")
    @patch("datamapping.utils.metrics.publisher.logger")
    def test_start_twice_warns(self, mock_logger, mock_start_http_server, registry):
        """Test that starting an already-started server only logs a warning"""
        # Arrange
        publisher = MetricsPublisher(registry=registry)
        publisher.start()

        # Act
        publisher.start()

        # Assert
        mock_start_http_server.assert_called_once()
        mock_logger.warning.assert_called_once()

    @patch("datamapping.utils.metrics.publisher.start_http_server")
    @patch("datamapping.utils.metrics.publisher.logger")
    def test_start_port_already_in_use(self, mock_logger, mock_start_http_server, registry):
        """Test that a busy port raises RuntimeError"""
        # Arrange
        mock_start_http_server.side_effect = OSError("[Errno 98] Address already in use")
        publisher = MetricsPublisher(port=9091, registry=registry)

        # Act & Assert
        with pytest.raises(RuntimeError, match="port 9091 is already in use"):
            publisher.start()
        assert publisher.is_started() is False
        mock_logger.error.assert_called_once()

    @patch("datamapping.utils.metrics.publisher.start_http_server")
    def test_start_other_os_error_raises(self, mock_start_http_server, registry):
        mock_start_http_server.side_effect = OSError("Permission denied")

        with pytest.raises(OSError, match="Permission denied"):
            MetricsPublisher(registry=registry).start()


class TestValidationMetrics:
    """Test ValidationMetrics class"""

    def test_init_creates_all_metrics(self, registry):
        metrics = ValidationMetrics(registry=registry)

        assert metrics.registry is registry
        assert metrics.batch_runs_total is not None
        assert metrics.batch_duration_seconds is not None
        assert metrics.batch_last_run_timestamp is not None
        assert metrics.mappings_validated_total is not None
        assert metrics.mapping_mismatches_total is not None
        assert metrics.mapping_errors_total is not None

    @patch("datamapping.utils.metrics.validation.time.time", return_value=1700000000.0)
    def test_record_batch_run_pass(self, mock_time, registry):
        """Test that a passing batch updates every batch metric"""
        # Arrange
        metrics = ValidationMetrics(registry=registry)

        # Act
        metrics.record_batch_run("nightly", passed=True, duration=1.5, mappings_validated=12)

        # Assert
        assert registry.get_sample_value(
            "datamapping_batch_runs_total", {"batch": "nightly", "status": "pass"}
        ) == 1.0
        assert registry.get_sample_value(
            "datamapping_batch_duration_seconds_sum", {"batch": "nightly"}
        ) == 1.5
        assert registry.get_sample_value(
            "datamapping_batch_last_run_timestamp", {"batch": "nightly"}
        ) == 1700000000.0
        assert registry.get_sample_value(
            "datamapping_mappings_validated_total", {"batch": "nightly"}
        ) == 12.0

    def test_record_batch_run_fail(self, registry):
        metrics = ValidationMetrics(registry=registry)

        metrics.record_batch_run("nightly", passed=False, duration=0.2, mappings_validated=3)
        metrics.record_batch_run("nightly", passed=False, duration=0.3, mappings_validated=3)

        assert registry.get_sample_value(
            "datamapping_batch_runs_total", {"batch": "nightly", "status": "fail"}
        ) == 2.0
        assert registry.get_sample_value(
            "datamapping_batch_runs_total", {"batch": "nightly", "status": "pass"}
        ) is None
        assert registry.get_sample_value(
            "datamapping_mappings_validated_total", {"batch": "nightly"}
        ) == 6.0

    def test_record_mismatch(self, registry):
        metrics = ValidationMetrics(registry=registry)

        metrics.record_mismatch("adhoc")
        metrics.record_mismatch("adhoc")

        assert registry.get_sample_value(
            "datamapping_mapping_mismatches_total", {"batch": "adhoc"}
        ) == 2.0

    def test_record_error(self, registry):
        metrics = ValidationMetrics(registry=registry)

        metrics.record_error("adhoc", "ValueError")

        assert registry.get_sample_value(
            "datamapping_mapping_errors_total",
            {"batch": "adhoc", "error_type": "ValueError"},
        ) == 1.0


class TestGetOrCreateMetric:
    """Test get_or_create_metric"""

    def test_creates_then_reuses(self, registry):
        def factory():
            return Counter("reloads_total", "Reloads", registry=registry)

        first = get_or_create_metric(factory, "reloads_total", registry=registry)
        second = get_or_create_metric(factory, "reloads_total", registry=registry)

        assert second is first

    def test_unrelated_value_error_propagates(self, registry):
        def factory():
            raise ValueError("bad metric definition")

        with pytest.raises(ValueError, match="bad metric definition"):
            get_or_create_metric(factory, "missing_total", registry=registry)


class TestInitializeMetrics:
    """Test initialize_metrics function"""

    @patch("datamapping.utils.metrics.MetricsPublisher")
    def test_initialize_metrics(self, mock_publisher_class, registry):
        """Test that the publisher is started and every metric set returned"""
        # Arrange
        mock_publisher = MagicMock()
        mock_publisher_class.return_value = mock_publisher

        # Act
        result = initialize_metrics(port=9200, registry=registry)

        # Assert
        mock_publisher_class.assert_called_once_with(port=9200, registry=registry)
        mock_publisher.start.assert_called_once()
        assert result["publisher"] is mock_publisher
        assert isinstance(result["validation"], ValidationMetrics)
        assert set(result) == {"publisher", "validation"}
        assert result["validation"].registry is registry
