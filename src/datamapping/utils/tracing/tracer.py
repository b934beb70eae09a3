"""
Tracer initialization and configuration for OpenTelemetry.

Sets up the tracer provider used by validation batches. Exporters are only
configured on request: an OTLP endpoint (argument or OTLP_ENDPOINT) and/or
console export (argument or TRACE_CONSOLE=true).
"""

import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

logger = logging.getLogger(__name__)

_tracer: trace.Tracer | None = None
_is_initialized = False


def initialize_tracing(
    service_name: str = "datamapping",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
    sampling_rate: float = 1.0
) -> trace.Tracer:
    """
    Initialize distributed tracing with OpenTelemetry.

    Args:
        service_name: Name of the service for identification
        otlp_endpoint: OTLP collector endpoint (e.g., "localhost:4317")
        console_export: If True, also export traces to console (debug)
        sampling_rate: Sampling rate 0.0-1.0 (1.0 = trace everything)

    Returns:
        Configured tracer instance

    Example:
        >>> tracer = initialize_tracing(
        ...     service_name="nightly-mapping-checks",
        ...     otlp_endpoint="localhost:4317"
        ... )
    """
    global _tracer, _is_initialized

    if _is_initialized:
        logger.warning("Tracing already initialized, returning existing tracer")
        return _tracer

    resource = Resource(attributes={
        SERVICE_NAME: service_name
    })

    provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(sampling_rate)),
    )

    exporters = []

    if otlp_endpoint is None:
        otlp_endpoint = os.getenv("OTLP_ENDPOINT")

    if otlp_endpoint:
        try:
            otlp_exporter = OTLPSpanExporter(
                endpoint=otlp_endpoint,
                insecure=True
            )
            provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
            exporters.append("OTLP")
            logger.info(f"OTLP exporter configured: {otlp_endpoint}")
        except Exception as e:
            logger.warning(f"Failed to configure OTLP exporter: {e}")

    if console_export or os.getenv("TRACE_CONSOLE", "").lower() == "true":
        console_exporter = ConsoleSpanExporter()
        provider.add_span_processor(BatchSpanProcessor(console_exporter))
        exporters.append("Console")
        logger.info("Console exporter configured")

    if not exporters:
        logger.info("No trace exporters configured, spans will not be exported")

    trace.set_tracer_provider(provider)

    _tracer = trace.get_tracer(service_name)
    _is_initialized = True

    logger.info(
        f"Tracing initialized: {service_name} "
        f"(exporters: {', '.join(exporters) or 'none'}, sampling: {sampling_rate})"
    )

    return _tracer


def get_tracer() -> trace.Tracer:
    """
    Get the global tracer instance.

    Initializes tracing with defaults if not already initialized.
    """
    global _tracer

    if _tracer is None:
        logger.info("Tracer not initialized, initializing with defaults")
        _tracer = initialize_tracing()

    return _tracer


def shutdown_tracing():
    """
    Shutdown tracing and flush pending spans.

    Should be called before application exit.
    """
    global _is_initialized

    if _is_initialized:
        try:
            provider = trace.get_tracer_provider()
            if hasattr(provider, 'shutdown'):
                provider.shutdown()
            logger.info("Tracing shutdown complete")
        except Exception as e:
            logger.error(f"Error during tracing shutdown: {e}")
        finally:
            _is_initialized = False
