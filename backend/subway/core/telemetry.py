"""OpenTelemetry distributed tracing configuration."""

import threading
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import SpanKind, Status, StatusCode

from subway import __version__
from subway.core.config import require_config, settings

if TYPE_CHECKING:
    from opentelemetry.trace.span import Span

logger = structlog.get_logger(__name__)

# Created on first use when tracing is enabled
_tracer_provider: TracerProvider | None = None
_tracer_provider_lock = threading.Lock()


def get_tracer_provider() -> TracerProvider | None:
    """
    Get or create the TracerProvider used for line and station spans.

    Returns:
        TracerProvider if OTEL is enabled, None otherwise
    """
    if not settings.OTEL_ENABLED:
        return None

    global _tracer_provider  # noqa: PLW0603
    if _tracer_provider is None:
        with _tracer_provider_lock:
            if _tracer_provider is None:  # Double-checked locking
                _tracer_provider = _create_tracer_provider()
    return _tracer_provider


def _create_tracer_provider() -> TracerProvider:
    """
    Create and configure TracerProvider (internal helper).

    Returns:
        Configured TracerProvider

    Raises:
        ValueError: If required OTLP endpoint is missing in production
    """
    if not settings.DEBUG:
        require_config("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")

    resource = Resource(
        attributes={
            "service.name": settings.OTEL_SERVICE_NAME,
            "service.version": __version__,
            "deployment.environment": settings.OTEL_ENVIRONMENT,
        }
    )
    provider = TracerProvider(resource=resource)

    if settings.OTEL_EXPORTER_OTLP_TRACES_ENDPOINT:
        headers = _parse_otlp_headers(settings.OTEL_EXPORTER_OTLP_HEADERS or "")
        otlp_exporter = OTLPSpanExporter(
            endpoint=settings.OTEL_EXPORTER_OTLP_TRACES_ENDPOINT,
            headers=headers,
        )
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

        logger.info(
            "otel_tracer_provider_created",
            endpoint=settings.OTEL_EXPORTER_OTLP_TRACES_ENDPOINT,
            service_name=settings.OTEL_SERVICE_NAME,
            environment=settings.OTEL_ENVIRONMENT,
        )
    else:
        logger.warning("otel_no_traces_endpoint_configured", message="traces will not be exported")

    return provider


def _parse_otlp_headers(headers_str: str) -> dict[str, str]:
    """
    Parse OTLP headers from comma-separated key=value pairs.

    Example:
        >>> _parse_otlp_headers("Authorization=Bearer token123,X-Custom=value")
        {'Authorization': 'Bearer token123', 'X-Custom': 'value'}
    """
    if not headers_str or not headers_str.strip():
        return {}

    headers = {}
    for raw_pair in headers_str.split(","):
        pair = raw_pair.strip()
        if "=" in pair:
            key, value = pair.split("=", 1)
            headers[key.strip()] = value.strip()
        elif pair:
            logger.warning("otel_malformed_header", pair=pair)

    return headers


def shutdown_tracer_provider() -> None:
    """Flush pending spans and release the provider. Safe to call when none exists."""
    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        logger.info("otel_tracer_provider_shutdown")


# OpenTelemetry attribute values can be primitives or lists of primitives
AttributeValue = str | int | float | bool | list[str] | list[int] | list[float] | list[bool]


@contextmanager
def service_span(
    name: str,
    service: str,
    kind: SpanKind = SpanKind.INTERNAL,
    **attributes: AttributeValue,
) -> Generator["Span"]:
    """Context manager for service operation spans with explicit status.

    Sets StatusCode.OK on success; on failure the SDK records the exception
    and sets StatusCode.ERROR. The tracer is acquired at call time so it uses
    the provider installed during application startup.

    Args:
        name: Span name (e.g., "line.add_section")
        service: Service name for peer.service attribute (e.g., "line-service")
        kind: Span kind
        **attributes: Additional span attributes

    Yields:
        Span: The active span for setting additional attributes
    """
    tracer = trace.get_tracer(__name__)
    span_attributes = {
        "peer.service": service,
        **attributes,
    }
    with tracer.start_as_current_span(
        name,
        kind=kind,
        attributes=span_attributes,
    ) as span:
        yield span
        span.set_status(Status(StatusCode.OK))
