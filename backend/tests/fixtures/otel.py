"""OpenTelemetry test fixtures."""

from collections.abc import Generator

import pytest
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter


@pytest.fixture
def otel_enabled_provider(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[tuple[TracerProvider, InMemorySpanExporter]]:
    """Provide a TracerProvider that records spans in memory.

    Spans never leave the process. ``settings.OTEL_ENABLED`` is switched on
    for the duration of the test and restored by monkeypatch.

    Yields:
        Tuple of (TracerProvider, InMemorySpanExporter); use
        exporter.get_finished_spans() to inspect spans.

    Example:
        def test_my_feature(otel_enabled_provider):
            provider, exporter = otel_enabled_provider
            # ... do something that creates spans ...
            spans = exporter.get_finished_spans()
            assert spans[0].name == "line.add_section"
    """
    from subway.core.config import settings  # noqa: PLC0415

    monkeypatch.setattr(settings, "OTEL_ENABLED", True)

    exporter = InMemorySpanExporter()
    resource = Resource(
        attributes={
            "service.name": "subway-lines-backend-test",
            "service.version": "0.1.0-test",
            "deployment.environment": "test",
        }
    )
    provider = TracerProvider(resource=resource)

    # SimpleSpanProcessor exports synchronously so spans are visible right away
    provider.add_span_processor(SimpleSpanProcessor(exporter))

    # Bypass set_tracer_provider() which has override protection
    trace._TRACER_PROVIDER = provider  # type: ignore[attr-defined]

    yield provider, exporter

    exporter.clear()
    trace._TRACER_PROVIDER = None  # type: ignore[attr-defined]


@pytest.fixture(autouse=True)
def reset_tracer_provider() -> Generator[None]:
    """
    Reset telemetry module globals before and after each test.

    Yields:
        None
    """
    from subway.core import telemetry  # noqa: PLC0415

    telemetry._tracer_provider = None  # type: ignore[attr-defined]
    trace._TRACER_PROVIDER = None  # type: ignore[attr-defined]

    yield

    telemetry._tracer_provider = None  # type: ignore[attr-defined]
    trace._TRACER_PROVIDER = None  # type: ignore[attr-defined]
