"""OpenTelemetry test helper functions."""

from typing import TYPE_CHECKING

from opentelemetry.trace import StatusCode

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import ReadableSpan
    from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter


def get_span(exporter: "InMemorySpanExporter", name: str) -> "ReadableSpan":
    """
    Get the single finished span with the given name.

    Example:
        >>> span = get_span(exporter, "line.add_section")
        >>> span.attributes["line.split"]
        True
    """
    spans = [span for span in exporter.get_finished_spans() if span.name == name]
    assert len(spans) == 1, f"Expected one '{name}' span, got {len(spans)}"
    return spans[0]


def assert_span_status(
    span: "ReadableSpan",
    expected_status: StatusCode,
    *,
    check_exception: bool = False,
) -> None:
    """
    Assert span status and optionally verify the exception event.

    Args:
        span: ReadableSpan to check
        expected_status: Expected StatusCode (OK or ERROR)
        check_exception: If True, verify an exception event exists when status is ERROR
    """
    assert span.status.status_code == expected_status, (
        f"Expected span status {expected_status}, got {span.status.status_code}"
    )

    if check_exception and expected_status == StatusCode.ERROR:
        exception_events = [e for e in span.events if e.name == "exception"]
        assert len(exception_events) >= 1, "Expected exception event in ERROR span"
