"""OpenTelemetry tracing for deliveryview.

Every exposed operation (extraction, latest-N and aggregated assembly)
runs inside a span, so a host application with an exporter configured
can see how long correlation takes per pipeline.

Usage:
    from deliveryview.tracing import configure_tracing, trace_operation

    configure_tracing(service_name="pipeline-dashboard")

    with trace_operation("pipeline.latest", pipeline="release") as span:
        pipelines = assembler.latest(prototype, 3)
        span.set_attribute("pipeline.instances", len(pipelines))

Without ``configure_tracing`` the API's default no-op tracer provider is
used and spans cost next to nothing.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import Status, StatusCode, Tracer

_INSTRUMENTATION_NAME = "deliveryview"

_tracer: Tracer | None = None


def configure_tracing(
    service_name: str = "deliveryview",
    service_version: str | None = None,
    environment: str | None = None,
) -> TracerProvider:
    """Install an SDK TracerProvider for deliveryview.

    Exporters are added to the returned provider by the caller.

    Args:
        service_name: Name of the service (appears in traces)
        service_version: Optional version string
        environment: Optional environment (dev, staging, prod)

    Returns:
        The installed provider
    """
    global _tracer

    resource_attrs = {"service.name": service_name}
    if service_version:
        resource_attrs["service.version"] = service_version
    if environment:
        resource_attrs["deployment.environment"] = environment

    provider = TracerProvider(resource=Resource.create(resource_attrs))
    trace.set_tracer_provider(provider)

    _tracer = trace.get_tracer(_INSTRUMENTATION_NAME, service_version)
    return provider


def get_tracer() -> Tracer:
    """Get the deliveryview tracer from the current global provider."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(_INSTRUMENTATION_NAME)
    return _tracer


@contextmanager
def trace_operation(name: str, **attributes: Any) -> Iterator[Any]:
    """Context manager for tracing an operation.

    Creates a span for the operation and automatically:
    - Sets provided attributes (None values are skipped)
    - Records exceptions if raised
    - Sets error status on failure

    Args:
        name: Name of the operation (e.g., "pipeline.extract")
        **attributes: Attributes to set on the span

    Yields:
        The span
    """
    with get_tracer().start_as_current_span(name, record_exception=False, set_status_on_exception=False) as span:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(key, str(value))

        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise


def add_event(name: str, attributes: dict[str, Any] | None = None) -> None:
    """Add an event to the current span."""
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=attributes or {})
