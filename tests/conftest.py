"""Shared pytest fixtures for deliveryview tests."""

from collections.abc import Callable, Generator

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from deliveryview import tracing
from deliveryview.config import ViewConfig, reset_view_config
from deliveryview.host import ExternalCause, InMemoryExecution, InMemoryJobRegistry, UpstreamCause

# Fixed "now" for every resolver/assembler test (epoch milliseconds)
NOW_MS = 1_700_000_000_000


@pytest.fixture(autouse=True)
def reset_config() -> Generator[None, None, None]:
    """Reset the default ViewConfig between tests for isolation."""
    reset_view_config()
    yield
    reset_view_config()


@pytest.fixture
def registry() -> InMemoryJobRegistry:
    return InMemoryJobRegistry()


@pytest.fixture
def config() -> ViewConfig:
    return ViewConfig()


@pytest.fixture
def clock() -> Callable[[], float]:
    return lambda: float(NOW_MS)


# =============================================================================
# Execution helpers
# =============================================================================


def external(registry: InMemoryJobRegistry, job: str, number: int, result: str = "SUCCESS") -> InMemoryExecution:
    """Record a manually started, finished execution."""
    return registry.record_execution(
        job,
        number,
        result=result,
        causes=[ExternalCause("Started by user")],
    )


def triggered(
    registry: InMemoryJobRegistry,
    job: str,
    number: int,
    upstream: InMemoryExecution,
    result: str | None = "SUCCESS",
    in_progress: bool = False,
) -> InMemoryExecution:
    """Record an execution triggered by ``upstream``."""
    return registry.record_execution(
        job,
        number,
        result=result,
        in_progress=in_progress,
        start_timestamp=NOW_MS - 30_000,
        estimated_duration=60_000,
        causes=[UpstreamCause(upstream.job_name, upstream.number)],
    )


def linear_jobs(registry: InMemoryJobRegistry, *names: str) -> None:
    """Register jobs where each triggers the next."""
    for name, downstream in zip(names, [*names[1:], None]):
        registry.add_job(name, downstream=[downstream] if downstream else [])


# =============================================================================
# Tracing
# =============================================================================


@pytest.fixture
def spans(monkeypatch: pytest.MonkeyPatch) -> Generator[InMemorySpanExporter, None, None]:
    """Route deliveryview spans into an in-memory exporter."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setattr(tracing, "_tracer", provider.get_tracer("test"))
    yield exporter
    provider.shutdown()
