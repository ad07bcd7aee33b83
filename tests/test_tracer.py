"""Tests for causation tracing."""

import pytest

from deliveryview.config import ViewConfig
from deliveryview.correlation import CausationTracer, trace_origin
from deliveryview.errors import CorrelationError, UnboundedCausationChainError
from deliveryview.host import ExternalCause, InMemoryJobRegistry, UpstreamCause
from tests.conftest import external, linear_jobs, triggered


class TestTraceOrigin:
    def test_none_traces_to_none(self, registry: InMemoryJobRegistry) -> None:
        assert trace_origin(None, registry) is None

    def test_external_execution_is_its_own_origin(self, registry: InMemoryJobRegistry) -> None:
        registry.add_job("a")
        a1 = external(registry, "a", 1)

        assert trace_origin(a1, registry) is a1

    def test_execution_without_causes_is_origin(self, registry: InMemoryJobRegistry) -> None:
        registry.add_job("a")
        a1 = registry.record_execution("a", 1, result="SUCCESS")

        assert trace_origin(a1, registry) is a1

    def test_chain_of_three(self, registry: InMemoryJobRegistry) -> None:
        linear_jobs(registry, "a", "b", "c")
        a1 = external(registry, "a", 1)
        b4 = triggered(registry, "b", 4, a1)
        c9 = triggered(registry, "c", 9, b4)

        assert trace_origin(c9, registry) is a1
        assert trace_origin(b4, registry) is a1

    def test_tracing_is_idempotent(self, registry: InMemoryJobRegistry) -> None:
        linear_jobs(registry, "a", "b", "c", "d")
        a1 = external(registry, "a", 1)
        d1 = triggered(registry, "d", 1, triggered(registry, "c", 1, triggered(registry, "b", 1, a1)))

        origin = trace_origin(d1, registry)
        assert trace_origin(origin, registry) is origin

    def test_first_upstream_cause_is_followed(self, registry: InMemoryJobRegistry) -> None:
        linear_jobs(registry, "a", "b")
        registry.add_job("x")
        a1 = external(registry, "a", 1)
        x1 = external(registry, "x", 1)
        b1 = registry.record_execution(
            "b",
            1,
            result="SUCCESS",
            causes=[ExternalCause("timer"), UpstreamCause("x", 1), UpstreamCause("a", 1)],
        )

        assert trace_origin(b1, registry) is x1
        assert trace_origin(b1, registry) is not a1

    def test_deleted_upstream_job_breaks_chain(self, registry: InMemoryJobRegistry) -> None:
        linear_jobs(registry, "a", "b")
        a1 = external(registry, "a", 1)
        b1 = triggered(registry, "b", 1, a1)
        registry.remove_job("a")

        assert trace_origin(b1, registry) is None

    def test_renamed_upstream_job_breaks_chain(self, registry: InMemoryJobRegistry) -> None:
        linear_jobs(registry, "a", "b")
        a1 = external(registry, "a", 1)
        b1 = triggered(registry, "b", 1, a1)
        registry.rename_job("a", "a-renamed")

        assert trace_origin(b1, registry) is None

    def test_missing_upstream_execution_breaks_chain(self, registry: InMemoryJobRegistry) -> None:
        linear_jobs(registry, "a", "b")
        b1 = registry.record_execution("b", 1, result="SUCCESS", causes=[UpstreamCause("a", 99)])

        assert trace_origin(b1, registry) is None


class TestUnboundedChains:
    def test_loop_raises(self, registry: InMemoryJobRegistry) -> None:
        registry.add_job("a")
        registry.add_job("b")
        registry.record_execution("a", 1, result="SUCCESS", causes=[UpstreamCause("b", 1)])
        b1 = registry.record_execution("b", 1, result="SUCCESS", causes=[UpstreamCause("a", 1)])

        with pytest.raises(UnboundedCausationChainError) as exc_info:
            trace_origin(b1, registry)

        assert exc_info.value.chain == ["b#1", "a#1", "b#1"]
        assert exc_info.value.job_name == "b"
        assert exc_info.value.execution_number == 1
        assert isinstance(exc_info.value, CorrelationError)

    def test_self_cause_raises(self, registry: InMemoryJobRegistry) -> None:
        registry.add_job("a")
        a1 = registry.record_execution("a", 1, result="SUCCESS", causes=[UpstreamCause("a", 1)])

        with pytest.raises(UnboundedCausationChainError):
            trace_origin(a1, registry)

    def test_chain_at_depth_limit_resolves(self, registry: InMemoryJobRegistry) -> None:
        names = [f"j{i}" for i in range(4)]
        linear_jobs(registry, *names)
        current = external(registry, "j0", 1)
        origin = current
        for name in names[1:]:
            current = triggered(registry, name, 1, current)

        # j3 -> j2 -> j1 -> j0 is three links
        assert trace_origin(current, registry, max_depth=3) is origin
        with pytest.raises(UnboundedCausationChainError):
            trace_origin(current, registry, max_depth=2)


class TestCausationTracer:
    def test_uses_configured_depth(self, registry: InMemoryJobRegistry) -> None:
        linear_jobs(registry, "a", "b", "c")
        a1 = external(registry, "a", 1)
        c1 = triggered(registry, "c", 1, triggered(registry, "b", 1, a1))

        assert CausationTracer(registry, ViewConfig(max_chain_depth=2)).trace(c1) is a1
        with pytest.raises(UnboundedCausationChainError):
            CausationTracer(registry, ViewConfig(max_chain_depth=1)).trace(c1)
