"""Tests for build correlation across job histories."""

import pytest

from deliveryview.config import ViewConfig
from deliveryview.correlation import BuildCorrelator, CausationTracer, correlate
from deliveryview.errors import UnboundedCausationChainError
from deliveryview.host import InMemoryExecution, InMemoryJobRegistry, UpstreamCause
from tests.conftest import external, linear_jobs, triggered


@pytest.fixture
def tracer(registry: InMemoryJobRegistry) -> CausationTracer:
    return CausationTracer(registry, ViewConfig())


class TestCorrelate:
    def test_finds_execution_of_same_run(self, registry: InMemoryJobRegistry, tracer: CausationTracer) -> None:
        linear_jobs(registry, "a", "b", "c")
        a1 = external(registry, "a", 1)
        a2 = external(registry, "a", 2)
        b1 = triggered(registry, "b", 1, a1)
        b2 = triggered(registry, "b", 2, a2)
        c1 = triggered(registry, "c", 1, b1)
        c2 = triggered(registry, "c", 2, b2)

        c_history = registry.get_job("c").history()
        assert correlate(c_history, a1, tracer) is c1
        assert correlate(registry.get_job("c").history(), a2, tracer) is c2
        assert correlate(registry.get_job("b").history(), a1, tracer) is b1

    def test_most_recent_match_wins(self, registry: InMemoryJobRegistry, tracer: CausationTracer) -> None:
        """A rebuilt downstream job has two executions for the same run."""
        linear_jobs(registry, "a", "b")
        a1 = external(registry, "a", 1)
        triggered(registry, "b", 1, a1, result="FAILURE")
        rebuilt = triggered(registry, "b", 2, a1)

        assert correlate(registry.get_job("b").history(), a1, tracer) is rebuilt

    def test_origin_absent_from_history(self, registry: InMemoryJobRegistry, tracer: CausationTracer) -> None:
        linear_jobs(registry, "a", "b", "c")
        a1 = external(registry, "a", 1)
        a2 = external(registry, "a", 2)
        triggered(registry, "c", 1, triggered(registry, "b", 1, a1))

        assert correlate(registry.get_job("c").history(), a2, tracer) is None

    def test_empty_history(self, registry: InMemoryJobRegistry, tracer: CausationTracer) -> None:
        linear_jobs(registry, "a", "b", "c")
        a1 = external(registry, "a", 1)

        assert correlate(registry.get_job("c").history(), a1, tracer) is None

    def test_none_origin(self, registry: InMemoryJobRegistry, tracer: CausationTracer) -> None:
        linear_jobs(registry, "a", "b")
        triggered(registry, "b", 1, external(registry, "a", 1))

        assert correlate(registry.get_job("b").history(), None, tracer) is None

    def test_window_limits_scan(self, registry: InMemoryJobRegistry, tracer: CausationTracer) -> None:
        linear_jobs(registry, "a", "b")
        a1 = external(registry, "a", 1)
        triggered(registry, "b", 1, a1)
        for number in range(2, 6):
            registry.record_execution("b", number, result="SUCCESS")

        job = registry.get_job("b")
        assert correlate(job.history(), a1, tracer, window=4) is None
        assert correlate(job.history(), a1, tracer, window=5) is not None
        assert correlate(job.history(), a1, tracer, window=None) is not None

    def test_match_by_job_and_number(self, registry: InMemoryJobRegistry, tracer: CausationTracer) -> None:
        """Executions are matched by (job, number), not object identity."""
        linear_jobs(registry, "a", "b")
        a1 = external(registry, "a", 1)
        b1 = triggered(registry, "b", 1, a1)

        copy_of_a1 = InMemoryExecution("a", 1, result="SUCCESS")
        assert correlate(registry.get_job("b").history(), copy_of_a1, tracer) is b1

    def test_loop_in_candidate_propagates(self, registry: InMemoryJobRegistry, tracer: CausationTracer) -> None:
        linear_jobs(registry, "a", "b")
        a1 = external(registry, "a", 1)
        registry.record_execution("b", 1, result="SUCCESS", causes=[UpstreamCause("b", 1)])

        with pytest.raises(UnboundedCausationChainError):
            correlate(registry.get_job("b").history(), a1, tracer)


class TestBuildCorrelator:
    def test_uses_configured_window(self, registry: InMemoryJobRegistry) -> None:
        linear_jobs(registry, "a", "b")
        a1 = external(registry, "a", 1)
        triggered(registry, "b", 1, a1)
        registry.record_execution("b", 2, result="SUCCESS")

        narrow = BuildCorrelator(CausationTracer(registry, ViewConfig(max_history_window=1)))
        unbounded = BuildCorrelator(CausationTracer(registry, ViewConfig(max_history_window=0)))

        assert narrow.correlate(registry.get_job("b").history(), a1) is None
        assert unbounded.correlate(registry.get_job("b").history(), a1).number == 1
