"""Tests for PipelineFactory and the spans it emits."""

import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from deliveryview.config import ViewConfig
from deliveryview.errors import ConfigurationError, CyclicTopologyError, UnknownJobError
from deliveryview.factory import PipelineFactory
from deliveryview.host import InMemoryJobRegistry
from deliveryview.models import status
from tests.conftest import external, linear_jobs, triggered


@pytest.fixture
def factory(registry: InMemoryJobRegistry, clock) -> PipelineFactory:
    linear_jobs(registry, "build", "test")
    for number in (1, 2):
        triggered(registry, "test", number, external(registry, "build", number))
    return PipelineFactory(registry, ViewConfig(), clock)


class TestPipelineFactory:
    def test_extract_prototype(self, factory: PipelineFactory) -> None:
        prototype = factory.extract_prototype("release", "build")

        assert prototype.name == "release"
        assert prototype.is_prototype
        assert prototype.task_ids() == ["build", "test"]

    def test_unknown_starting_job(self, factory: PipelineFactory) -> None:
        with pytest.raises(UnknownJobError) as exc_info:
            factory.extract_prototype("release", "nope")

        assert exc_info.value.job_name == "nope"

    def test_cycle_propagates(self, registry: InMemoryJobRegistry) -> None:
        registry.add_job("a", downstream=["b"])
        registry.add_job("b", downstream=["a"])

        with pytest.raises(CyclicTopologyError):
            PipelineFactory(registry, ViewConfig()).extract_prototype("loop", "a")

    def test_invalid_config_is_rejected(self, registry: InMemoryJobRegistry) -> None:
        with pytest.raises(ConfigurationError):
            PipelineFactory(registry, ViewConfig(max_chain_depth=0))

    def test_latest_instances(self, factory: PipelineFactory) -> None:
        prototype = factory.extract_prototype("release", "build")

        pipelines = factory.latest_instances(prototype, 2)

        assert [p.version for p in pipelines] == ["#2", "#1"]
        assert all(t.status == status.success() for p in pipelines for t in p.tasks())

    def test_latest_instance(self, factory: PipelineFactory) -> None:
        prototype = factory.extract_prototype("release", "build")

        assert factory.latest_instance(prototype).version == "#2"

    def test_latest_instance_never_ran(self, registry: InMemoryJobRegistry) -> None:
        registry.add_job("build")
        factory = PipelineFactory(registry, ViewConfig())

        assert factory.latest_instance(factory.extract_prototype("release", "build")) is None

    def test_aggregated_instance(self, factory: PipelineFactory) -> None:
        prototype = factory.extract_prototype("release", "build")

        pipeline = factory.aggregated_instance(prototype)

        assert pipeline.version == "#2"
        assert [t.status for t in pipeline.tasks()] == [status.success(), status.success()]


class TestFactorySpans:
    def test_extract_span(self, factory: PipelineFactory, spans: InMemorySpanExporter) -> None:
        factory.extract_prototype("release", "build")

        (span,) = spans.get_finished_spans()
        assert span.name == "pipeline.extract"
        assert span.attributes["pipeline"] == "release"
        assert span.attributes["starting_job"] == "build"
        assert span.attributes["pipeline.stages"] == 2

    def test_failed_extract_marks_span(self, factory: PipelineFactory, spans: InMemorySpanExporter) -> None:
        with pytest.raises(UnknownJobError):
            factory.extract_prototype("release", "nope")

        (span,) = spans.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert span.events[0].name == "exception"

    def test_latest_span(self, factory: PipelineFactory, spans: InMemorySpanExporter) -> None:
        prototype = factory.extract_prototype("release", "build")
        spans.clear()

        factory.latest_instances(prototype, 5)

        (span,) = spans.get_finished_spans()
        assert span.name == "pipeline.latest"
        assert span.attributes["count"] == "5"
        assert span.attributes["pipeline.instances"] == 2

    def test_latest_span_skips_unset_count(self, factory: PipelineFactory, spans: InMemorySpanExporter) -> None:
        prototype = factory.extract_prototype("release", "build")
        spans.clear()

        factory.latest_instances(prototype)

        (span,) = spans.get_finished_spans()
        assert "count" not in span.attributes

    def test_aggregated_span(self, factory: PipelineFactory, spans: InMemorySpanExporter) -> None:
        prototype = factory.extract_prototype("release", "build")
        spans.clear()

        factory.aggregated_instance(prototype)

        (span,) = spans.get_finished_spans()
        assert span.name == "pipeline.aggregated"
        assert span.attributes["pipeline.version"] == "#2"

    def test_skipped_instance_event(
        self, factory: PipelineFactory, registry: InMemoryJobRegistry, spans: InMemorySpanExporter
    ) -> None:
        triggered(registry, "test", 3, external(registry, "build", 3), result="NOT_BUILT")
        prototype = factory.extract_prototype("release", "build")
        spans.clear()

        pipelines = factory.latest_instances(prototype, 5)

        assert [p.version for p in pipelines] == ["#2", "#1"]
        (span,) = spans.get_finished_spans()
        (event,) = span.events
        assert event.name == "instance_skipped"
        assert event.attributes["instance"] == "#3"
        assert event.attributes["error_code"] == "RESULT_UNRECOGNIZED"
