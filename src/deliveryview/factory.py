"""
PipelineFactory - the public face of deliveryview.

Ties topology extraction and assembly to one explicitly passed host
registry. Presentation layers (the CLI, a web view) only talk to this
class.
"""

from __future__ import annotations

from deliveryview.assembly import PipelineAssembler
from deliveryview.config import ViewConfig, get_view_config
from deliveryview.errors import UnknownJobError
from deliveryview.host.interface import JobRegistry
from deliveryview.models.pipeline import Pipeline
from deliveryview.resolution import Clock
from deliveryview.topology import extract_pipeline
from deliveryview.tracing import trace_operation


class PipelineFactory:
    """
    Extracts pipeline prototypes and builds instances from them.

    Example:
        factory = PipelineFactory(registry)
        prototype = factory.extract_prototype("release", "build")
        for instance in factory.latest_instances(prototype, 3):
            render(instance)
    """

    def __init__(
        self,
        registry: JobRegistry,
        config: ViewConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.registry = registry
        self.config = (config or get_view_config()).validate()
        self.assembler = PipelineAssembler(registry, self.config, clock)

    def extract_prototype(self, name: str, starting_job: str) -> Pipeline:
        """
        Create a pipeline prototype starting at job ``starting_job``.

        Raises:
            UnknownJobError: If the starting job does not exist
            CyclicTopologyError: If the trigger graph has a cycle
        """
        with trace_operation("pipeline.extract", pipeline=name, starting_job=starting_job) as span:
            job = self.registry.get_job(starting_job)
            if job is None:
                raise UnknownJobError(f"Starting job '{starting_job}' not found", job_name=starting_job)
            prototype = extract_pipeline(name, job, self.config)
            span.set_attribute("pipeline.stages", len(prototype.stages))
            return prototype

    def latest_instances(self, prototype: Pipeline, count: int | None = None) -> list[Pipeline]:
        """Populate the ``count`` most recent runs of ``prototype`` with current status."""
        with trace_operation("pipeline.latest", pipeline=prototype.name, count=count) as span:
            pipelines = self.assembler.latest(prototype, count)
            span.set_attribute("pipeline.instances", len(pipelines))
            return pipelines

    def latest_instance(self, prototype: Pipeline) -> Pipeline | None:
        """The most recent run of ``prototype``, or None if it never ran."""
        pipelines = self.latest_instances(prototype, 1)
        return pipelines[0] if pipelines else None

    def aggregated_instance(self, prototype: Pipeline) -> Pipeline:
        """Every task with its own most recent execution."""
        with trace_operation("pipeline.aggregated", pipeline=prototype.name) as span:
            pipeline = self.assembler.aggregated(prototype)
            span.set_attribute("pipeline.version", pipeline.version or "")
            return pipeline
