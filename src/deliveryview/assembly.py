"""
Pipeline assembly.

Two read-only projections of a pipeline prototype onto host executions:

- latest: the N most recent pipeline runs, each fully correlated. Every
  task shows the execution that traces back to the run's anchor execution.
- aggregated: one view where each task independently shows its own most
  recent execution. Stages may show executions of different runs; the
  version labels are a best-effort hint, not a guarantee.

An instance is either built completely or not at all. A task whose
execution has an unrecognized result, or whose causation chain runs away,
aborts the instance it belongs to.
"""

from __future__ import annotations

import logging
from itertools import islice

from deliveryview.config import ViewConfig, get_view_config
from deliveryview.correlation import BuildCorrelator, CausationTracer
from deliveryview.errors import UnboundedCausationChainError, UnrecognizedResultError
from deliveryview.host.interface import Execution, JobRegistry
from deliveryview.models.pipeline import Pipeline, Stage, Task
from deliveryview.models.status import Status
from deliveryview.resolution import Clock, StatusResolver
from deliveryview.tracing import add_event

logger = logging.getLogger(__name__)

# Errors that abort a single instance
InstanceError = (UnrecognizedResultError, UnboundedCausationChainError)


class PipelineAssembler:
    """
    Builds pipeline instances from a prototype.

    Stateless between calls; all state is read from the registry.
    """

    def __init__(
        self,
        registry: JobRegistry,
        config: ViewConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or get_view_config()
        self.tracer = CausationTracer(registry, self.config)
        self.correlator = BuildCorrelator(self.tracer)
        self.resolver = StatusResolver(clock)

    # ========== Latest instances ==========

    def latest(self, prototype: Pipeline, count: int | None = None) -> list[Pipeline]:
        """
        Build the ``count`` most recent instances of ``prototype``.

        The anchor is the first task of the first stage; each of the anchor
        job's most recent executions yields one instance labeled with that
        execution's display name, most recent first.

        Args:
            prototype: The pipeline prototype
            count: Number of instances; defaults to config.default_instance_count

        Returns:
            Up to ``count`` instances. Instances that fail to resolve are
            left out and logged.
        """
        if count is None:
            count = self.config.default_instance_count
        if count <= 0:
            return []

        anchor_task = prototype.first_task
        if anchor_task is None:
            return []

        anchor_job = self.registry.get_job(anchor_task.id)
        if anchor_job is None:
            logger.warning(
                "First job %s of pipeline %s not found, no instances",
                anchor_task.id,
                prototype.name,
            )
            return []

        pipelines: list[Pipeline] = []
        for anchor in islice(anchor_job.history(), count):
            try:
                pipelines.append(self._correlated_instance(prototype, anchor))
            except InstanceError as e:
                logger.warning(
                    "Skipping instance %s of pipeline %s: %s",
                    anchor.display_name,
                    prototype.name,
                    e,
                )
                add_event(
                    "instance_skipped",
                    {"instance": anchor.display_name, "error_code": e.error_code.value},
                )
        return pipelines

    def latest_one(self, prototype: Pipeline) -> Pipeline | None:
        """The most recent instance of ``prototype``, or None."""
        pipelines = self.latest(prototype, 1)
        return pipelines[0] if pipelines else None

    def _correlated_instance(self, prototype: Pipeline, anchor: Execution) -> Pipeline:
        stages = [
            stage.with_tasks([self._correlated_task(task, anchor) for task in stage.tasks])
            for stage in prototype.stages
        ]
        return prototype.with_stages(stages, version=anchor.display_name)

    def _correlated_task(self, task: Task, anchor: Execution) -> Task:
        if task.id == anchor.job_name:
            # The anchor is the origin of its own run
            return task.with_status(self._resolve(anchor))

        job = self.registry.get_job(task.id)
        if job is None:
            logger.debug("Job %s not found, keeping prototype status", task.id)
            return task

        match = self.correlator.correlate(job.history(), anchor)
        if match is None:
            return task
        return task.with_status(self._resolve(match))

    # ========== Aggregated instance ==========

    def aggregated(self, prototype: Pipeline) -> Pipeline:
        """
        Build a view where every task shows its job's most recent execution.

        No correlation across tasks is done. Each stage's version is the
        display name of the first origin traced among its tasks; the
        pipeline's version is the first stage version found, in stage order.

        Raises:
            UnrecognizedResultError: If any task's execution cannot be resolved
            UnboundedCausationChainError: If any task's chain runs away
        """
        version: str | None = None
        stages: list[Stage] = []
        for stage in prototype.stages:
            stage_version: str | None = None
            tasks: list[Task] = []
            for task in stage.tasks:
                job = self.registry.get_job(task.id)
                current = job.last_execution() if job is not None else None
                if current is None:
                    tasks.append(task)
                    continue

                origin = self.tracer.trace(current)
                if origin is not None and stage_version is None:
                    stage_version = origin.display_name
                tasks.append(task.with_status(self._resolve(current)))

            if version is None:
                version = stage_version
            stages.append(stage.with_tasks(tasks).with_version(stage_version))

        return prototype.with_stages(stages, version=version)

    def _resolve(self, execution: Execution) -> Status:
        return self.resolver.resolve(execution).unwrap()
