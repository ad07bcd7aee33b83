"""
Topology extraction.

Flattens a job-trigger graph into a pipeline prototype: an ordered list of
stages, each an ordered list of tasks, with every job appearing once.

The algorithm:

1. Walk the trigger graph depth-first from the starting job, pre-order:
   a job is recorded, then each downstream job's subtree is walked in
   declared edge order before moving to the next sibling
2. Record each job the first time it is reached; later encounters (a
   diamond A -> [B, C] -> D reaches D twice) are skipped
3. For every recorded job in walk order, append an IDLE (or DISABLED)
   task to the stage named by the job's stage override or display name,
   creating stages in first-reference order

The walk uses an explicit stack, so deep graphs cannot exhaust the
interpreter's recursion limit, and it is bounded by the walk path: an edge
back to a job on the current path is a cycle.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from deliveryview.config import ViewConfig, get_view_config
from deliveryview.errors import CyclicTopologyError, EmptyTopologyError
from deliveryview.host.interface import Job
from deliveryview.models import status
from deliveryview.models.pipeline import Pipeline, Stage, Task

logger = logging.getLogger(__name__)


def collect_jobs(start: Job, config: ViewConfig | None = None, pipeline_name: str | None = None) -> list[Job]:
    """
    Collect every job reachable from ``start`` in pre-order, first encounter wins.

    Args:
        start: The job the walk starts from
        config: Limits; defaults to the environment config
        pipeline_name: Used in error messages only

    Returns:
        Jobs in discovery order, ``start`` first

    Raises:
        CyclicTopologyError: If an edge leads back onto the walk path while
            ``config.reject_cycles`` is set, or the path grows deeper than
            ``config.max_topology_depth``

    Example:
        # A -> [B, C], B -> D
        collect_jobs(a)
        # Result: [A, B, D, C]
    """
    config = config or get_view_config()

    discovered: dict[str, Job] = {}
    path: list[str] = []
    on_path: set[str] = set()
    pending: list[Iterator[Job]] = []

    def enter(job: Job) -> None:
        discovered[job.name] = job
        path.append(job.name)
        on_path.add(job.name)
        pending.append(iter(job.downstream_jobs()))

    enter(start)
    while pending:
        child = next(pending[-1], None)
        if child is None:
            pending.pop()
            on_path.discard(path.pop())
            continue

        if child.name in on_path:
            cycle = [*path[path.index(child.name) :], child.name]
            if config.reject_cycles:
                raise CyclicTopologyError(
                    f"Trigger cycle detected: {' -> '.join(cycle)}",
                    path=cycle,
                    pipeline_name=pipeline_name,
                )
            logger.warning("Ignoring trigger cycle %s", " -> ".join(cycle))
            continue

        if child.name in discovered:
            continue

        if len(path) >= config.max_topology_depth:
            raise CyclicTopologyError(
                f"Trigger graph deeper than {config.max_topology_depth} jobs below {start.name}",
                path=[*path, child.name],
                pipeline_name=pipeline_name,
            )
        enter(child)

    return list(discovered.values())


def _override_or(override: str | None, fallback: str) -> str:
    # Empty overrides count as unset
    return override if override else fallback


def task_for_job(job: Job) -> Task:
    """Build the prototype task for ``job``."""
    return Task(
        id=job.name,
        name=_override_or(job.task_name, job.display_name),
        status=status.disabled() if job.disabled else status.idle(),
        link=job.url,
    )


def stage_name_for_job(job: Job) -> str:
    return _override_or(job.stage_name, job.display_name)


def extract_pipeline(name: str, start: Job, config: ViewConfig | None = None) -> Pipeline:
    """
    Create a pipeline prototype for the jobs reachable from ``start``.

    Args:
        name: Pipeline name
        start: The first job of the pipeline
        config: Limits; defaults to the environment config

    Returns:
        A prototype Pipeline (version None) whose tasks are IDLE or DISABLED

    Raises:
        CyclicTopologyError: See ``collect_jobs``
        EmptyTopologyError: If no task could be produced
    """
    stages: dict[str, Stage] = {}
    for job in collect_jobs(start, config, pipeline_name=name):
        task = task_for_job(job)
        stage_name = stage_name_for_job(job)
        stage = stages.get(stage_name)
        stages[stage_name] = Stage(stage_name, (task,)) if stage is None else stage.add_task(task)

    if not stages:
        raise EmptyTopologyError(f"Pipeline '{name}' has no tasks", pipeline_name=name)

    pipeline = Pipeline(name=name, version=None, stages=tuple(stages.values()))
    logger.debug(
        "Extracted pipeline %s: %d stages, %d tasks",
        name,
        len(pipeline.stages),
        len(pipeline.task_ids()),
    )
    return pipeline
