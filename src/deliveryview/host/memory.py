"""
In-memory job registry.

Useful for testing, demos and the CLI, where jobs and their histories are
loaded from a definition file instead of a live build server.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Sequence

from deliveryview.host.interface import Cause, Execution, Job, JobRegistry

logger = logging.getLogger(__name__)


class InMemoryExecution(Execution):
    """Execution backed by plain attributes."""

    def __init__(
        self,
        job_name: str,
        number: int,
        *,
        display_name: str | None = None,
        in_progress: bool = False,
        result: str | None = None,
        start_timestamp: int = 0,
        estimated_duration: int = -1,
        causes: Sequence[Cause] = (),
    ) -> None:
        self._job_name = job_name
        self._number = number
        self._display_name = display_name or f"#{number}"
        self._in_progress = in_progress
        self._result = result
        self._start_timestamp = start_timestamp
        self._estimated_duration = estimated_duration
        self._causes = tuple(causes)

    @property
    def job_name(self) -> str:
        return self._job_name

    @property
    def number(self) -> int:
        return self._number

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    @property
    def result(self) -> str | None:
        return self._result

    @property
    def start_timestamp(self) -> int:
        return self._start_timestamp

    @property
    def estimated_duration(self) -> int:
        return self._estimated_duration

    @property
    def causes(self) -> tuple[Cause, ...]:
        return self._causes

    def finish(self, result: str) -> None:
        """Move this execution from in-progress to a terminal result."""
        self._in_progress = False
        self._result = result


class InMemoryJob(Job):
    """
    Job held by an InMemoryJobRegistry.

    Downstream edges are stored by name and resolved through the owning
    registry, so jobs can be registered in any order.
    """

    def __init__(
        self,
        registry: InMemoryJobRegistry,
        name: str,
        *,
        display_name: str | None = None,
        disabled: bool = False,
        url: str | None = None,
        stage_name: str | None = None,
        task_name: str | None = None,
        downstream: Sequence[str] = (),
    ) -> None:
        self._registry = registry
        self._name = name
        self._display_name = display_name or name
        self._disabled = disabled
        self._url = url if url is not None else f"job/{name}/"
        self._stage_name = stage_name
        self._task_name = task_name
        self._downstream = list(downstream)
        # Kept oldest first; history() reverses
        self._executions: list[InMemoryExecution] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def disabled(self) -> bool:
        return self._disabled

    @property
    def url(self) -> str | None:
        return self._url

    @property
    def stage_name(self) -> str | None:
        return self._stage_name

    @property
    def task_name(self) -> str | None:
        return self._task_name

    @property
    def downstream_names(self) -> list[str]:
        return list(self._downstream)

    def add_downstream(self, name: str) -> None:
        """Add a trigger edge to ``name``."""
        with self._lock:
            if name not in self._downstream:
                self._downstream.append(name)

    def downstream_jobs(self) -> list[Job]:
        jobs: list[Job] = []
        for name in self.downstream_names:
            job = self._registry.get_job(name)
            if job is None:
                logger.debug("Job %s triggers unknown job %s, skipping edge", self._name, name)
                continue
            jobs.append(job)
        return jobs

    def add_execution(self, execution: InMemoryExecution) -> InMemoryExecution:
        """Record an execution of this job.

        Raises:
            ValueError: If the execution belongs to another job or its
                number is not greater than the latest recorded one
        """
        if execution.job_name != self._name:
            raise ValueError(f"Execution {execution!r} does not belong to job {self._name}")
        with self._lock:
            if self._executions and execution.number <= self._executions[-1].number:
                raise ValueError(
                    f"Execution number {execution.number} of job {self._name} "
                    f"must exceed {self._executions[-1].number}"
                )
            self._executions.append(execution)
        return execution

    def history(self) -> Iterable[Execution]:
        with self._lock:
            snapshot = list(self._executions)
        return reversed(snapshot)

    def get_execution(self, number: int) -> Execution | None:
        with self._lock:
            for execution in self._executions:
                if execution.number == number:
                    return execution
        return None


class InMemoryJobRegistry(JobRegistry):
    """
    In-memory implementation of JobRegistry.

    Thread-safe storage for testing and single-process use.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, InMemoryJob] = {}
        self._lock = threading.Lock()

    def add_job(
        self,
        name: str,
        *,
        display_name: str | None = None,
        disabled: bool = False,
        url: str | None = None,
        stage_name: str | None = None,
        task_name: str | None = None,
        downstream: Sequence[str] = (),
    ) -> InMemoryJob:
        """Register a job, replacing any job with the same name."""
        job = InMemoryJob(
            self,
            name,
            display_name=display_name,
            disabled=disabled,
            url=url,
            stage_name=stage_name,
            task_name=task_name,
            downstream=downstream,
        )
        with self._lock:
            self._jobs[name] = job
        return job

    def remove_job(self, name: str) -> None:
        """Delete a job. Edges and causes naming it become dangling."""
        with self._lock:
            self._jobs.pop(name, None)

    def rename_job(self, old_name: str, new_name: str) -> InMemoryJob:
        """
        Rename a job without rewriting executions that reference it.

        Causation entries recorded under the old name no longer resolve,
        like on a real build host.
        """
        with self._lock:
            job = self._jobs.pop(old_name)
            job._name = new_name
            self._jobs[new_name] = job
        return job

    def get_job(self, name: str) -> InMemoryJob | None:
        with self._lock:
            return self._jobs.get(name)

    def job_names(self) -> list[str]:
        with self._lock:
            return list(self._jobs)

    def record_execution(
        self,
        job_name: str,
        number: int,
        *,
        display_name: str | None = None,
        in_progress: bool = False,
        result: str | None = None,
        start_timestamp: int = 0,
        estimated_duration: int = -1,
        causes: Sequence[Cause] = (),
    ) -> InMemoryExecution:
        """Create an execution and append it to ``job_name``'s history."""
        job = self.get_job(job_name)
        if job is None:
            raise KeyError(f"Unknown job: {job_name}")
        execution = InMemoryExecution(
            job_name,
            number,
            display_name=display_name,
            in_progress=in_progress,
            result=result,
            start_timestamp=start_timestamp,
            estimated_duration=estimated_duration,
            causes=causes,
        )
        return job.add_execution(execution)
