"""
Host interface.

This module defines the read-only view of the build host that the
pipeline core consumes: a registry of jobs, the jobs themselves and their
executions. Every host integration must implement these interfaces.
Nothing in deliveryview ever mutates host state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

# Terminal results the status resolver recognizes
RESULT_SUCCESS = "SUCCESS"
RESULT_FAILURE = "FAILURE"
RESULT_UNSTABLE = "UNSTABLE"
RESULT_ABORTED = "ABORTED"


@dataclass(frozen=True)
class ExternalCause:
    """The execution was started manually, by a timer or by an SCM change."""

    description: str = "external"


@dataclass(frozen=True)
class UpstreamCause:
    """The execution was triggered by execution ``execution_number`` of ``job_name``."""

    job_name: str
    execution_number: int


Cause = ExternalCause | UpstreamCause


class Execution(ABC):
    """One concrete run of a job.

    Only ``in_progress`` and ``result`` change over an execution's
    lifetime; both are observed, never written.
    """

    @property
    @abstractmethod
    def job_name(self) -> str:
        """Identity of the owning job."""

    @property
    @abstractmethod
    def number(self) -> int:
        """Execution number, unique within the owning job."""

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Display label, e.g. ``#42`` or a version string."""

    @property
    @abstractmethod
    def in_progress(self) -> bool:
        pass

    @property
    @abstractmethod
    def result(self) -> str | None:
        """Terminal result, None while running."""

    @property
    @abstractmethod
    def start_timestamp(self) -> int:
        """Epoch milliseconds when the execution started."""

    @property
    @abstractmethod
    def estimated_duration(self) -> int:
        """Estimated total duration in milliseconds; <= 0 when unknown."""

    @property
    @abstractmethod
    def causes(self) -> Sequence[Cause]:
        """Recorded causation entries in host order."""

    def upstream_cause(self) -> UpstreamCause | None:
        """The first upstream cause, which is authoritative for chain purposes."""
        for cause in self.causes:
            if isinstance(cause, UpstreamCause):
                return cause
        return None

    @property
    def key(self) -> tuple[str, int]:
        return (self.job_name, self.number)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.job_name}#{self.number})"


def same_execution(a: Execution | None, b: Execution | None) -> bool:
    """Whether ``a`` and ``b`` are the same execution of the same job."""
    if a is None or b is None:
        return False
    return a is b or a.key == b.key


class Job(ABC):
    """A configured, repeatedly executable unit of work."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Identity of the job in the registry."""

    @property
    @abstractmethod
    def display_name(self) -> str:
        pass

    @property
    @abstractmethod
    def disabled(self) -> bool:
        pass

    @property
    @abstractmethod
    def url(self) -> str | None:
        pass

    @property
    def stage_name(self) -> str | None:
        """Stage name override, None when the job keeps its display name."""
        return None

    @property
    def task_name(self) -> str | None:
        """Task name override, None when the job keeps its display name."""
        return None

    @abstractmethod
    def downstream_jobs(self) -> Sequence[Job]:
        """
        Jobs this job triggers.

        The order must be deterministic; stage and task order of an
        extracted pipeline follow it.
        """

    @abstractmethod
    def history(self) -> Iterable[Execution]:
        """
        Executions of this job, most recent first.

        May be lazy; callers only consume as much as they need.
        """

    @abstractmethod
    def get_execution(self, number: int) -> Execution | None:
        """Look up an execution by number."""

    def last_execution(self) -> Execution | None:
        """The most recent execution, if any."""
        for execution in self.history():
            return execution
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"


class JobRegistry(ABC):
    """Read-only lookup of jobs by identity."""

    @abstractmethod
    def get_job(self, name: str) -> Job | None:
        """
        Look up a job.

        Args:
            name: Job identity

        Returns:
            The job, or None if no job has that identity (for instance
            after a rename or delete)
        """
