"""
Pipeline, Stage and Task value types.

A Pipeline is an ordered list of Stages, each holding an ordered list of
Tasks. A Task stands for exactly one host job. Everything here is
immutable: re-stamping a prototype with resolved statuses produces new
values and leaves the prototype untouched.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from typing import Any

from deliveryview.models.status import Status


@dataclass(frozen=True)
class Task:
    """
    A single job within a stage.

    Attributes:
        id: Identity of the host job this task represents
        name: Display name (task name override or job display name)
        status: Current status
        link: Reachable URL of the job
    """

    id: str
    name: str
    status: Status
    link: str | None = None

    def with_status(self, status: Status) -> Task:
        """Return a copy of this task carrying ``status``."""
        return replace(self, status=status)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.to_dict(),
            "link": self.link,
        }


@dataclass(frozen=True)
class Stage:
    """
    A named group of tasks.

    Attributes:
        name: Stage name; also the stage's identity when grouping tasks
        tasks: Ordered tasks, never empty
        version: Optional version label, only set on assembled instances
    """

    name: str
    tasks: tuple[Task, ...] = field(default_factory=tuple)
    version: str | None = None

    def __post_init__(self) -> None:
        # Accept any sequence but always store a tuple
        object.__setattr__(self, "tasks", tuple(self.tasks))
        if not self.tasks:
            raise ValueError(f"Stage '{self.name}' must contain at least one task")

    def with_tasks(self, tasks: list[Task] | tuple[Task, ...]) -> Stage:
        return replace(self, tasks=tuple(tasks))

    def with_version(self, version: str | None) -> Stage:
        return replace(self, version=version)

    def add_task(self, task: Task) -> Stage:
        """Return a copy of this stage with ``task`` appended."""
        return replace(self, tasks=(*self.tasks, task))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "tasks": [task.to_dict() for task in self.tasks],
        }


@dataclass(frozen=True)
class Pipeline:
    """
    A delivery pipeline, either a prototype or an instance.

    A prototype (``version is None``) describes topology only; its tasks are
    IDLE or DISABLED. An instance is a prototype re-stamped with resolved
    statuses and labeled with the version of the run it shows.

    Attributes:
        name: Pipeline name
        version: Instance label; None on a prototype
        stages: Ordered stages
    """

    name: str
    version: str | None = None
    stages: tuple[Stage, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "stages", tuple(self.stages))

    @property
    def is_prototype(self) -> bool:
        return self.version is None

    @property
    def first_task(self) -> Task | None:
        """The anchor task: first task of the first stage."""
        if not self.stages:
            return None
        return self.stages[0].tasks[0]

    def tasks(self) -> Iterator[Task]:
        """Iterate all tasks in stage order."""
        for stage in self.stages:
            yield from stage.tasks

    def task_ids(self) -> list[str]:
        return [task.id for task in self.tasks()]

    def get_stage(self, name: str) -> Stage | None:
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def with_stages(self, stages: list[Stage], version: str | None = None) -> Pipeline:
        """Return an instance of this pipeline with new stages and version."""
        return replace(self, stages=tuple(stages), version=version)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "stages": [stage.to_dict() for stage in self.stages],
        }
