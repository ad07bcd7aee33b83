"""
Task status model.

A Status is a tagged value: a StatusType plus, for RUNNING only, a
completion percentage. Each StatusType carries two boolean properties:
- complete: the execution has finished (successfully or not)
- halt: the result should stop a consumer from promoting the run
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class StatusType(Enum):
    """
    Closed set of task states.

    Each value is a tuple of (name, complete, halt).
    """

    # The job is disabled in the host
    DISABLED = ("DISABLED", False, False)

    # No execution correlated with this pipeline run
    IDLE = ("IDLE", False, False)

    # The execution is in progress
    RUNNING = ("RUNNING", False, False)

    # The execution finished successfully
    SUCCESS = ("SUCCESS", True, False)

    # The execution failed
    FAILED = ("FAILED", True, True)

    # The execution finished with test failures or similar warnings
    UNSTABLE = ("UNSTABLE", True, False)

    # The execution was aborted
    CANCELLED = ("CANCELLED", True, True)

    def __init__(self, type_name: str, complete: bool, halt: bool) -> None:
        self._type_name = type_name
        self._complete = complete
        self._halt = halt

    @property
    def is_complete(self) -> bool:
        """
        Indicates the execution has finished its work.

        Returns True for: SUCCESS, FAILED, UNSTABLE, CANCELLED
        """
        return self._complete

    @property
    def is_halt(self) -> bool:
        """
        Indicates an abnormal completion.

        Returns True for: FAILED, CANCELLED
        """
        return self._halt

    def __str__(self) -> str:
        return self._type_name

    def __repr__(self) -> str:
        return f"StatusType.{self.name}"


@dataclass(frozen=True)
class Status:
    """
    Immutable task status.

    Use the module-level constructors (``idle()``, ``running(42)`` ...)
    rather than building instances directly.

    Attributes:
        type: The StatusType tag
        percent: Completion percentage for RUNNING; may exceed 100 when an
            execution overruns its estimate. None for every other type.
    """

    type: StatusType
    percent: int | None = None

    def __post_init__(self) -> None:
        if self.type is StatusType.RUNNING and self.percent is None:
            raise ValueError("RUNNING status requires a percent")
        if self.type is not StatusType.RUNNING and self.percent is not None:
            raise ValueError(f"{self.type} status does not carry a percent")

    @property
    def is_disabled(self) -> bool:
        return self.type is StatusType.DISABLED

    @property
    def is_idle(self) -> bool:
        return self.type is StatusType.IDLE

    @property
    def is_running(self) -> bool:
        return self.type is StatusType.RUNNING

    @property
    def is_success(self) -> bool:
        return self.type is StatusType.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.type is StatusType.FAILED

    @property
    def is_unstable(self) -> bool:
        return self.type is StatusType.UNSTABLE

    @property
    def is_cancelled(self) -> bool:
        return self.type is StatusType.CANCELLED

    @property
    def is_complete(self) -> bool:
        return self.type.is_complete

    def to_dict(self) -> dict[str, Any]:
        """Discriminated structural encoding."""
        data: dict[str, Any] = {"type": str(self.type)}
        if self.percent is not None:
            data["percent"] = self.percent
        return data

    def __str__(self) -> str:
        if self.percent is not None:
            return f"{self.type}({self.percent}%)"
        return str(self.type)


_DISABLED = Status(StatusType.DISABLED)
_IDLE = Status(StatusType.IDLE)
_SUCCESS = Status(StatusType.SUCCESS)
_FAILED = Status(StatusType.FAILED)
_UNSTABLE = Status(StatusType.UNSTABLE)
_CANCELLED = Status(StatusType.CANCELLED)


def disabled() -> Status:
    return _DISABLED


def idle() -> Status:
    return _IDLE


def running(percent: int) -> Status:
    """Create a RUNNING status. ``percent`` is not clamped."""
    return Status(StatusType.RUNNING, int(percent))


def success() -> Status:
    return _SUCCESS


def failed() -> Status:
    return _FAILED


def unstable() -> Status:
    return _UNSTABLE


def cancelled() -> Status:
    return _CANCELLED
