"""
Status resolution.

Maps an execution's runtime data (running or finished, result, timing)
onto the closed Status model.

Resolution returns a ``Resolution`` rather than raising, so an assembler
decides what an unrecognized result means for the instance it is
building. ``resolve_status`` is the raising shortcut.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from deliveryview.errors import UnrecognizedResultError
from deliveryview.host.interface import (
    RESULT_ABORTED,
    RESULT_FAILURE,
    RESULT_SUCCESS,
    RESULT_UNSTABLE,
    Execution,
)
from deliveryview.models import status
from deliveryview.models.status import Status

Clock = Callable[[], float]


def system_clock() -> float:
    """Current time in epoch milliseconds."""
    return time.time() * 1000.0


_TERMINAL_STATUSES: dict[str, Callable[[], Status]] = {
    RESULT_ABORTED: status.cancelled,
    RESULT_SUCCESS: status.success,
    RESULT_FAILURE: status.failed,
    RESULT_UNSTABLE: status.unstable,
}


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of resolving one execution.

    Exactly one of ``status`` and ``error`` is set.
    """

    status: Status | None = None
    error: UnrecognizedResultError | None = None

    def __post_init__(self) -> None:
        if (self.status is None) == (self.error is None):
            raise ValueError("Resolution needs exactly one of status and error")

    @classmethod
    def ok(cls, resolved: Status) -> Resolution:
        return cls(status=resolved)

    @classmethod
    def failure(cls, error: UnrecognizedResultError) -> Resolution:
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Status:
        """Return the status or raise the error."""
        if self.status is None:
            raise self.error  # type: ignore[misc]
        return self.status


def running_percent(execution: Execution, now: float) -> int:
    """
    Percent of the estimated duration elapsed, rounded half up.

    Not clamped: an overrunning execution reports more than 100. An
    unknown estimate (<= 0) reports 0.
    """
    estimate = execution.estimated_duration
    if estimate <= 0:
        return 0
    return math.floor(100.0 * (now - execution.start_timestamp) / estimate + 0.5)


class StatusResolver:
    """Resolves executions against an injectable clock."""

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock or system_clock

    def resolve(self, execution: Execution) -> Resolution:
        """
        Resolve the status of ``execution``.

        Args:
            execution: A non-null execution

        Returns:
            A Resolution holding the status, or an UnrecognizedResultError
            when the execution finished with a result outside
            SUCCESS/FAILURE/UNSTABLE/ABORTED (including no result at all)
        """
        if execution.in_progress:
            return Resolution.ok(status.running(running_percent(execution, self.clock())))

        factory = _TERMINAL_STATUSES.get(execution.result) if execution.result is not None else None
        if factory is None:
            return Resolution.failure(
                UnrecognizedResultError(
                    f"Result {execution.result} of {execution.job_name}#{execution.number} not recognized",
                    result=execution.result,
                    job_name=execution.job_name,
                    execution_number=execution.number,
                )
            )
        return Resolution.ok(factory())


def resolve_status(execution: Execution, clock: Clock | None = None) -> Status:
    """
    Resolve the status of ``execution``.

    Raises:
        UnrecognizedResultError: On a result outside the known set
    """
    return StatusResolver(clock).resolve(execution).unwrap()
