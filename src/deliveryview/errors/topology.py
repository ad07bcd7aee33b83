"""Job registry and topology errors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from deliveryview.errors.base import DeliveryViewError

if TYPE_CHECKING:
    from deliveryview.error_codes import ErrorCode


class UnknownJobError(DeliveryViewError):
    """A referenced job identity cannot be resolved in the host registry.

    Usually the job was renamed or deleted after a trigger edge or a
    causation entry recorded its name.
    """

    code: int = 210

    def __init__(
        self,
        message: str,
        *,
        job_name: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.job_name = job_name

    @property
    def error_code(self) -> ErrorCode:
        from deliveryview.error_codes import ErrorCode

        return self._error_code or ErrorCode.JOB_NOT_FOUND


class TopologyError(DeliveryViewError):
    """Topology extraction failed.

    Contains the name of the pipeline being extracted.
    """

    code: int = 300

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        cause: Exception | None = None,
        pipeline_name: str | None = None,
    ) -> None:
        super().__init__(message, code=code, cause=cause)
        self.pipeline_name = pipeline_name

    @property
    def error_code(self) -> ErrorCode:
        from deliveryview.error_codes import ErrorCode

        return self._error_code or ErrorCode.TOPOLOGY_INVALID


class EmptyTopologyError(TopologyError):
    """Extraction produced no tasks."""

    code: int = 301


class CyclicTopologyError(TopologyError):
    """The trigger graph loops back on itself, or the walk grew too deep.

    Attributes:
        path: Job names on the walk path when the guard tripped
    """

    code: int = 302

    def __init__(
        self,
        message: str,
        *,
        path: list[str] | None = None,
        pipeline_name: str | None = None,
    ) -> None:
        super().__init__(message, pipeline_name=pipeline_name)
        self.path = path or []

    @property
    def error_code(self) -> ErrorCode:
        from deliveryview.error_codes import ErrorCode

        return self._error_code or ErrorCode.TOPOLOGY_CYCLE
