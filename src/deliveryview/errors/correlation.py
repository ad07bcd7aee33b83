"""Causation tracing and status resolution errors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from deliveryview.errors.base import DeliveryViewError

if TYPE_CHECKING:
    from deliveryview.error_codes import ErrorCode


class CorrelationError(DeliveryViewError):
    """Correlating executions into a pipeline run failed.

    Contains the job and execution number being traced.
    """

    code: int = 400

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        cause: Exception | None = None,
        job_name: str | None = None,
        execution_number: int | None = None,
    ) -> None:
        super().__init__(message, code=code, cause=cause)
        self.job_name = job_name
        self.execution_number = execution_number

    @property
    def error_code(self) -> ErrorCode:
        from deliveryview.error_codes import ErrorCode

        return self._error_code or ErrorCode.CORRELATION_FAILED


class UnboundedCausationChainError(CorrelationError):
    """A causation chain loops or exceeds the configured maximum depth.

    Attributes:
        chain: ``job#number`` labels followed before the guard tripped
    """

    code: int = 401

    def __init__(
        self,
        message: str,
        *,
        chain: list[str] | None = None,
        job_name: str | None = None,
        execution_number: int | None = None,
    ) -> None:
        super().__init__(message, job_name=job_name, execution_number=execution_number)
        self.chain = chain or []

    @property
    def error_code(self) -> ErrorCode:
        from deliveryview.error_codes import ErrorCode

        return self._error_code or ErrorCode.CAUSATION_CHAIN_UNBOUNDED


class UnrecognizedResultError(DeliveryViewError):
    """A finished execution reports a result outside the known set.

    Never mapped to a guessed status.
    """

    code: int = 500

    def __init__(
        self,
        message: str,
        *,
        result: Any = None,
        job_name: str | None = None,
        execution_number: int | None = None,
    ) -> None:
        super().__init__(message)
        self.result = result
        self.job_name = job_name
        self.execution_number = execution_number

    @property
    def error_code(self) -> ErrorCode:
        from deliveryview.error_codes import ErrorCode

        return self._error_code or ErrorCode.RESULT_UNRECOGNIZED
