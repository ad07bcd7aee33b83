"""Base exceptions for pipeline view construction.

DeliveryViewBaseException is the root of every error raised while reading a
host registry or building pipeline views. DeliveryViewError covers the
failures a dashboard is expected to render instead of crashing on: unknown
jobs, broken trigger graphs, unbounded causation chains, unrecognized build
results and invalid registry definitions. The numeric ``code`` groups them
by phase (2xx registry, 3xx topology, 4xx correlation, 5xx status, 6xx
configuration).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deliveryview.error_codes import ErrorCode


class DeliveryViewBaseException(Exception):  # noqa: N818 - intentional base exception name
    """Root of all deliveryview errors.

    Attributes:
        code: Numeric code of the failing phase (registry, topology, correlation...)
        error_code: Semantic ErrorCode a view layer can switch on
        cause: Underlying host or parser exception, if any
    """

    code: int = 0
    _error_code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        cause: Exception | None = None,
        error_code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.cause = cause
        if error_code is not None:
            self._error_code = error_code

    @property
    def error_code(self) -> ErrorCode:
        """Get the semantic error code for this exception."""
        if self._error_code is not None:
            return self._error_code
        from deliveryview.error_codes import ErrorCode

        return ErrorCode.UNKNOWN

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.code:
            parts.append(f"(code={self.code})")
        if self.cause:
            parts.append(f"caused by: {self.cause}")
        return " ".join(parts)


class DeliveryViewError(DeliveryViewBaseException):
    """An error a pipeline view caller is expected to handle.

    Raised by extraction, correlation and status resolution, and by registry
    loading. The CLI reports these with their error code and exits non-zero.
    """

    code: int = 100

    @property
    def error_code(self) -> ErrorCode:
        """Get the semantic error code for this exception."""
        if self._error_code is not None:
            return self._error_code
        from deliveryview.error_codes import ErrorCode

        return ErrorCode.SYSTEM_ERROR


class ConfigurationError(DeliveryViewError):
    """A ViewConfig value or registry definition file is invalid."""

    code: int = 600

    @property
    def error_code(self) -> ErrorCode:
        from deliveryview.error_codes import ErrorCode

        return self._error_code or ErrorCode.CONFIGURATION_INVALID
