"""
Structured error codes for deliveryview.

Every DeliveryViewError exposes one of these codes as ``error_code`` so a
presentation layer can decide how to surface a failed projection without
matching on exception types.

Usage:
    from deliveryview.error_codes import ErrorCode

    try:
        pipelines = factory.latest_instances(prototype, 3)
    except DeliveryViewError as e:
        if e.error_code == ErrorCode.TOPOLOGY_CYCLE:
            render_cycle_warning(e)
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Semantic error codes for categorizing exceptions."""

    # General errors
    UNKNOWN = "UNKNOWN"
    SYSTEM_ERROR = "SYSTEM_ERROR"

    # Host registry errors
    JOB_NOT_FOUND = "JOB_NOT_FOUND"

    # Topology errors
    TOPOLOGY_INVALID = "TOPOLOGY_INVALID"
    TOPOLOGY_CYCLE = "TOPOLOGY_CYCLE"

    # Correlation errors
    CORRELATION_FAILED = "CORRELATION_FAILED"
    CAUSATION_CHAIN_UNBOUNDED = "CAUSATION_CHAIN_UNBOUNDED"

    # Status resolution errors
    RESULT_UNRECOGNIZED = "RESULT_UNRECOGNIZED"

    # Configuration errors
    CONFIGURATION_INVALID = "CONFIGURATION_INVALID"

