"""Read-only host interfaces and the in-memory host."""

from deliveryview.host.interface import (
    RESULT_ABORTED,
    RESULT_FAILURE,
    RESULT_SUCCESS,
    RESULT_UNSTABLE,
    Cause,
    Execution,
    ExternalCause,
    Job,
    JobRegistry,
    UpstreamCause,
    same_execution,
)
from deliveryview.host.loader import load_registry, registry_from_dict
from deliveryview.host.memory import InMemoryExecution, InMemoryJob, InMemoryJobRegistry

__all__ = [
    "RESULT_ABORTED",
    "RESULT_FAILURE",
    "RESULT_SUCCESS",
    "RESULT_UNSTABLE",
    "Cause",
    "Execution",
    "ExternalCause",
    "InMemoryExecution",
    "InMemoryJob",
    "InMemoryJobRegistry",
    "Job",
    "JobRegistry",
    "UpstreamCause",
    "load_registry",
    "registry_from_dict",
    "same_execution",
]
