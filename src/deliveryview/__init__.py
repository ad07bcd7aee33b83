"""
deliveryview - delivery pipeline views over build jobs.

This package derives a delivery pipeline from jobs linked by trigger
relationships and correlates their executions into pipeline runs:
- Deterministic flattening of a trigger graph into stages and tasks
- Causation tracing from any execution back to its run's origin
- Latest-N fully correlated pipeline instances
- An aggregated view of every job's most recent execution
- A read-only host interface with an in-memory implementation
"""

__version__ = "0.4.0"

from deliveryview.assembly import PipelineAssembler
from deliveryview.config import ViewConfig, get_view_config, reset_view_config
from deliveryview.correlation import BuildCorrelator, CausationTracer, correlate, trace_origin
from deliveryview.errors import (
    ConfigurationError,
    CorrelationError,
    CyclicTopologyError,
    DeliveryViewError,
    EmptyTopologyError,
    TopologyError,
    UnboundedCausationChainError,
    UnknownJobError,
    UnrecognizedResultError,
)
from deliveryview.factory import PipelineFactory
from deliveryview.host import (
    Execution,
    ExternalCause,
    InMemoryJobRegistry,
    Job,
    JobRegistry,
    UpstreamCause,
    load_registry,
)
from deliveryview.models import Pipeline, Stage, Status, StatusType, Task
from deliveryview.resolution import Resolution, StatusResolver, resolve_status
from deliveryview.topology import extract_pipeline

__all__ = [
    # Facade
    "PipelineFactory",
    "PipelineAssembler",
    # Models
    "Pipeline",
    "Stage",
    "Task",
    "Status",
    "StatusType",
    # Host
    "Execution",
    "ExternalCause",
    "InMemoryJobRegistry",
    "Job",
    "JobRegistry",
    "UpstreamCause",
    "load_registry",
    # Core operations
    "extract_pipeline",
    "trace_origin",
    "correlate",
    "resolve_status",
    "BuildCorrelator",
    "CausationTracer",
    "Resolution",
    "StatusResolver",
    # Configuration
    "ViewConfig",
    "get_view_config",
    "reset_view_config",
    # Errors
    "ConfigurationError",
    "CorrelationError",
    "CyclicTopologyError",
    "DeliveryViewError",
    "EmptyTopologyError",
    "TopologyError",
    "UnboundedCausationChainError",
    "UnknownJobError",
    "UnrecognizedResultError",
]
