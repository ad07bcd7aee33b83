"""deliveryview error hierarchy.

Import from ``deliveryview.errors``.
"""

from deliveryview.errors.base import ConfigurationError, DeliveryViewBaseException, DeliveryViewError
from deliveryview.errors.correlation import (
    CorrelationError,
    UnboundedCausationChainError,
    UnrecognizedResultError,
)
from deliveryview.errors.topology import (
    CyclicTopologyError,
    EmptyTopologyError,
    TopologyError,
    UnknownJobError,
)

__all__ = [
    "ConfigurationError",
    "CorrelationError",
    "CyclicTopologyError",
    "DeliveryViewBaseException",
    "DeliveryViewError",
    "EmptyTopologyError",
    "TopologyError",
    "UnboundedCausationChainError",
    "UnknownJobError",
    "UnrecognizedResultError",
]
