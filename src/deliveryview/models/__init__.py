"""Value types for delivery pipelines."""

from deliveryview.models.pipeline import Pipeline, Stage, Task
from deliveryview.models.status import Status, StatusType

__all__ = [
    "Pipeline",
    "Stage",
    "Status",
    "StatusType",
    "Task",
]
