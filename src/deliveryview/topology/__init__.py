"""Trigger-graph flattening into pipeline prototypes."""

from deliveryview.topology.extractor import collect_jobs, extract_pipeline, stage_name_for_job, task_for_job

__all__ = [
    "collect_jobs",
    "extract_pipeline",
    "stage_name_for_job",
    "task_for_job",
]
