"""Grouping per-job executions into pipeline runs."""

from deliveryview.correlation.correlator import BuildCorrelator, correlate
from deliveryview.correlation.tracer import CausationTracer, trace_origin

__all__ = [
    "BuildCorrelator",
    "CausationTracer",
    "correlate",
    "trace_origin",
]
