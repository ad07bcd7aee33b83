"""
Build correlation.

Finds, in one job's history, the execution that belongs to the pipeline
run started by a given origin execution.

Cost is O(window x chain depth) per task per instance. Nothing is cached
across tasks or calls.
"""

from __future__ import annotations

from collections.abc import Iterable
from itertools import islice

from deliveryview.correlation.tracer import CausationTracer
from deliveryview.host.interface import Execution, same_execution


def correlate(
    history: Iterable[Execution],
    origin: Execution | None,
    tracer: CausationTracer,
    window: int | None = None,
) -> Execution | None:
    """
    Return the most recent execution in ``history`` whose origin is ``origin``.

    Args:
        history: Executions of one job, most recent first
        origin: The origin execution of the pipeline run
        tracer: Tracer used on every candidate
        window: Scan at most this many executions; None scans everything

    Returns:
        The matching execution, or None when the job has not run for this
        pipeline run within the scanned window

    Raises:
        UnboundedCausationChainError: Propagated from the tracer
    """
    if origin is None:
        return None

    candidates = islice(history, window) if window else history
    for candidate in candidates:
        if same_execution(tracer.trace(candidate), origin):
            return candidate
    return None


class BuildCorrelator:
    """Correlates job histories against an origin using a shared tracer."""

    def __init__(self, tracer: CausationTracer) -> None:
        self.tracer = tracer

    def correlate(self, history: Iterable[Execution], origin: Execution | None) -> Execution | None:
        return correlate(history, origin, self.tracer, self.tracer.config.max_history_window)
