"""
Causation tracing.

Follows an execution's upstream-trigger chain back to the execution that
started the whole pipeline run. Executions of different jobs belong to the
same run exactly when they trace to the same origin.
"""

from __future__ import annotations

import logging

from deliveryview.config import ViewConfig, get_view_config
from deliveryview.errors import UnboundedCausationChainError
from deliveryview.host.interface import Execution, JobRegistry

logger = logging.getLogger(__name__)


def _label(execution: Execution) -> str:
    return f"{execution.job_name}#{execution.number}"


def trace_origin(
    execution: Execution | None,
    registry: JobRegistry,
    max_depth: int = 64,
) -> Execution | None:
    """
    Find the first execution in the chain of triggered executions.

    Only the first upstream cause of each execution is followed.

    Args:
        execution: The execution to trace from (None yields None)
        registry: Host registry used to resolve upstream jobs
        max_depth: Most upstream links followed before giving up

    Returns:
        The origin execution (``execution`` itself when it has no upstream
        cause), or None when the chain is broken because an upstream job or
        execution no longer exists

    Raises:
        UnboundedCausationChainError: If the chain loops back on itself or
            is longer than ``max_depth`` links
    """
    if execution is None:
        return None

    current = execution
    seen: list[str] = [_label(current)]
    seen_keys: set[tuple[str, int]] = {current.key}

    while True:
        cause = current.upstream_cause()
        if cause is None:
            return current

        if len(seen) > max_depth:
            raise UnboundedCausationChainError(
                f"Causation chain of {_label(execution)} exceeds {max_depth} links",
                chain=seen,
                job_name=execution.job_name,
                execution_number=execution.number,
            )

        upstream_job = registry.get_job(cause.job_name)
        if upstream_job is None:
            # Renamed or deleted upstream jobs leave causes pointing nowhere
            logger.debug(
                "Upstream job %s of %s not found, origin unknown",
                cause.job_name,
                _label(current),
            )
            return None

        upstream = upstream_job.get_execution(cause.execution_number)
        if upstream is None:
            logger.debug(
                "Upstream execution %s#%d of %s not found, origin unknown",
                cause.job_name,
                cause.execution_number,
                _label(current),
            )
            return None

        if upstream.key in seen_keys:
            seen.append(_label(upstream))
            raise UnboundedCausationChainError(
                f"Causation chain of {_label(execution)} loops: {' <- '.join(seen)}",
                chain=seen,
                job_name=execution.job_name,
                execution_number=execution.number,
            )

        seen.append(_label(upstream))
        seen_keys.add(upstream.key)
        current = upstream


class CausationTracer:
    """Traces origins against one registry with configured limits."""

    def __init__(self, registry: JobRegistry, config: ViewConfig | None = None) -> None:
        self.registry = registry
        self.config = config or get_view_config()

    def trace(self, execution: Execution | None) -> Execution | None:
        return trace_origin(execution, self.registry, self.config.max_chain_depth)
