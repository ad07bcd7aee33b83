"""
Registry definition loading.

Builds an InMemoryJobRegistry from a YAML (or JSON) document:

    jobs:
      - name: build
        display_name: Build
        stage_name: Commit
        downstream: [test]
        executions:
          - number: 1
            result: SUCCESS
            causes: [{type: external}]
      - name: test
        executions:
          - number: 7
            in_progress: true
            start_timestamp: 1700000000000
            estimated_duration: 60000
            causes: [{type: upstream, job: build, number: 1}]

Executions may be listed in any order; they are recorded oldest first.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from deliveryview.errors import ConfigurationError
from deliveryview.host.interface import Cause, ExternalCause, UpstreamCause
from deliveryview.host.memory import InMemoryJobRegistry

logger = logging.getLogger(__name__)


def load_registry(path: str | Path) -> InMemoryJobRegistry:
    """Load a registry definition file.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(path)
    try:
        with open(path) as f:
            document = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Registry file not found: {path}", cause=e) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Registry file {path} is not valid YAML/JSON", cause=e) from e

    registry = registry_from_dict(document or {})
    logger.info("Loaded %d jobs from %s", len(registry.job_names()), path)
    return registry


def registry_from_dict(document: dict[str, Any]) -> InMemoryJobRegistry:
    """Build a registry from an already parsed definition."""
    if not isinstance(document, dict):
        raise ConfigurationError("Registry definition must be a mapping with a 'jobs' list")
    jobs = document.get("jobs", [])
    if not isinstance(jobs, list):
        raise ConfigurationError("'jobs' must be a list")

    registry = InMemoryJobRegistry()
    for index, spec in enumerate(jobs):
        if not isinstance(spec, dict) or not spec.get("name"):
            raise ConfigurationError(f"jobs[{index}] must be a mapping with a 'name'")
        name = str(spec["name"])
        downstream = spec.get("downstream", [])
        if not isinstance(downstream, list):
            raise ConfigurationError(f"'downstream' of job {name} must be a list of job names")
        job = registry.add_job(
            name,
            display_name=spec.get("display_name"),
            disabled=bool(spec.get("disabled", False)),
            url=spec.get("url"),
            stage_name=spec.get("stage_name"),
            task_name=spec.get("task_name"),
            downstream=[str(d) for d in downstream],
        )
        executions = spec.get("executions", [])
        if not isinstance(executions, list) or not all(isinstance(e, dict) and "number" in e for e in executions):
            raise ConfigurationError(f"Executions of job {name} must be mappings with a 'number'")

        numbered = []
        for execution in executions:
            try:
                numbered.append((int(execution["number"]), execution))
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Execution number of job {name} must be an integer: {execution['number']!r}", cause=e
                ) from e

        for number, execution in sorted(numbered, key=lambda item: item[0]):
            try:
                registry.record_execution(
                    job.name,
                    number,
                    display_name=execution.get("display_name"),
                    in_progress=bool(execution.get("in_progress", False)),
                    result=execution.get("result"),
                    start_timestamp=int(execution.get("start_timestamp", 0)),
                    estimated_duration=int(execution.get("estimated_duration", -1)),
                    causes=_parse_causes(execution.get("causes", []), name),
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid execution of job {name}: {execution!r}", cause=e) from e

    return registry


def _parse_causes(specs: Any, job_name: str) -> list[Cause]:
    if not isinstance(specs, list):
        raise TypeError(f"Causes in job {job_name} must be a list")
    return [_parse_cause(spec, job_name) for spec in specs]


def _parse_cause(spec: Any, job_name: str) -> Cause:
    if not isinstance(spec, dict):
        raise TypeError(f"Cause {spec!r} in job {job_name} must be a mapping with a 'type'")
    cause_type = spec.get("type", "external")
    if cause_type == "upstream":
        return UpstreamCause(job_name=str(spec["job"]), execution_number=int(spec["number"]))
    if cause_type == "external":
        return ExternalCause(description=str(spec.get("description", "external")))
    raise ValueError(f"Unknown cause type '{cause_type}' in job {job_name}")
