"""CLI command implementations for deliveryview."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from typing import Any

from deliveryview.cli.config import find_registry_file
from deliveryview.errors import DeliveryViewError
from deliveryview.factory import PipelineFactory
from deliveryview.host import load_registry
from deliveryview.logging import get_logger
from deliveryview.models.pipeline import Pipeline


def render_text(pipeline: Pipeline) -> str:
    """Render one pipeline as an indented text block."""
    header = pipeline.name if pipeline.version is None else f"{pipeline.name} {pipeline.version}"
    lines = [header]
    for stage in pipeline.stages:
        stage_label = stage.name if stage.version is None else f"{stage.name} ({stage.version})"
        lines.append(f"  {stage_label}")
        for task in stage.tasks:
            lines.append(f"    {task.name:<30} {task.status}")
    return "\n".join(lines)


def _emit(pipelines: list[Pipeline], output_format: str) -> None:
    if output_format == "json":
        payload: Any = [p.to_dict() for p in pipelines]
        print(json.dumps(payload, indent=2))
        return
    if not pipelines:
        print("No pipeline instances")
        return
    print("\n\n".join(render_text(p) for p in pipelines))


def _run(
    registry_path: str | None,
    name: str | None,
    start: str,
    output_format: str,
    build: Callable[[PipelineFactory, Pipeline], list[Pipeline]],
) -> None:
    try:
        registry = load_registry(find_registry_file(registry_path))
        factory = PipelineFactory(registry)
        prototype = factory.extract_prototype(name or start, start)
        pipelines = build(factory, prototype)
        get_logger(__name__).info("pipelines_built", pipeline=prototype.name, count=len(pipelines))
    except DeliveryViewError as e:
        get_logger(__name__).error("command_failed", error_code=e.error_code.value, code=e.code)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    _emit(pipelines, output_format)


def extract(registry_path: str | None, name: str | None, start: str, output_format: str) -> None:
    """Print the pipeline prototype."""
    _run(registry_path, name, start, output_format, lambda factory, prototype: [prototype])


def latest(
    registry_path: str | None,
    name: str | None,
    start: str,
    count: int | None,
    output_format: str,
) -> None:
    """Print the latest pipeline instances."""
    _run(
        registry_path,
        name,
        start,
        output_format,
        lambda factory, prototype: factory.latest_instances(prototype, count),
    )


def aggregated(registry_path: str | None, name: str | None, start: str, output_format: str) -> None:
    """Print the aggregated pipeline view."""
    _run(
        registry_path,
        name,
        start,
        output_format,
        lambda factory, prototype: [factory.aggregated_instance(prototype)],
    )
