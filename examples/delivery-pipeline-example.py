#!/usr/bin/env python3
"""
Delivery Pipeline Example - Demonstrates pipeline views with deliveryview.

This example shows how to:
1. Describe build jobs and their trigger edges in an in-memory registry
2. Extract a pipeline prototype from the trigger graph
3. Show the latest pipeline runs, fully correlated
4. Show the aggregated view, where each task shows its own last execution
5. Export spans for every pipeline operation

Requirements:
    None beyond deliveryview's own dependencies

Run with:
    python examples/delivery-pipeline-example.py
"""

import logging
import time

logging.basicConfig(level=logging.ERROR)

from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from deliveryview import InMemoryJobRegistry, PipelineFactory, ViewConfig
from deliveryview.cli.commands import render_text
from deliveryview.host import ExternalCause, UpstreamCause
from deliveryview.tracing import configure_tracing

# =============================================================================
# Registry setup
# =============================================================================


def build_registry() -> InMemoryJobRegistry:
    """
    Jobs of a small delivery pipeline:

        compile -> [unit-tests, static-analysis] -> package -> deploy-staging

    compile ran four times. Run #4 is still in its packaging step.
    """
    registry = InMemoryJobRegistry()
    registry.add_job(
        "compile",
        display_name="Compile",
        stage_name="Commit",
        downstream=["unit-tests", "static-analysis"],
    )
    registry.add_job("unit-tests", display_name="Unit tests", stage_name="Commit", downstream=["package"])
    registry.add_job("static-analysis", display_name="Static analysis", stage_name="Commit")
    registry.add_job("package", display_name="Package", stage_name="Acceptance", downstream=["deploy-staging"])
    registry.add_job("deploy-staging", display_name="Deploy", stage_name="Staging")

    now = int(time.time() * 1000)
    for number in range(1, 5):
        compile_run = registry.record_execution(
            "compile",
            number,
            result="SUCCESS",
            causes=[ExternalCause("Started by SCM change")],
        )
        upstream = [UpstreamCause(compile_run.job_name, compile_run.number)]
        unit = registry.record_execution(
            "unit-tests",
            number,
            result="UNSTABLE" if number == 2 else "SUCCESS",
            causes=upstream,
        )
        registry.record_execution("static-analysis", number, result="SUCCESS", causes=upstream)

        package_causes = [UpstreamCause(unit.job_name, unit.number)]
        if number < 4:
            package = registry.record_execution("package", number, result="SUCCESS", causes=package_causes)
            if number != 2:
                registry.record_execution(
                    "deploy-staging",
                    number,
                    result="FAILURE" if number == 3 else "SUCCESS",
                    causes=[UpstreamCause(package.job_name, package.number)],
                )
        else:
            registry.record_execution(
                "package",
                number,
                in_progress=True,
                start_timestamp=now - 45_000,
                estimated_duration=60_000,
                causes=package_causes,
            )
    return registry


# =============================================================================
# Example 1: Latest runs
# =============================================================================


def example_latest_runs(factory: PipelineFactory) -> None:
    """Show the three most recent pipeline runs."""
    print("\n" + "=" * 60)
    print("Example 1: Latest Runs")
    print("=" * 60)

    prototype = factory.extract_prototype("Delivery", "compile")
    print("\nPrototype:")
    print(render_text(prototype))

    for pipeline in factory.latest_instances(prototype, 3):
        print()
        print(render_text(pipeline))


# =============================================================================
# Example 2: Aggregated view
# =============================================================================


def example_aggregated_view(factory: PipelineFactory) -> None:
    """Show every job's most recent execution in one pipeline."""
    print("\n" + "=" * 60)
    print("Example 2: Aggregated View")
    print("=" * 60)

    prototype = factory.extract_prototype("Delivery", "compile")
    pipeline = factory.aggregated_instance(prototype)
    print()
    print(render_text(pipeline))
    print(f"\nStages may show different runs: {[stage.version for stage in pipeline.stages]}")


if __name__ == "__main__":
    print("deliveryview Pipeline Examples")
    print("=" * 60)

    provider = configure_tracing(service_name="delivery-pipeline-example")
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(formatter=lambda span: f"span {span.name}\n")))

    factory = PipelineFactory(build_registry(), ViewConfig(max_history_window=50))
    example_latest_runs(factory)
    example_aggregated_view(factory)

    print("\n" + "=" * 60)
    print("All examples completed!")
    print("=" * 60)
