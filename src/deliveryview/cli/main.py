"""Main CLI entry point for deliveryview."""

from __future__ import annotations

import argparse
import logging
import sys

from deliveryview.cli.commands import aggregated, extract, latest
from deliveryview.logging import bind_context, clear_context, configure_logging


def _add_pipeline_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--start",
        required=True,
        help="Name of the first job of the pipeline",
    )
    parser.add_argument(
        "--name",
        help="Pipeline name (default: the starting job's name)",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="deliveryview",
        description="deliveryview - delivery pipeline views over build jobs",
    )
    parser.add_argument(
        "--registry",
        help="Registry definition file (YAML or JSON)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # extract command
    extract_parser = subparsers.add_parser("extract", help="Show the pipeline prototype")
    _add_pipeline_arguments(extract_parser)

    # latest command
    latest_parser = subparsers.add_parser("latest", help="Show the latest pipeline runs")
    _add_pipeline_arguments(latest_parser)
    latest_parser.add_argument(
        "--count",
        type=int,
        help="Number of runs to show (default: DELIVERYVIEW_INSTANCE_COUNT or 3)",
    )

    # aggregated command
    aggregated_parser = subparsers.add_parser(
        "aggregated",
        help="Show every job's most recent execution in one view",
    )
    _add_pipeline_arguments(aggregated_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    configure_logging(
        json_format=args.json_logs,
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )
    clear_context()
    bind_context(command=args.command)

    if args.command == "extract":
        extract(args.registry, args.name, args.start, args.format)
    elif args.command == "latest":
        latest(args.registry, args.name, args.start, args.count, args.format)
    elif args.command == "aggregated":
        aggregated(args.registry, args.name, args.start, args.format)


if __name__ == "__main__":
    main()
