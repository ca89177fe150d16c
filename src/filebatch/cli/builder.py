#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/filebatch/cli/builder.py
"""Argument parser construction and exit code mapping for the filebatch CLI.

Every flag that maps onto a ``Settings`` field uses a tracking action, so
only the flags the user actually typed take part in configuration
resolution.
"""

from __future__ import annotations

import argparse

from filebatch.constants import OUTPUT_FORMATS
from filebatch.cli.custom_actions import (
    TrackingBoundedIntAction,
    TrackingStoreAction,
    TrackingStoreConstAction,
    TrackingStoreFalseAction,
    TrackingStoreTrueAction,
)
from filebatch.exceptions import (
    AbortedByUserError,
    ConfigurationError,
    UsageError,
)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_CONFIG_ERROR = 78
EXIT_INTERRUPTED = 130

# Parser destinations that correspond to Settings fields
PROCESS_SETTING_ARGS: tuple[str, ...] = (
    "output_dir",
    "output",
    "transform",
    "recursive",
    "verbose",
    "quiet",
    "output_format",
    "color",
    "workers",
    "retries",
)
ANALYZE_SETTING_ARGS: tuple[str, ...] = ("recursive", "verbose", "quiet", "output_format", "color")


def get_version() -> str:
    """Get the version of the filebatch package."""
    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("filebatch")
    except PackageNotFoundError:
        return "unknown"


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "inputs",
        nargs="*",
        metavar="FILE",
        help="Files, directories or glob patterns to process",
    )
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read the file list from standard input, one path per line (ignores FILE operands)",
    )
    parser.add_argument("--recursive", "-r", action=TrackingStoreTrueAction, help="Process directories recursively")


def _add_output_format_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--format",
        dest="output_format",
        action=TrackingStoreAction,
        choices=OUTPUT_FORMATS,
        help="Output format (default: table on a terminal, json otherwise)",
    )
    group.add_argument(
        "--json",
        dest="output_format",
        action=TrackingStoreConstAction,
        const="json",
        help="Shorthand for --format json",
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", metavar="PATH", help="Configuration file (TOML, JSON or YAML)")
    parser.add_argument("--verbose", "-v", action=TrackingStoreTrueAction, help="Enable debug logging")
    parser.add_argument(
        "--quiet", "-q", action=TrackingStoreTrueAction, help="Suppress progress, summaries and warnings"
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action=TrackingStoreFalseAction,
        help="Disable colored output",
    )


def _build_process_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "process",
        help="Apply a transform to every input file",
        description="Apply a transform to every input file and emit one result per file.",
    )
    _add_input_arguments(parser)
    parser.add_argument(
        "--transform",
        "-t",
        action=TrackingStoreAction,
        metavar="NAME",
        help="Transform to apply: hash, count, size or lines (default: hash)",
    )
    parser.add_argument("--output", "-o", action=TrackingStoreAction, metavar="PATH", help="Write results to PATH")
    parser.add_argument(
        "--output-dir",
        action=TrackingStoreAction,
        metavar="DIR",
        help="Write results to DIR/filebatch-<transform>.<ext> when --output is not given",
    )
    _add_output_format_arguments(parser)
    parser.add_argument("--force", "-f", action="store_true", help="Overwrite existing output without asking")
    parser.add_argument(
        "--dry-run", action="store_true", help="List the files that would be processed and exit"
    )
    parser.add_argument("--no-input", action="store_true", help="Never prompt; treat the session as non-interactive")
    parser.add_argument(
        "--workers",
        action=TrackingBoundedIntAction,
        minimum=1,
        metavar="N",
        help="Number of worker threads (default: 1)",
    )
    parser.add_argument(
        "--retries",
        action=TrackingBoundedIntAction,
        minimum=0,
        metavar="N",
        help="Retry failed reads up to N times (default: 0)",
    )
    parser.add_argument("--no-summary", action="store_true", help="Do not print the summary table")
    parser.add_argument("--log-file", metavar="PATH", help="Also write log messages to PATH")
    _add_common_arguments(parser)
    parser.set_defaults(command="process")


def _build_analyze_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "analyze",
        help="Summarize sizes and modification times of the input files",
        description="Summarize file count, total size, largest and newest file, and a breakdown by extension.",
    )
    _add_input_arguments(parser)
    _add_output_format_arguments(parser)
    _add_common_arguments(parser)
    parser.set_defaults(command="analyze")


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Parser with the ``process`` and ``analyze`` subcommands. The
        ``config`` and ``help`` commands are dispatched before parsing.

    """
    parser = argparse.ArgumentParser(
        prog="filebatch",
        description="Apply transforms to batches of files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  process     Apply a transform (hash, count, size, lines) to files
  analyze     Summarize sizes and modification times
  config      Show, locate or initialize the configuration file
  help        Show help for a command

Examples:
  filebatch process *.txt
  filebatch process docs/ --recursive --transform lines --json
  find . -name '*.py' | filebatch process --stdin -t count -o counts.json
  filebatch analyze data/ -r
  filebatch config show
        """,
    )
    parser.add_argument("--version", "-V", action="version", version=f"filebatch {get_version()}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    _build_process_parser(subparsers)
    _build_analyze_parser(subparsers)

    return parser


def get_exit_code_for_exception(exception: BaseException) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : BaseException
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, KeyboardInterrupt):
        return EXIT_INTERRUPTED

    # Declining a prompt is a user choice, not an error
    if isinstance(exception, AbortedByUserError):
        return EXIT_SUCCESS

    if isinstance(exception, UsageError):
        return EXIT_USAGE_ERROR

    if isinstance(exception, ConfigurationError):
        return EXIT_CONFIG_ERROR

    return EXIT_ERROR
