#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Implementation of the ``help`` subcommand."""

from __future__ import annotations

import argparse
import sys

from filebatch.cli.builder import EXIT_SUCCESS, EXIT_USAGE_ERROR, create_parser


def handle_help_command(args: list[str] | None = None) -> int | None:
    """Handle ``filebatch help [COMMAND]``.

    Prints the top-level help, or the help of one command, on stdout.
    Returns None when the arguments are not a help request.
    """
    if not args:
        args = sys.argv[1:]

    if not args or args[0] != "help":
        return None

    topic = args[1] if len(args) > 1 else None
    parser = create_parser()

    if topic is None:
        parser.print_help()
        return EXIT_SUCCESS

    if topic == "config":
        from filebatch.cli.commands.config import handle_config_command

        handle_config_command(["config"])
        return EXIT_SUCCESS

    subparsers = next(
        action for action in parser._actions if isinstance(action, argparse._SubParsersAction)
    )
    command_parser = subparsers.choices.get(topic)
    if command_parser is None:
        print(f"Error: Unknown command '{topic}'", file=sys.stderr)
        print(f"Available commands: {', '.join([*subparsers.choices, 'config', 'help'])}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    command_parser.print_help()
    return EXIT_SUCCESS
