#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/filebatch/cli/commands/__init__.py
"""Command dispatch for commands that bypass the main parser.

``config`` and ``help`` have their own argument parsers; ``process`` and
``analyze`` are handled by the parser built in ``filebatch.cli.builder``.
"""

import logging
import sys

# Note: Command handlers are imported lazily in dispatch_command so
# --help does not import rich, yaml or tomli_w

logger = logging.getLogger(__name__)


def dispatch_command(args: list[str] | None = None) -> int | None:
    """Handle commands with their own parsers.

    Parameters
    ----------
    args : list[str], optional
        Command line arguments

    Returns
    -------
    int or None
        Exit code if a command was handled, None otherwise

    """
    if not args:
        args = sys.argv[1:]

    if not args:
        return None

    if args[0] == "config":
        from filebatch.cli.commands.config import handle_config_command

        return handle_config_command(args)

    if args[0] == "help":
        from filebatch.cli.commands.help import handle_help_command

        return handle_help_command(args)

    return None
