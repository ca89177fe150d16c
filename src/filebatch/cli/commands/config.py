#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration management commands.

``config show`` prints the effective settings and where each came from,
``config path`` prints the configuration file that would be consulted and
``config init`` writes a file holding the built-in defaults.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

import tomli_w
import yaml

from filebatch.cli.builder import EXIT_ERROR, EXIT_SUCCESS, EXIT_USAGE_ERROR, get_exit_code_for_exception
from filebatch.cli.confirm import confirm
from filebatch.cli.output import is_interactive
from filebatch.config import default_config_data, resolve_config_path, resolve_settings
from filebatch.exceptions import AbortedByUserError, ConfigurationError
from filebatch.logging_utils import configure_logging

logger = logging.getLogger(__name__)

CONFIG_FILE_HEADER = (
    "# filebatch configuration file\n"
    "# Generated from the built-in defaults.\n"
    "# Command-line flags and FILEBATCH_* environment variables override these values.\n\n"
)


def _dump_settings(data: Dict[str, Any], output_format: str) -> str:
    if output_format == "toml":
        return tomli_w.dumps(data)
    if output_format == "yaml":
        return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True, indent=2)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def handle_config_show_command(args: list[str] | None = None) -> int:
    """Handle ``config show`` command to display effective configuration."""
    parser = argparse.ArgumentParser(
        prog="filebatch config show",
        description="Display the effective configuration that filebatch will use.",
    )
    parser.add_argument(
        "--format",
        choices=("toml", "json", "yaml"),
        default="toml",
        help="Output format for the configuration (default: toml).",
    )
    parser.add_argument(
        "--no-source",
        dest="show_source",
        action="store_false",
        default=True,
        help="Hide configuration source information.",
    )
    parser.add_argument("--config", metavar="PATH", help="Configuration file to consult.")

    try:
        parsed_args = parser.parse_args(args or [])
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0

    configure_logging(logging.WARNING)
    resolution = resolve_settings(config_path=parsed_args.config)
    for warning in resolution.warnings:
        logger.warning(warning)

    # TOML has no null, so unset optional settings are left out
    effective = {key: value for key, value in resolution.settings.to_dict().items() if value is not None}

    if parsed_args.show_source:
        if resolution.config_loaded:
            status = "LOADED"
        elif resolution.config_path.exists():
            status = "INVALID"
        else:
            status = "NOT FOUND"
        print(f"Configuration file: {resolution.config_path} [{status}]")
        print("Sources (flag > env > file > default):")
        for key in resolution.settings.to_dict():
            print(f"  {key}: {resolution.sources.get(key, 'default')}")
        print()

    sys.stdout.write(_dump_settings(effective, parsed_args.format))
    return EXIT_SUCCESS


def handle_config_path_command(args: list[str] | None = None) -> int:
    """Handle ``config path`` to print the configuration file location."""
    parser = argparse.ArgumentParser(
        prog="filebatch config path",
        description="Print the configuration file path filebatch would read and whether it exists.",
    )
    parser.add_argument("--config", metavar="PATH", help="Explicit configuration file path.")

    try:
        parsed_args = parser.parse_args(args or [])
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0

    path = resolve_config_path(parsed_args.config)
    print(path)
    print(f"Status: {'exists' if path.exists() else 'not found'}")
    return EXIT_SUCCESS


def write_default_config(path: Path) -> None:
    """Write the built-in defaults as TOML, creating parent directories.

    Raises
    ------
    ConfigurationError
        If the file cannot be written

    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(CONFIG_FILE_HEADER + tomli_w.dumps(default_config_data()), encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot write configuration file {path}: {e.strerror or e}", config_path=str(path), original_error=e
        ) from e


def handle_config_init_command(args: list[str] | None = None) -> int:
    """Handle ``config init`` to create a default configuration file."""
    parser = argparse.ArgumentParser(
        prog="filebatch config init",
        description="Write a configuration file holding the built-in defaults.",
    )
    parser.add_argument("--path", help="Where to write the file (default: the path 'config path' prints).")
    parser.add_argument("--force", "-f", action="store_true", help="Overwrite an existing file without asking.")
    parser.add_argument("--no-input", action="store_true", help="Never prompt.")

    try:
        parsed_args = parser.parse_args(args or [])
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0

    configure_logging(logging.WARNING)
    path = Path(parsed_args.path).expanduser() if parsed_args.path else resolve_config_path()

    if path.exists():
        interactive = not parsed_args.no_input and is_interactive(sys.stdin)
        if not confirm(
            f"Configuration file {path} exists. Overwrite?", force=parsed_args.force, interactive=interactive
        ):
            if interactive:
                error = AbortedByUserError()
                print(error.message, file=sys.stderr)
                return get_exit_code_for_exception(error)
            print(f"Error: Configuration file already exists: {path} (use --force to overwrite)", file=sys.stderr)
            return EXIT_ERROR

    try:
        write_default_config(path)
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    print(f"Configuration written to {path}")
    return EXIT_SUCCESS


def handle_config_command(args: list[str] | None = None) -> int | None:
    """Handle config subcommands.

    Parameters
    ----------
    args : list[str], optional
        Command line arguments

    Returns
    -------
    int or None
        Exit code if config command was handled, None otherwise

    """
    if not args:
        args = sys.argv[1:]

    if not args or args[0] != "config":
        return None

    if len(args) < 2:
        print(
            """Usage: filebatch config <subcommand> [OPTIONS]

Configuration management commands.

Subcommands:
  show              Display effective configuration and where each value came from
  path              Print the configuration file path that would be used
  init              Write a configuration file with the built-in defaults

Use 'filebatch config <subcommand> --help' for more information.

Examples:
  filebatch config show --format yaml
  filebatch config path
  filebatch config init --path ./filebatch.toml
""",
            file=sys.stderr,
        )
        return EXIT_USAGE_ERROR

    subcommand = args[1]
    subcommand_args = args[2:]

    if subcommand == "show":
        return handle_config_show_command(subcommand_args)
    elif subcommand == "path":
        return handle_config_path_command(subcommand_args)
    elif subcommand == "init":
        return handle_config_init_command(subcommand_args)
    else:
        print(f"Error: Unknown config subcommand '{subcommand}'", file=sys.stderr)
        print("Valid subcommands: show, path, init", file=sys.stderr)
        return EXIT_USAGE_ERROR
