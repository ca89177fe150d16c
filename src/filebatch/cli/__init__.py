"""Command-line interface for filebatch.

filebatch applies one transform to every file of a batch and emits one
result per file. Results go to standard output (or a result file) and
progress, warnings and summaries go to standard error.

Environment Variable Support
----------------------------
FILEBATCH_CONFIG, FILEBATCH_OUTPUT_DIR, FILEBATCH_VERBOSE,
FILEBATCH_TRANSFORM and FILEBATCH_WORKERS provide defaults, and NO_COLOR
disables colors. Command-line flags always override environment
variables, which override the configuration file.

Examples
--------
Hash every text file::

    $ filebatch process *.txt

Count lines below a directory as JSON::

    $ filebatch process src/ --recursive --transform lines --json

Read the file list from a pipeline::

    $ find . -name '*.log' | filebatch process --stdin -t size -o sizes.json

Summarize a directory::

    $ filebatch analyze data/ -r

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
import logging
import sys

from filebatch.cli.builder import EXIT_USAGE_ERROR, create_parser
from filebatch.cli.commands import dispatch_command

logger = logging.getLogger(__name__)


def main(args: list[str] | None = None) -> int:
    """Execute main CLI entry point and return the exit code."""
    command_result = dispatch_command(args)
    if command_result is not None:
        return command_result

    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not getattr(parsed_args, "command", None):
        parser.print_usage(sys.stderr)
        print("Error: a command is required (process, analyze, config, help)", file=sys.stderr)
        return EXIT_USAGE_ERROR

    # Lazy import so --help and --version stay fast
    from filebatch.cli.processors import run_analyze, run_process

    if parsed_args.command == "analyze":
        return run_analyze(parsed_args)
    return run_process(parsed_args)


if __name__ == "__main__":
    sys.exit(main())
