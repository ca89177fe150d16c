"""Structured validation helpers for CLI argument checks."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from filebatch.config import Settings


class ValidationSeverity(str, Enum):
    """Severity levels for validation problems."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True)
class ValidationProblem:
    """Represents a validation issue discovered during CLI processing."""

    message: str
    severity: ValidationSeverity

    def log(self, logger: logging.Logger) -> None:
        """Emit the problem using the appropriate log level."""
        if self.severity is ValidationSeverity.ERROR:
            logger.error(self.message)
        else:
            logger.warning(self.message)


def collect_argument_problems(parsed_args: argparse.Namespace, settings: Settings) -> list[ValidationProblem]:
    """Collect validation problems for parsed arguments and effective settings.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command line arguments
    settings : Settings
        Effective settings after configuration resolution

    Returns
    -------
    list of ValidationProblem
        Problems in the order they were found; errors stop the run

    """
    problems: list[ValidationProblem] = []

    operands = getattr(parsed_args, "inputs", None) or []
    if getattr(parsed_args, "stdin", False) and operands:
        problems.append(
            ValidationProblem(
                f"--stdin reads the file list from standard input; ignoring {len(operands)} file operand(s)",
                ValidationSeverity.WARNING,
            )
        )

    if settings.verbose and settings.quiet:
        problems.append(ValidationProblem("--quiet overrides --verbose", ValidationSeverity.WARNING))

    if settings.output_dir:
        output_dir_path = Path(settings.output_dir).expanduser()
        if output_dir_path.exists() and not output_dir_path.is_dir():
            problems.append(
                ValidationProblem(
                    f"--output-dir must be a directory, not a file: {settings.output_dir}",
                    ValidationSeverity.ERROR,
                )
            )

    if settings.output:
        if Path(settings.output).expanduser().is_dir():
            problems.append(
                ValidationProblem(
                    f"--output must be a file path, not a directory: {settings.output}",
                    ValidationSeverity.ERROR,
                )
            )
        if settings.output_dir:
            problems.append(
                ValidationProblem("--output-dir is ignored when --output is given", ValidationSeverity.WARNING)
            )

    return problems


def report_validation_problems(
    problems: Iterable[ValidationProblem],
    *,
    logger: Optional[logging.Logger] = None,
) -> bool:
    """Report validation problems via logging.

    Returns True when any errors were encountered.
    """
    logger = logger or logging.getLogger(__name__)
    has_errors = False

    for problem in problems:
        problem.log(logger)
        if problem.severity is ValidationSeverity.ERROR:
            has_errors = True

    return has_errors
