#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for filebatch.

This module defines the exception classes raised while resolving inputs,
configuration and transforms. Each class maps onto one CLI exit condition
(see ``filebatch.cli.builder.get_exit_code_for_exception``).

Exception Hierarchy
-------------------
- FileBatchError (base exception)

  - UsageError (invalid flags or transform, exit code 2)
    - NoInputGivenError (no operands and no --stdin list)
    - UnknownTransformError (transform name not registered)

  - EmptyFileSetError (every candidate was filtered out, exit code 1)

  - ConfigurationError (config file cannot be read or written, exit code 78)

  - AbortedByUserError (confirmation declined, exit code 0)

  - TransformError (per-file failure, captured into a result)

"""

from __future__ import annotations

from typing import Sequence


class FileBatchError(Exception):
    """Base exception class for all filebatch-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class UsageError(FileBatchError):
    """Exception raised for invalid flag combinations or option values.

    Usage errors are reported before any file is processed.
    """


class NoInputGivenError(UsageError):
    """Exception raised when neither file operands nor a path list were given."""

    def __init__(self, message: str | None = None):
        """Initialize with the default message when none is given."""
        super().__init__(message or "No input files given. Pass file operands or use --stdin.")


class UnknownTransformError(UsageError):
    """Exception raised when a transform name is not registered.

    Parameters
    ----------
    transform_name : str
        The unrecognized transform name
    available : sequence of str, optional
        Registered transform names, listed in the message

    """

    def __init__(self, transform_name: str, available: Sequence[str] | None = None):
        """Initialize the unknown transform error."""
        message = f"Unknown transform: '{transform_name}'"
        if available:
            message += f". Available transforms: {', '.join(available)}"
        super().__init__(message)
        self.transform_name = transform_name
        self.available = list(available or [])


class EmptyFileSetError(FileBatchError):
    """Exception raised when input resolution leaves no files to process.

    Parameters
    ----------
    warnings : sequence of str, optional
        Warnings collected while the candidates were filtered

    """

    def __init__(self, message: str | None = None, warnings: Sequence[str] | None = None):
        """Initialize the empty file set error."""
        super().__init__(message or "No valid input files found")
        self.warnings = list(warnings or [])


class ConfigurationError(FileBatchError):
    """Exception raised when a configuration file cannot be read or written.

    During normal runs this error is downgraded to a warning and the run
    continues with defaults. It is fatal only for ``config init``.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    config_path : str, optional
        Path of the offending configuration file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error."""
        super().__init__(message, original_error=original_error)
        self.config_path = config_path


class AbortedByUserError(FileBatchError):
    """Exception raised when the user declines a confirmation prompt."""

    def __init__(self, message: str | None = None):
        """Initialize with the default message when none is given."""
        super().__init__(message or "Aborted by user")


class TransformError(FileBatchError):
    """Exception raised when a transform fails for a single file.

    The transform engine converts this into a failure result, so it never
    halts a batch.

    Parameters
    ----------
    message : str
        Description of the failure
    file_path : str, optional
        Path to the file being transformed
    transform_name : str, optional
        Name of the transform that failed
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        transform_name: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the transform error."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path
        self.transform_name = transform_name


__all__ = [
    "FileBatchError",
    "UsageError",
    "NoInputGivenError",
    "UnknownTransformError",
    "EmptyFileSetError",
    "ConfigurationError",
    "AbortedByUserError",
    "TransformError",
]
