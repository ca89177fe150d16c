#  Copyright (c) 2025 Tom Villani, Ph.D.
"""filebatch - apply transforms to batches of files.

filebatch resolves layered configuration, expands file operands, globs and
directories into an ordered set of files, applies one transform to each
file while isolating per-file failures, and renders the results as a
table, JSON, YAML or CSV.

Built-in Transforms
-------------------
- ``hash``: SHA-256 digest of the content
- ``count``: byte and character counts with the detected encoding
- ``size``: size and modification time, read without opening the file
- ``lines``: number of lines

Examples
--------
Apply a transform from Python:

    >>> from pathlib import Path
    >>> from filebatch import apply_transform, resolve_file_set
    >>> file_set = resolve_file_set(["README.md"])
    >>> [apply_transform("lines", path) for path in file_set.files]

"""

from filebatch.config import Settings, resolve_settings
from filebatch.exceptions import (
    AbortedByUserError,
    ConfigurationError,
    EmptyFileSetError,
    FileBatchError,
    NoInputGivenError,
    TransformError,
    UnknownTransformError,
    UsageError,
)
from filebatch.fileset import FileSetResult, resolve_file_set
from filebatch.results import (
    CountResult,
    HashResult,
    LinesResult,
    SizeResult,
    TransformFailure,
    TransformResult,
)
from filebatch.transforms import TransformSpec, apply_transform, transform_registry

__all__ = [
    "AbortedByUserError",
    "ConfigurationError",
    "CountResult",
    "EmptyFileSetError",
    "FileBatchError",
    "FileSetResult",
    "HashResult",
    "LinesResult",
    "NoInputGivenError",
    "Settings",
    "SizeResult",
    "TransformError",
    "TransformFailure",
    "TransformResult",
    "TransformSpec",
    "UnknownTransformError",
    "UsageError",
    "apply_transform",
    "resolve_file_set",
    "resolve_settings",
    "transform_registry",
]
