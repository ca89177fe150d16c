#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/filebatch/transforms/__init__.py
"""Per-file transforms for filebatch.

Built-in transforms:

- ``hash``: SHA-256 digest of the content
- ``count``: byte and character counts
- ``size``: size and modification time, without opening the file
- ``lines``: number of lines

Examples
--------
    >>> from pathlib import Path
    >>> from filebatch.transforms import apply_transform
    >>> result = apply_transform("lines", Path("README.md"))
    >>> result.ok
    True

"""

from filebatch.transforms.pipeline import apply_transform
from filebatch.transforms.registry import TransformRegistry, TransformSpec, transform_registry

__all__ = [
    "apply_transform",
    "TransformRegistry",
    "TransformSpec",
    "transform_registry",
]
