#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Result types produced by transforms.

Every transform returns exactly one ``TransformResult`` per file. The union
has one success variant per built-in transform and a single failure
variant. All variants are frozen so a result sequence cannot be modified
once a batch has produced it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Union


@dataclass(frozen=True)
class HashResult:
    """Content digest of one file."""

    path: Path
    algorithm: str
    hash: str

    transform = "hash"
    ok = True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize into a JSON-friendly dictionary."""
        return {
            "path": str(self.path),
            "transform": self.transform,
            "status": "ok",
            "algorithm": self.algorithm,
            "hash": self.hash,
        }


@dataclass(frozen=True)
class CountResult:
    """Byte and character counts of one file.

    The two lengths differ whenever the content holds multi-byte characters.
    """

    path: Path
    byte_length: int
    character_length: int
    encoding: str

    transform = "count"
    ok = True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize into a JSON-friendly dictionary."""
        return {
            "path": str(self.path),
            "transform": self.transform,
            "status": "ok",
            "byte_length": self.byte_length,
            "character_length": self.character_length,
            "encoding": self.encoding,
        }


@dataclass(frozen=True)
class SizeResult:
    """Filesystem metadata of one file, read without opening it."""

    path: Path
    size_bytes: int
    modified_timestamp: float

    transform = "size"
    ok = True

    @property
    def modified_iso(self) -> str:
        """Return the modification time as an ISO-8601 UTC string."""
        return datetime.fromtimestamp(self.modified_timestamp, tz=timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize into a JSON-friendly dictionary."""
        return {
            "path": str(self.path),
            "transform": self.transform,
            "status": "ok",
            "size_bytes": self.size_bytes,
            "modified_timestamp": self.modified_timestamp,
            "modified": self.modified_iso,
        }


@dataclass(frozen=True)
class LinesResult:
    """Line count of one file."""

    path: Path
    line_count: int

    transform = "lines"
    ok = True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize into a JSON-friendly dictionary."""
        return {
            "path": str(self.path),
            "transform": self.transform,
            "status": "ok",
            "line_count": self.line_count,
        }


@dataclass(frozen=True)
class TransformFailure:
    """A transform that could not be applied to one file."""

    path: Path
    transform: str
    error: str

    ok = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize into a JSON-friendly dictionary."""
        return {
            "path": str(self.path),
            "transform": self.transform,
            "status": "error",
            "error": self.error,
        }


TransformSuccess = Union[HashResult, CountResult, SizeResult, LinesResult]
TransformResult = Union[HashResult, CountResult, SizeResult, LinesResult, TransformFailure]

SUCCESS_TYPES: tuple[type, ...] = (HashResult, CountResult, SizeResult, LinesResult)


__all__ = [
    "HashResult",
    "CountResult",
    "SizeResult",
    "LinesResult",
    "TransformFailure",
    "TransformSuccess",
    "TransformResult",
    "SUCCESS_TYPES",
]
