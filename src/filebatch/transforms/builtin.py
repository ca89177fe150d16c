#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/filebatch/transforms/builtin.py
"""Built-in per-file transforms.

Each transform takes a file path and returns a success result. Failures
are raised as exceptions and converted into failure results by
``filebatch.transforms.pipeline.apply_transform``.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

from filebatch.constants import DEFAULT_HASH_ALGORITHM, READ_CHUNK_SIZE
from filebatch.results import CountResult, HashResult, LinesResult, SizeResult
from filebatch.transforms.registry import TransformSpec
from filebatch.utils.encoding import decode_text


def compute_hash(path: Path, algorithm: str = DEFAULT_HASH_ALGORITHM) -> HashResult:
    """Stream the file content through a cryptographic digest."""
    digest = hashlib.new(algorithm)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(READ_CHUNK_SIZE), b""):
            digest.update(chunk)
    return HashResult(path=path, algorithm=algorithm, hash=digest.hexdigest())


def count_characters(path: Path) -> CountResult:
    """Count bytes and decoded characters.

    The character count depends on the detected encoding, so multi-byte
    content yields fewer characters than bytes.
    """
    data = path.read_bytes()
    text, encoding = decode_text(data)
    return CountResult(path=path, byte_length=len(data), character_length=len(text), encoding=encoding)


def stat_size(path: Path) -> SizeResult:
    """Read size and modification time from filesystem metadata only."""
    stat_result = os.stat(path)
    return SizeResult(path=path, size_bytes=stat_result.st_size, modified_timestamp=stat_result.st_mtime)


def count_lines(path: Path) -> LinesResult:
    """Count lines in the decoded content.

    Uses ``str.splitlines`` semantics: a final line without a terminator is
    counted, a trailing terminator does not start a new line, and an empty
    file has zero lines.
    """
    text, _encoding = decode_text(path.read_bytes())
    return LinesResult(path=path, line_count=len(text.splitlines()))


BUILTIN_TRANSFORMS: tuple[TransformSpec, ...] = (
    TransformSpec("hash", compute_hash, "SHA-256 digest of the file content"),
    TransformSpec("count", count_characters, "Byte and character counts"),
    TransformSpec("size", stat_size, "Size and modification time from metadata", reads_content=False),
    TransformSpec("lines", count_lines, "Number of lines in the file"),
)
