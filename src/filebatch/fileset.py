#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Input file discovery for filebatch.

This module expands CLI input specifications (literal paths, glob patterns
and directories) into the ordered, duplicate-free list of regular files a
batch operates on. Entries that cannot be processed are dropped with a
warning rather than failing the run.
"""

from __future__ import annotations

import glob
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, TextIO

from filebatch.constants import GLOB_CHARACTERS
from filebatch.exceptions import EmptyFileSetError, NoInputGivenError

logger = logging.getLogger(__name__)


@dataclass
class FileSetResult:
    """Resolved file set together with the warnings produced on the way.

    Attributes
    ----------
    files : list of Path
        Absolute paths of regular files, in first-seen order
    warnings : list of str
        One message per dropped entry

    """

    files: List[Path] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        """Return the number of resolved files."""
        return len(self.files)


def has_glob_pattern(spec: str) -> bool:
    """Return True when the input specification contains a wildcard."""
    return any(char in spec for char in GLOB_CHARACTERS)


def _absolute(path: Path, cwd: Path) -> Path:
    # Absolute without resolving symlinks, so reported paths match what was given
    if not path.is_absolute():
        path = cwd / path
    return Path(os.path.normpath(path))


def _expand_spec(spec: str, cwd: Path, warnings: List[str]) -> List[Path]:
    """Expand one input specification into candidate paths."""
    expanded = os.path.expanduser(spec)

    if not has_glob_pattern(expanded):
        return [_absolute(Path(expanded), cwd)]

    pattern = expanded if os.path.isabs(expanded) else os.path.join(str(cwd), expanded)
    matches = sorted(glob.glob(pattern, recursive=True))
    if not matches:
        warnings.append(f"Pattern matched no files: {spec}")
    return [_absolute(Path(match), cwd) for match in matches]


def _walk_directory(directory: Path) -> Iterator[Path]:
    """Yield non-directory entries beneath ``directory`` in sorted, depth-first order."""
    for root, dirnames, filenames in os.walk(directory):
        dirnames.sort()
        for filename in sorted(filenames):
            yield Path(root) / filename


def _check_and_add(path: Path, display: str, warnings: List[str], add: Callable[[Path], None]) -> None:
    # Broken symlinks report as nonexistent; FIFOs, sockets and devices as non-regular
    if not path.exists():
        warnings.append(f"Path does not exist: {display}")
    elif not path.is_file():
        warnings.append(f"Skipping non-regular file: {display}")
    else:
        add(path)


def resolve_file_set(
    specs: Iterable[str],
    recursive: bool = False,
    cwd: Optional[Path] = None,
) -> FileSetResult:
    """Resolve input specifications into a validated list of files.

    Parameters
    ----------
    specs : iterable of str
        Literal paths, glob patterns or directories, in priority order
    recursive : bool, default False
        Enumerate regular files beneath directory inputs
    cwd : Path, optional
        Base directory for relative specifications, defaults to the
        current working directory

    Returns
    -------
    FileSetResult
        Absolute file paths in first-seen order plus dropped-entry warnings

    Raises
    ------
    NoInputGivenError
        If ``specs`` is empty
    EmptyFileSetError
        If every candidate was filtered out

    Examples
    --------
    >>> result = resolve_file_set(["a.txt", "missing.txt"])
    >>> [p.name for p in result.files]
    ['a.txt']
    >>> result.warnings
    ['Path does not exist: missing.txt']

    """
    spec_list = [spec for spec in specs if spec]
    if not spec_list:
        raise NoInputGivenError()

    base = (cwd or Path.cwd()).absolute()
    result = FileSetResult()
    seen: set[Path] = set()

    def add(path: Path) -> None:
        if path not in seen:
            seen.add(path)
            result.files.append(path)

    # Flatten and deduplicate candidates before validating them
    candidates: List[tuple[str, Path]] = []
    candidate_keys: set[Path] = set()
    for spec in spec_list:
        for candidate in _expand_spec(spec, base, result.warnings):
            if candidate not in candidate_keys:
                candidate_keys.add(candidate)
                candidates.append((spec, candidate))

    for spec, candidate in candidates:
        display = spec if not has_glob_pattern(spec) else str(candidate)

        if not candidate.exists():
            result.warnings.append(f"Path does not exist: {display}")
            continue

        if candidate.is_dir():
            if not recursive:
                result.warnings.append(f"Skipping directory {display} (use --recursive to process directories)")
                continue
            for child in _walk_directory(candidate):
                _check_and_add(child, str(child), result.warnings, add)
            continue

        _check_and_add(candidate, display, result.warnings, add)

    if not result.files:
        raise EmptyFileSetError(warnings=result.warnings)

    logger.debug("Resolved %d file(s) from %d input(s)", len(result.files), len(spec_list))
    return result


def read_path_list(stream: TextIO) -> List[str]:
    """Read one path per line from a text stream.

    Blank lines and lines starting with ``#`` are ignored, and surrounding
    whitespace is stripped.

    Parameters
    ----------
    stream : TextIO
        Stream to read, usually ``sys.stdin``

    Returns
    -------
    list of str
        Path specifications in input order

    """
    paths: List[str] = []
    for line in stream:
        entry = line.strip()
        if not entry or entry.startswith("#"):
            continue
        paths.append(entry)
    return paths


__all__ = ["FileSetResult", "has_glob_pattern", "read_path_list", "resolve_file_set"]
