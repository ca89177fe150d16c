#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/filebatch/transforms/registry.py
"""Transform registry for named per-file transforms.

This module implements a registry pattern for transforms, enabling:
- Lookup of a transform by the name given on the command line
- Registration of additional transforms by embedders and tests
- Validation of a transform name before any file is processed

Examples
--------
Register a transform using the global registry instance:

    >>> from filebatch.transforms import transform_registry, TransformSpec
    >>> transform_registry.register(TransformSpec("md5", compute_md5, "MD5 digest"))

List all transforms:

    >>> for name in transform_registry.list_transforms():
    ...     print(f"{name}: {transform_registry.get(name).description}")

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from filebatch.exceptions import UnknownTransformError

if TYPE_CHECKING:
    from filebatch.results import TransformSuccess

logger = logging.getLogger(__name__)

TransformFunc = Callable[[Path], "TransformSuccess"]


@dataclass(frozen=True)
class TransformSpec:
    """Metadata describing one registered transform.

    Parameters
    ----------
    name : str
        Name used on the command line (``--transform NAME``)
    func : callable
        Function mapping a file path to a success result; raises on failure
    description : str
        One-line description shown in help and listings
    reads_content : bool, default True
        Whether the transform opens the file; metadata-only transforms set
        this to False

    """

    name: str
    func: TransformFunc
    description: str = ""
    reads_content: bool = True


class TransformRegistry:
    """Registry for managing named transforms.

    This singleton class provides a central registry for all transforms.
    Built-in transforms are registered on first access.

    Examples
    --------
    >>> from filebatch.transforms import transform_registry
    >>> spec = transform_registry.get("hash")
    >>> spec.reads_content
    True

    """

    _instance: Optional[TransformRegistry] = None
    _transforms: dict[str, TransformSpec]
    _initialized: bool

    def __new__(cls) -> TransformRegistry:
        """Create or return singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._transforms = {}
            cls._instance._initialized = False
        return cls._instance

    def _ensure_initialized(self) -> None:
        """Register the built-in transforms once."""
        if not self._initialized:
            self._initialized = True
            from filebatch.transforms.builtin import BUILTIN_TRANSFORMS

            for spec in BUILTIN_TRANSFORMS:
                if spec.name not in self._transforms:
                    self._transforms[spec.name] = spec

    def register(self, spec: TransformSpec) -> None:
        """Register a transform.

        Parameters
        ----------
        spec : TransformSpec
            Transform to register

        Notes
        -----
        If a transform with the same name is already registered, it will
        be overwritten and a warning will be logged.

        """
        self._ensure_initialized()
        if spec.name in self._transforms:
            logger.warning(f"Transform '{spec.name}' already registered, overwriting")

        self._transforms[spec.name] = spec
        logger.debug(f"Registered transform: {spec.name}")

    def unregister(self, name: str) -> bool:
        """Remove a transform, returning True when it was registered."""
        self._ensure_initialized()
        return self._transforms.pop(name, None) is not None

    def get(self, name: str) -> TransformSpec:
        """Return the transform registered under ``name``.

        Raises
        ------
        UnknownTransformError
            If no transform has that name

        """
        self._ensure_initialized()
        try:
            return self._transforms[name]
        except KeyError:
            raise UnknownTransformError(name, self.list_transforms()) from None

    def has_transform(self, name: str) -> bool:
        """Check whether a transform is registered."""
        self._ensure_initialized()
        return name in self._transforms

    def list_transforms(self) -> list[str]:
        """Return registered transform names in sorted order."""
        self._ensure_initialized()
        return sorted(self._transforms)


transform_registry = TransformRegistry()
