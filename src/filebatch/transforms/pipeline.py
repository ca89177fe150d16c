#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/filebatch/transforms/pipeline.py
"""Application of a named transform to a single file.

``apply_transform`` is the only entry point the orchestrator uses. It
never raises for problems with an individual file; those become
``TransformFailure`` results so one bad file cannot halt a batch.
"""

from __future__ import annotations

import logging
from pathlib import Path

from filebatch.constants import DEFAULT_RETRY_BACKOFF
from filebatch.exceptions import TransformError
from filebatch.results import TransformFailure, TransformResult
from filebatch.transforms.registry import TransformSpec, transform_registry
from filebatch.utils.retry import exponential_backoff, retry_call

logger = logging.getLogger(__name__)


def _describe_error(error: BaseException) -> str:
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    if isinstance(error, TransformError):
        return error.message
    return str(error) or type(error).__name__


def apply_transform(transform: str | TransformSpec, path: Path, retries: int = 0) -> TransformResult:
    """Apply a transform to one file and capture the outcome.

    Parameters
    ----------
    transform : str or TransformSpec
        Transform name or an already resolved spec
    path : Path
        File to transform
    retries : int, default 0
        Additional attempts when a content read fails with an OS error.
        Ignored for transforms that do not read content.

    Returns
    -------
    TransformResult
        A success result, or ``TransformFailure`` carrying the error message

    Raises
    ------
    UnknownTransformError
        If ``transform`` is a name that is not registered. Callers validate
        the name up front so this is never raised mid-batch.

    """
    spec = transform if isinstance(transform, TransformSpec) else transform_registry.get(transform)
    # Only content reads are retried; a failed stat is not transient
    attempts = retries + 1 if spec.reads_content else 1

    try:
        return retry_call(
            lambda: spec.func(path),
            max_attempts=attempts,
            backoff=exponential_backoff(DEFAULT_RETRY_BACKOFF),
            retry_on=(OSError,),
        )
    except (OSError, ValueError, TransformError) as e:
        message = _describe_error(e)
        logger.debug(f"Transform '{spec.name}' failed for {path}: {message}")
        return TransformFailure(path=path, transform=spec.name, error=message)
