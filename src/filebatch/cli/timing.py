#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Timing utilities for batch runs.

The orchestrator wraps each batch in ``TimingContext`` and shows the
elapsed time in the summary table.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

logger = logging.getLogger(__name__)


class TimingContext:
    """Context manager measuring the wall time of one operation.

    Parameters
    ----------
    operation_name : str
        Name used in the debug log lines
    logger_instance : logging.Logger, optional
        Logger to use for output. If None, uses module logger

    Examples
    --------
    >>> with TimingContext("hash batch") as timer:
    ...     run_batch()
    >>> timer.elapsed
    0.42

    """

    def __init__(self, operation_name: str, logger_instance: Optional[logging.Logger] = None) -> None:
        """Initialize the timing context for an operation."""
        self.operation_name = operation_name
        self.logger = logger_instance or logger
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def __enter__(self) -> TimingContext:
        """Start the timer."""
        self.start_time = time.perf_counter()
        self.logger.debug(f"Starting: {self.operation_name}")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Stop the timer and log the elapsed time."""
        self.end_time = time.perf_counter()
        if exc_type is None:
            self.logger.debug(f"{self.operation_name} completed in {format_duration(self.elapsed)}")
        else:
            self.logger.debug(f"{self.operation_name} stopped after {format_duration(self.elapsed)}")

    @property
    def elapsed(self) -> float:
        """Elapsed time in seconds, measured up to now while still running."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time


def format_duration(seconds: float) -> str:
    """Format a duration in human-readable form.

    Examples
    --------
    >>> format_duration(0.123)
    '123ms'
    >>> format_duration(65.5)
    '1m 5.5s'
    >>> format_duration(3665)
    '1h 1m 5s'

    """
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3600:
        minutes = int(seconds // 60)
        return f"{minutes}m {seconds % 60:.1f}s"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours}h {minutes}m {seconds % 60:.0f}s"
