#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Progress reporting and summary rendering for the CLI.

Progress and summaries always go to the status stream (stderr) so the
data stream stays machine-readable. The progress bar is redrawn in place
with a carriage return and is suppressed entirely in quiet mode or when
the status stream is not a terminal.
"""

from __future__ import annotations

import sys
from typing import Any, Optional, TextIO

from rich.console import Console
from rich.table import Table

from filebatch.cli.timing import format_duration
from filebatch.constants import DEFAULT_PROGRESS_WIDTH


def progress_percent(completed: int, total: int) -> int:
    """Return the completion percentage, rounded half up.

    ``completed`` is clamped into ``[0, total]``, so the result always lies
    in ``[0, 100]``. An empty batch is reported as 0%.
    """
    if total <= 0:
        return 0
    completed = max(0, min(completed, total))
    return (completed * 100 + total // 2) // total


def render_progress(completed: int, total: int, width: int = DEFAULT_PROGRESS_WIDTH) -> str:
    """Render a one-line progress bar.

    Parameters
    ----------
    completed : int
        Number of finished items
    total : int
        Number of items in the batch
    width : int, default 30
        Number of characters between the brackets

    Returns
    -------
    str
        The bar, e.g. ``[=====     ]  50% (1/2)`` for width 10

    Examples
    --------
    >>> render_progress(1, 2, width=10)
    '[=====     ]  50% (1/2)'
    >>> render_progress(0, 0, width=4)
    '[    ]   0% (0/0)'

    """
    total = max(total, 0)
    completed = max(0, min(completed, total))
    filled = (completed * width) // total if total else 0
    bar = "=" * filled + " " * (width - filled)
    return f"[{bar}] {progress_percent(completed, total):3d}% ({completed}/{total})"


class ProgressContext:
    """In-place progress bar on the status stream.

    Parameters
    ----------
    enabled : bool
        Whether to draw anything at all
    total : int
        Total number of items to process
    stream : TextIO, optional
        Status stream, defaults to ``sys.stderr``
    width : int, default 30
        Width of the bar

    Examples
    --------
    >>> with ProgressContext(enabled=True, total=10) as progress:
    ...     for path in paths:
    ...         # Do work
    ...         progress.update()
    ...         progress.log(f"[OK] {path}")

    """

    def __init__(
        self,
        enabled: bool,
        total: int,
        stream: Optional[TextIO] = None,
        width: int = DEFAULT_PROGRESS_WIDTH,
    ):
        """Initialize progress context."""
        self.enabled = enabled
        self.total = max(total, 0)
        self.stream = stream if stream is not None else sys.stderr
        self.width = width
        self.completed = 0
        self._drawn = False

    @property
    def percent(self) -> int:
        """Current completion percentage."""
        return progress_percent(self.completed, self.total)

    def __enter__(self) -> ProgressContext:
        """Draw the empty bar."""
        self._draw()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Finish the bar line so later output starts on a fresh line."""
        if self._drawn:
            self.stream.write("\n")
            self.stream.flush()
            self._drawn = False

    def _draw(self) -> None:
        if not self.enabled:
            return
        self.stream.write("\r" + render_progress(self.completed, self.total, self.width))
        self.stream.flush()
        self._drawn = True

    def update(self, advance: int = 1) -> None:
        """Advance the bar; the count never exceeds ``total``."""
        self.completed = min(self.total, self.completed + max(advance, 0))
        self._draw()

    def log(self, message: str) -> None:
        """Print a message above the bar without corrupting it."""
        if not self.enabled:
            return
        if self._drawn:
            # Erase the bar line, print the message, then redraw
            self.stream.write("\r\033[K")
        self.stream.write(message + "\n")
        self._drawn = False
        self._draw()


class SummaryRenderer:
    """Render the end-of-batch summary table on the status stream.

    Parameters
    ----------
    enabled : bool
        Whether to print anything (False in quiet mode or with --no-summary)
    color : bool, default True
        Allow ANSI colors
    stream : TextIO, optional
        Status stream, defaults to ``sys.stderr``

    """

    def __init__(self, enabled: bool, color: bool = True, stream: Optional[TextIO] = None):
        """Initialize summary renderer."""
        self.enabled = enabled
        self._console = Console(
            file=stream if stream is not None else sys.stderr,
            no_color=not color,
            highlight=False,
        )

    def render_batch_summary(
        self, succeeded: int, failed: int, total: int, elapsed: float, title: str = "Batch Summary"
    ) -> None:
        """Render the succeeded / failed / total / elapsed table."""
        if not self.enabled:
            return

        table = Table(title=title)
        table.add_column("Status", style="cyan", no_wrap=True)
        table.add_column("Count", style="magenta", justify="right")

        table.add_row("+ Succeeded", str(succeeded))
        table.add_row("- Failed", str(failed), style="red" if failed else None)
        table.add_row("Total", str(total))
        table.add_row("Elapsed", format_duration(elapsed))

        self._console.print(table)


__all__ = ["ProgressContext", "SummaryRenderer", "progress_percent", "render_progress"]
