#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Confirmation prompts for destructive actions.

``confirm`` never blocks when nobody can answer: with ``--no-input`` or
when standard input is not a terminal it returns the caller's default
without reading anything.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from filebatch.cli.output import is_interactive

logger = logging.getLogger(__name__)

_YES_ANSWERS = frozenset({"y", "yes"})


def confirm(
    message: str,
    default_on_non_interactive: bool = False,
    force: bool = False,
    interactive: Optional[bool] = None,
    input_stream: Optional[TextIO] = None,
    output_stream: Optional[TextIO] = None,
) -> bool:
    """Ask the user to approve a destructive action.

    Parameters
    ----------
    message : str
        Question shown to the user, without the ``[y/N]`` suffix
    default_on_non_interactive : bool, default False
        Answer used when nobody can be asked, and for an empty reply
    force : bool, default False
        Approve without asking (``--force``)
    interactive : bool, optional
        Override terminal detection; ``False`` is what ``--no-input`` passes
    input_stream : TextIO, optional
        Stream the answer is read from, defaults to ``sys.stdin``
    output_stream : TextIO, optional
        Stream the prompt is written to, defaults to ``sys.stderr``

    Returns
    -------
    bool
        True when the action may proceed

    Examples
    --------
    >>> confirm("Overwrite out.json?", force=True)
    True
    >>> confirm("Overwrite out.json?", default_on_non_interactive=True, interactive=False)
    True

    """
    if force:
        return True

    source = input_stream if input_stream is not None else sys.stdin
    if interactive is None:
        interactive = is_interactive(source)

    if not interactive:
        logger.debug(f"Non-interactive session, answering {'yes' if default_on_non_interactive else 'no'}: {message}")
        return default_on_non_interactive

    target = output_stream if output_stream is not None else sys.stderr
    suffix = "[Y/n]" if default_on_non_interactive else "[y/N]"
    target.write(f"{message} {suffix} ")
    target.flush()

    reply = source.readline()
    if not reply:
        # EOF
        target.write("\n")
        return default_on_non_interactive

    answer = reply.strip().lower()
    if not answer:
        return default_on_non_interactive
    return answer in _YES_ANSWERS


__all__ = ["confirm"]
