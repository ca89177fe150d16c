"""Logging setup shared by the filebatch commands."""

from __future__ import annotations

import logging
import sys
from typing import Optional

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


def resolve_log_level(verbose: bool, quiet: bool) -> int:
    """Map the verbosity settings onto a logging level.

    ``quiet`` wins over ``verbose`` so scripted runs stay silent on stderr.
    """
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def configure_logging(level: int, log_file: Optional[str] = None) -> logging.Logger:
    """Route root logging to stderr and, optionally, a log file.

    Parameters
    ----------
    level : int
        Logging level for the root logger and its handlers
    log_file : str, optional
        File to append log records to, with timestamps and logger names

    Returns
    -------
    logging.Logger
        The configured root logger

    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            root_logger.addHandler(file_handler)

    return root_logger
