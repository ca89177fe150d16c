#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/filebatch/utils/retry.py
"""Bounded retry helpers.

The transforms read files that may be briefly unavailable (network mounts,
files being rotated). ``retry_call`` retries such reads a bounded number of
times with exponential backoff instead of looping until success.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def exponential_backoff(base_delay: float, factor: float = 2.0, max_delay: float = 5.0) -> Callable[[int], float]:
    """Return a backoff policy mapping a 1-based attempt number to a delay.

    Examples
    --------
    >>> policy = exponential_backoff(0.1)
    >>> [policy(n) for n in (1, 2, 3)]
    [0.1, 0.2, 0.4]

    """

    def policy(attempt: int) -> float:
        return min(max_delay, base_delay * factor ** (attempt - 1))

    return policy


def retry_call(
    func: Callable[[], T],
    max_attempts: int = 1,
    backoff: Callable[[int], float] | None = None,
    retry_on: Tuple[Type[BaseException], ...] = (OSError,),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``func`` until it succeeds or ``max_attempts`` is reached.

    Parameters
    ----------
    func : callable
        Zero-argument callable to invoke
    max_attempts : int, default 1
        Total number of attempts, including the first one
    backoff : callable, optional
        Maps the number of the failed attempt to a delay in seconds;
        no delay when omitted
    retry_on : tuple of exception types, default (OSError,)
        Exceptions that trigger another attempt; anything else propagates
        immediately
    sleep : callable, default time.sleep
        Sleep function, replaceable in tests

    Returns
    -------
    T
        The return value of the first successful call

    Raises
    ------
    ValueError
        If ``max_attempts`` is less than 1
    Exception
        The exception from the final attempt when every attempt failed

    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    attempt = 1
    while True:
        try:
            return func()
        except retry_on as e:
            if attempt >= max_attempts:
                raise
            delay = backoff(attempt) if backoff else 0.0
            logger.debug(f"Attempt {attempt}/{max_attempts} failed ({e}); retrying in {delay:.2f}s")
            if delay > 0:
                sleep(delay)
            attempt += 1
