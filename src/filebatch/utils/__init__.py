#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/filebatch/utils/__init__.py
"""Utility modules for the filebatch package.

This package contains helpers for text decoding and bounded retries that
are shared by the transforms and the CLI.
"""

from filebatch.utils.encoding import decode_text, detect_encoding
from filebatch.utils.retry import retry_call

__all__ = [
    "decode_text",
    "detect_encoding",
    "retry_call",
]
