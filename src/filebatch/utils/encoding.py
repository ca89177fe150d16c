#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/filebatch/utils/encoding.py
"""Character encoding detection and handling utilities.

This module decodes file content for the transforms that work on text
(character and line counts). Strict UTF-8 is tried first, then chardet
detection, then fallback encodings.
"""

from __future__ import annotations

import codecs
import logging

import chardet

logger = logging.getLogger(__name__)


def detect_encoding(
    data: bytes,
    sample_size: int = 8192,
    confidence_threshold: float = 0.7,
) -> str | None:
    """Detect character encoding of binary data using chardet.

    Parameters
    ----------
    data : bytes
        Binary data to analyze
    sample_size : int, default 8192
        Number of bytes to sample for detection (uses first N bytes)
    confidence_threshold : float, default 0.7
        Minimum confidence level (0.0-1.0) required to trust detection

    Returns
    -------
    str | None
        Detected encoding name (e.g., 'utf-8', 'windows-1252'), or None if
        detection fails or confidence is below threshold

    Examples
    --------
    >>> data = "café".encode("latin-1")
    >>> encoding = detect_encoding(data * 50)
    >>> if encoding:
    ...     text = data.decode(encoding)

    """
    sample = data[:sample_size] if len(data) > sample_size else data
    result = chardet.detect(sample)

    if not result or not result.get("encoding"):
        logger.debug("chardet: No encoding detected")
        return None

    encoding = result["encoding"]
    confidence = result.get("confidence") or 0.0
    logger.debug(f"chardet detected encoding: {encoding} (confidence: {confidence:.2f})")

    if confidence >= confidence_threshold:
        return encoding

    logger.debug(f"chardet confidence {confidence:.2f} below threshold {confidence_threshold}")
    return None


def decode_text(
    data: bytes,
    fallback_encodings: list[str] | None = None,
    confidence_threshold: float = 0.7,
) -> tuple[str, str]:
    """Decode binary data as text, reporting the encoding used.

    Attempts, in order:
    1. UTF-8 with BOM when the data starts with a UTF-8 byte order mark
    2. Strict UTF-8
    3. chardet-based detection
    4. Fallback encodings (default: ``['latin-1']``, which accepts any byte)

    Parameters
    ----------
    data : bytes
        Binary data to decode
    fallback_encodings : list[str] | None, default None
        Encodings to try after detection fails
    confidence_threshold : float, default 0.7
        Minimum chardet confidence

    Returns
    -------
    tuple[str, str]
        Decoded text and the name of the encoding that produced it

    Examples
    --------
    >>> decode_text("naïve".encode("utf-8"))
    ('naïve', 'utf-8')

    """
    if fallback_encodings is None:
        fallback_encodings = ["latin-1"]

    if data.startswith(codecs.BOM_UTF8):
        return data.decode("utf-8-sig"), "utf-8-sig"

    try:
        return data.decode("utf-8"), "utf-8"
    except UnicodeDecodeError as e:
        logger.debug(f"Content is not valid UTF-8: {e}")

    detected = detect_encoding(data, confidence_threshold=confidence_threshold)
    if detected:
        try:
            return data.decode(detected), detected.lower()
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Failed to decode with chardet-detected encoding {detected}: {e}")

    for encoding in fallback_encodings:
        try:
            return data.decode(encoding), encoding
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Failed to decode with {encoding}: {e}")

    logger.warning("All encoding attempts failed, using utf-8 with error replacement")
    return data.decode("utf-8", errors="replace"), "utf-8"
