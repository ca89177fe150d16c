#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for filebatch.

This module centralizes the hardcoded values used across filebatch:
environment variable names, configuration file locations, output format
names and the defaults every setting falls back to.

Constants are organized by category:
1. Type Definitions - Literal types shared by several modules
2. Environment Variables - Names consulted during configuration resolution
3. Configuration Files - Default locations and supported extensions
4. Processing Defaults - Built-in values for every setting
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

OutputFormat = Literal["table", "json", "yaml", "csv"]
SettingSource = Literal["default", "file", "env", "flag"]

OUTPUT_FORMATS: tuple[str, ...] = ("table", "json", "yaml", "csv")

# File extensions used when writing results into an output directory
OUTPUT_FORMAT_EXTENSIONS: dict[str, str] = {
    "table": "txt",
    "json": "json",
    "yaml": "yaml",
    "csv": "csv",
}

# =============================================================================
# Environment Variables
# =============================================================================

ENV_PREFIX = "FILEBATCH_"
ENV_CONFIG_PATH = "FILEBATCH_CONFIG"
ENV_OUTPUT_DIR = "FILEBATCH_OUTPUT_DIR"
ENV_VERBOSE = "FILEBATCH_VERBOSE"
ENV_TRANSFORM = "FILEBATCH_TRANSFORM"
ENV_WORKERS = "FILEBATCH_WORKERS"
ENV_NO_COLOR = "NO_COLOR"
ENV_XDG_CONFIG_HOME = "XDG_CONFIG_HOME"

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on", "y"})
FALSY_VALUES = frozenset({"0", "false", "no", "off", "n"})

# =============================================================================
# Configuration Files
# =============================================================================

CONFIG_DIR_NAME = "filebatch"
CONFIG_FILE_NAME = "config.toml"
CONFIG_EXTENSIONS: tuple[str, ...] = (".toml", ".json", ".yaml", ".yml")

# =============================================================================
# Processing Defaults
# =============================================================================

DEFAULT_TRANSFORM = "hash"
DEFAULT_HASH_ALGORITHM = "sha256"
DEFAULT_WORKERS = 1
DEFAULT_RETRIES = 0
DEFAULT_RETRY_BACKOFF = 0.1

# Chunk size for streaming file content through hash functions
READ_CHUNK_SIZE = 64 * 1024

# Width of the progress bar between the brackets
DEFAULT_PROGRESS_WIDTH = 30

# Glob wildcard characters that trigger pattern expansion
GLOB_CHARACTERS = "*?["

# Name stem for result files written into an output directory
RESULT_FILE_STEM = "filebatch"
