#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration resolution for filebatch.

This module merges the four configuration sources into one immutable
``Settings`` value. Sources are applied in increasing order of priority:

1. Built-in defaults
2. Configuration file (explicit ``--config`` path, else ``FILEBATCH_CONFIG``,
   else ``$XDG_CONFIG_HOME/filebatch/config.toml``)
3. Environment variables
4. Command-line flags the user explicitly provided

Configuration problems never abort a run. A missing config file is skipped
silently and an unreadable one is reported as a warning while the remaining
layers still apply.
"""

import json
import logging
import os
import sys
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, List, Mapping, Optional

import yaml

from filebatch.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_RETRIES,
    DEFAULT_TRANSFORM,
    DEFAULT_WORKERS,
    ENV_CONFIG_PATH,
    ENV_NO_COLOR,
    ENV_OUTPUT_DIR,
    ENV_TRANSFORM,
    ENV_VERBOSE,
    ENV_WORKERS,
    ENV_XDG_CONFIG_HOME,
    FALSY_VALUES,
    OUTPUT_FORMATS,
    TRUTHY_VALUES,
)
from filebatch.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Alternate spellings accepted in config files
KEY_ALIASES = {
    "format": "output_format",
}


@dataclass(frozen=True)
class Settings:
    """Fully merged, immutable configuration for one invocation.

    Parameters
    ----------
    output_dir : str, optional
        Directory that receives the result file when no explicit output is given
    output : str, optional
        Explicit result file path
    transform : str, default "hash"
        Name of the transform applied to every file
    recursive : bool, default False
        Descend into directories given as inputs
    verbose : bool, default False
        Enable debug logging
    quiet : bool, default False
        Suppress progress, summaries and warnings
    output_format : str, optional
        Explicit output format (table, json, yaml, csv); auto-detected when unset
    color : bool, default True
        Allow ANSI colors in human-readable output
    workers : int, default 1
        Number of worker threads used for transforms
    retries : int, default 0
        Additional attempts for reads that fail with an OS error

    """

    output_dir: Optional[str] = None
    output: Optional[str] = None
    transform: str = DEFAULT_TRANSFORM
    recursive: bool = False
    verbose: bool = False
    quiet: bool = False
    output_format: Optional[str] = None
    color: bool = True
    workers: int = DEFAULT_WORKERS
    retries: int = DEFAULT_RETRIES

    def to_dict(self) -> Dict[str, Any]:
        """Return the settings as a plain dictionary."""
        return asdict(self)


SETTING_NAMES: tuple[str, ...] = tuple(f.name for f in fields(Settings))

_BOOL_SETTINGS = frozenset({"recursive", "verbose", "quiet", "color"})
_INT_SETTINGS = frozenset({"workers", "retries"})


@dataclass(frozen=True)
class ConfigResolution:
    """Outcome of configuration resolution.

    Attributes
    ----------
    settings : Settings
        The effective settings
    warnings : list of str
        Non-fatal problems found while reading config sources
    config_path : Path
        Config file path that was consulted
    config_loaded : bool
        True when the config file existed and parsed successfully
    sources : dict
        Maps every setting name to the layer that supplied its value

    """

    settings: Settings
    config_path: Path
    config_loaded: bool = False
    warnings: List[str] = field(default_factory=list)
    sources: Dict[str, str] = field(default_factory=dict)


def parse_bool(value: Any) -> bool:
    """Parse a boolean from a config or environment value.

    Raises
    ------
    ValueError
        If the value is not a recognizable boolean

    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUTHY_VALUES:
            return True
        if lowered in FALSY_VALUES:
            return False
    raise ValueError(f"expected a boolean, got {value!r}")


def coerce_setting(key: str, value: Any) -> Any:
    """Coerce a raw value into the type of the named setting.

    Parameters
    ----------
    key : str
        Setting name (must be one of ``SETTING_NAMES``)
    value : Any
        Raw value from a config file, environment variable or flag

    Returns
    -------
    Any
        Value with the setting's type

    Raises
    ------
    ValueError
        If the value cannot be converted or is out of range

    """
    if key in _BOOL_SETTINGS:
        return parse_bool(value)

    if key in _INT_SETTINGS:
        if isinstance(value, bool):
            raise ValueError(f"expected an integer, got {value!r}")
        try:
            number = int(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"expected an integer, got {value!r}") from e
        minimum = 1 if key == "workers" else 0
        if number < minimum:
            raise ValueError(f"must be >= {minimum}, got {number}")
        return number

    if isinstance(value, (dict, list, tuple, set)):
        raise ValueError(f"expected a scalar value, got {type(value).__name__}")

    text = str(value)
    if key == "output_format":
        text = text.lower()
        if text not in OUTPUT_FORMATS:
            raise ValueError(f"must be one of {', '.join(OUTPUT_FORMATS)}, got {value!r}")
    return text


def overlay(
    base: Settings,
    values: Mapping[str, Any],
    source: str,
    sources: Optional[Dict[str, str]] = None,
    warnings: Optional[List[str]] = None,
) -> Settings:
    """Overlay a mapping of raw values on top of existing settings.

    Keys whose value is ``None`` fall through to ``base``. Unknown keys and
    values that fail coercion are reported in ``warnings`` and skipped.

    Parameters
    ----------
    base : Settings
        Settings from lower-priority layers
    values : Mapping[str, Any]
        Raw values from this layer
    source : str
        Name of this layer ("file", "env" or "flag")
    sources : dict, optional
        Updated in place with the source of every applied key
    warnings : list, optional
        Extended in place with problems found in this layer

    Returns
    -------
    Settings
        New settings with this layer applied

    """
    accepted: Dict[str, Any] = {}

    for raw_key, raw_value in values.items():
        if raw_value is None:
            continue

        key = str(raw_key).replace("-", "_")
        key = KEY_ALIASES.get(key, key)

        if key not in SETTING_NAMES:
            if warnings is not None:
                warnings.append(f"Ignoring unknown {source} setting '{raw_key}'")
            continue

        try:
            accepted[key] = coerce_setting(key, raw_value)
        except ValueError as e:
            if warnings is not None:
                warnings.append(f"Ignoring invalid {source} setting '{raw_key}': {e}")
            continue

        if sources is not None:
            sources[key] = source

    return replace(base, **accepted)


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the per-user default configuration file path.

    Uses ``$XDG_CONFIG_HOME/filebatch/config.toml`` when the variable is set,
    otherwise ``~/.config/filebatch/config.toml``.
    """
    env = os.environ if environ is None else environ
    xdg_home = env.get(ENV_XDG_CONFIG_HOME)
    base = Path(xdg_home).expanduser() if xdg_home else Path.home() / ".config"
    return base / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def resolve_config_path(
    explicit_path: Optional[str | Path] = None, environ: Optional[Mapping[str, str]] = None
) -> Path:
    """Pick the configuration file path to consult.

    Priority order (highest to lowest):
    1. Explicit config file path (--config flag)
    2. Environment variable config path (FILEBATCH_CONFIG)
    3. Default per-user config path

    """
    env = os.environ if environ is None else environ

    if explicit_path:
        return Path(explicit_path).expanduser()

    env_path = env.get(ENV_CONFIG_PATH)
    if env_path:
        return Path(env_path).expanduser()

    return default_config_path(env)


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a TOML, JSON or YAML file.

    The format is chosen by file extension: ``.toml`` is loaded as TOML,
    ``.json`` as JSON and ``.yaml``/``.yml`` as YAML.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration mapping loaded from file

    Raises
    ------
    ConfigurationError
        If the file cannot be read, parsed, or has an invalid structure

    Examples
    --------
    >>> config = load_config_file("~/.config/filebatch/config.toml")
    >>> print(config.get("transform"))
    hash

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file does not exist: {config_path}", config_path=str(config_path))

    if not config_path.is_file():
        raise ConfigurationError(f"Configuration path is not a file: {config_path}", config_path=str(config_path))

    ext = config_path.suffix.lower()

    if ext == ".toml":
        return _load_toml_config(config_path)
    elif ext in (".yaml", ".yml"):
        return _load_yaml_config(config_path)
    elif ext == ".json":
        return _load_json_config(config_path)
    raise ConfigurationError(
        f"Unsupported config file format: {ext or '(none)'}. Use .toml, .json, or .yaml",
        config_path=str(config_path),
    )


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Error reading TOML config {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Error reading JSON config {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e

    if not isinstance(config, dict):
        raise ConfigurationError(
            f"JSON config file must contain an object, got {type(config).__name__}", config_path=str(config_path)
        )
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Error reading YAML config {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e

    # An empty YAML document is an empty config
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"YAML config file must contain a mapping, got {type(config).__name__}", config_path=str(config_path)
        )
    return config


def read_env_settings(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect raw setting values from environment variables.

    Unset and empty variables are skipped so they never mask a value
    provided by the config file.
    """
    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    for env_key, setting in (
        (ENV_OUTPUT_DIR, "output_dir"),
        (ENV_VERBOSE, "verbose"),
        (ENV_TRANSFORM, "transform"),
        (ENV_WORKERS, "workers"),
    ):
        raw = env.get(env_key)
        if raw is None or not raw.strip():
            continue
        values[setting] = raw.strip()

    # NO_COLOR disables color for any non-empty value
    if env.get(ENV_NO_COLOR):
        values["color"] = False

    return values


def resolve_settings(
    flags: Optional[Mapping[str, Any]] = None,
    config_path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ConfigResolution:
    """Merge defaults, config file, environment and flags into Settings.

    Parameters
    ----------
    flags : Mapping[str, Any], optional
        Values of the command-line flags the user explicitly provided
    config_path : str or Path, optional
        Explicit configuration file path (--config)
    environ : Mapping[str, str], optional
        Environment to read; defaults to ``os.environ``

    Returns
    -------
    ConfigResolution
        Effective settings with per-key sources and collected warnings

    Examples
    --------
    >>> resolution = resolve_settings({"transform": "lines"})
    >>> resolution.settings.transform
    'lines'
    >>> resolution.sources["transform"]
    'flag'

    """
    env = os.environ if environ is None else environ
    warnings: List[str] = []
    sources: Dict[str, str] = {name: "default" for name in SETTING_NAMES}

    settings = Settings()

    path = resolve_config_path(config_path, env)
    config_loaded = False
    if path.exists():
        try:
            file_values = load_config_file(path)
        except ConfigurationError as e:
            warnings.append(f"{e.message}; using defaults instead")
        else:
            settings = overlay(settings, file_values, "file", sources, warnings)
            config_loaded = True
            logger.debug("Loaded configuration from %s", path)
    else:
        logger.debug("No configuration file at %s", path)

    settings = overlay(settings, read_env_settings(env), "env", sources, warnings)
    settings = overlay(settings, dict(flags or {}), "flag", sources, warnings)

    return ConfigResolution(
        settings=settings,
        config_path=path,
        config_loaded=config_loaded,
        warnings=warnings,
        sources=sources,
    )


def default_config_data() -> Dict[str, Any]:
    """Return the built-in defaults in a form suitable for a config file.

    Unset optional values are omitted because TOML has no null.
    """
    return {key: value for key, value in Settings().to_dict().items() if value is not None}


__all__ = [
    "Settings",
    "ConfigResolution",
    "SETTING_NAMES",
    "coerce_setting",
    "default_config_data",
    "default_config_path",
    "load_config_file",
    "overlay",
    "parse_bool",
    "read_env_settings",
    "resolve_config_path",
    "resolve_settings",
]
