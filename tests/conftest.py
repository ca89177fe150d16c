"""Pytest configuration and shared fixtures for the filebatch test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging
import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from filebatch.constants import (
    ENV_CONFIG_PATH,
    ENV_NO_COLOR,
    ENV_OUTPUT_DIR,
    ENV_TRANSFORM,
    ENV_VERBOSE,
    ENV_WORKERS,
    ENV_XDG_CONFIG_HOME,
)

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))

FILEBATCH_ENV_VARS = (
    ENV_CONFIG_PATH,
    ENV_OUTPUT_DIR,
    ENV_VERBOSE,
    ENV_TRANSFORM,
    ENV_WORKERS,
    ENV_NO_COLOR,
)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests - full pipeline tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path_factory):
    """Keep the user's configuration and FILEBATCH_* variables out of tests.

    ``XDG_CONFIG_HOME`` points at an empty directory so the default config
    path never exists unless a test creates it.
    """
    for name in FILEBATCH_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv(ENV_XDG_CONFIG_HOME, str(config_home))
    yield config_home
    # configure_logging replaces root handlers; restore a clean root logger
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)


@pytest.fixture
def sample_files(tmp_path: Path) -> list[Path]:
    """Create three small text files with known content.

    Returns
    -------
    list of Path
        ``a.txt`` (2 lines), ``b.txt`` (1 unterminated line) and ``c.md``
        (empty), in that order

    """
    a = tmp_path / "a.txt"
    a.write_text("alpha\nbeta\n", encoding="utf-8")
    b = tmp_path / "b.txt"
    b.write_text("gamma", encoding="utf-8")
    c = tmp_path / "c.md"
    c.write_text("", encoding="utf-8")
    return [a, b, c]


@pytest.fixture
def nested_tree(tmp_path: Path) -> Path:
    """Create a directory tree for recursive discovery tests.

    Layout::

        tree/
          top.txt
          sub/
            inner.txt
            deeper/
              leaf.log

    """
    root = tmp_path / "tree"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "top.txt").write_text("top\n", encoding="utf-8")
    (root / "sub" / "inner.txt").write_text("inner\n", encoding="utf-8")
    (root / "sub" / "deeper" / "leaf.log").write_text("leaf\n", encoding="utf-8")
    return root
