"""End-to-end tests for CLI exit codes.

This module runs filebatch as a subprocess and checks that the exit codes
scripts rely on stay stable, and that results stay on stdout while
diagnostics go to stderr.
"""

import json
import subprocess
import sys

import pytest


@pytest.mark.e2e
@pytest.mark.slow
class TestExitCodes:
    """Test suite for CLI exit codes."""

    def _run_cli(self, args: list[str], input_text: str | None = None, cwd=None) -> subprocess.CompletedProcess:
        """Run the CLI with the given arguments.

        Parameters
        ----------
        args : list[str]
            Command-line arguments to pass to filebatch
        input_text : str, optional
            Text fed to standard input
        cwd : path-like, optional
            Working directory for the process

        Returns
        -------
        subprocess.CompletedProcess
            The result of the CLI execution

        """
        cmd = [sys.executable, "-m", "filebatch"] + args
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            input=input_text if input_text is not None else "",
            cwd=cwd,
        )

    def test_exit_code_success(self, sample_files):
        """Exit code 0 and one JSON record per file on stdout."""
        result = self._run_cli(["process", *map(str, sample_files)])

        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert len(data) == 3
        assert "Batch Summary" in result.stderr

    def test_exit_code_unknown_transform(self, sample_files):
        """Exit code 2 for a transform name that is not registered."""
        result = self._run_cli(["process", "--transform", "bogus", str(sample_files[0])])

        assert result.returncode == 2
        assert "Unknown transform" in result.stderr
        assert result.stdout == ""

    def test_exit_code_no_input(self):
        """Exit code 2 when no files are given."""
        result = self._run_cli(["process"])

        assert result.returncode == 2
        assert "No input files given" in result.stderr

    def test_exit_code_no_command(self):
        """Exit code 2 without a command."""
        result = self._run_cli([])

        assert result.returncode == 2

    def test_exit_code_all_inputs_missing(self, tmp_path):
        """Exit code 1 when every input is filtered out."""
        result = self._run_cli(["process", str(tmp_path / "a.missing"), str(tmp_path / "*.none")])

        assert result.returncode == 1
        assert "Path does not exist" in result.stderr
        assert "Pattern matched no files" in result.stderr

    def test_exit_code_refuses_overwrite_non_interactive(self, sample_files, tmp_path):
        """Exit code 1 and an untouched file when overwrite cannot be confirmed."""
        target = tmp_path / "results.json"
        target.write_text("precious")

        result = self._run_cli(["process", "-o", str(target), "--no-input", str(sample_files[0])])

        assert result.returncode == 1
        assert target.read_text() == "precious"
        assert "--force" in result.stderr

    def test_force_overwrites(self, sample_files, tmp_path):
        """--force replaces an existing result file."""
        target = tmp_path / "results.json"
        target.write_text("stale")

        result = self._run_cli(["process", "-o", str(target), "--force", "-t", "lines", str(sample_files[0])])

        assert result.returncode == 0
        assert json.loads(target.read_text())[0]["line_count"] == 2

    def test_dry_run_lists_files(self, sample_files):
        """--dry-run prints the file set and applies nothing."""
        result = self._run_cli(["process", "--dry-run", *map(str, sample_files)])

        assert result.returncode == 0
        assert json.loads(result.stdout) == [str(path) for path in sample_files]
        assert "3 file(s) would be processed" in result.stderr

    def test_stdin_list(self, sample_files, tmp_path):
        """--stdin reads paths from standard input."""
        listing = "\n".join(path.name for path in sample_files) + "\n"

        result = self._run_cli(["process", "--stdin", "-t", "size", "-q"], input_text=listing, cwd=tmp_path)

        assert result.returncode == 0
        assert [row["size_bytes"] for row in json.loads(result.stdout)] == [11, 5, 0]
        assert result.stderr == ""

    def test_exit_code_config_init_unwritable(self, tmp_path):
        """Exit code 78 when the configuration file cannot be written."""
        blocker = tmp_path / "file"
        blocker.write_text("")

        result = self._run_cli(["config", "init", "--path", str(blocker / "config.toml")])

        assert result.returncode == 78
        assert "Cannot write configuration file" in result.stderr

    def test_invalid_config_warns_and_continues(self, sample_files, tmp_path):
        """A broken config file is reported and defaults are used."""
        config = tmp_path / "broken.toml"
        config.write_text("[[[")

        result = self._run_cli(["process", "--config", str(config), str(sample_files[0])])

        assert result.returncode == 0
        assert "using defaults instead" in result.stderr
        assert json.loads(result.stdout)[0]["transform"] == "hash"

    def test_version(self):
        """--version prints the program name."""
        result = self._run_cli(["--version"])

        assert result.returncode == 0
        assert result.stdout.startswith("filebatch ")
