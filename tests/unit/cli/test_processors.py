"""Unit tests for batch orchestration."""

import io
import json
import threading
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from filebatch.cli.builder import create_parser
from filebatch.cli.processors import (
    BatchOutcome,
    resolve_destination,
    run_batch,
    run_process,
    summarize_sizes,
)
from filebatch.cli.progress import ProgressContext
from filebatch.config import Settings
from filebatch.results import LinesResult, SizeResult, TransformFailure
from filebatch.transforms import TransformSpec, transform_registry


@pytest.mark.unit
class TestRunBatch:
    """Test sequential and threaded batch runs."""

    def test_results_in_file_order(self, sample_files):
        outcome = run_batch(sample_files, transform_registry.get("lines"))
        assert [result.path for result in outcome.results] == sample_files
        assert [result.line_count for result in outcome.results] == [2, 1, 0]
        assert outcome.total == 3
        assert outcome.interrupted is False

    def test_failure_does_not_stop_batch(self, sample_files, tmp_path):
        files = [sample_files[0], tmp_path / "vanished.txt", sample_files[1]]
        outcome = run_batch(files, transform_registry.get("hash"))
        assert [result.ok for result in outcome.results] == [True, False, True]
        assert outcome.failed == 1
        assert outcome.succeeded == 2

    def test_threaded_keeps_order(self, tmp_path):
        files = []
        for index in range(8):
            path = tmp_path / f"f{index}.txt"
            path.write_text("x\n" * index)
            files.append(path)

        def slow_first(path: Path) -> LinesResult:
            # Early files finish last
            time.sleep(0.01 * (8 - int(path.stem[1:])))
            return LinesResult(path=path, line_count=int(path.stem[1:]))

        outcome = run_batch(files, TransformSpec("slow", slow_first), workers=4)

        assert [result.path for result in outcome.results] == files
        assert [result.line_count for result in outcome.results] == list(range(8))

    def test_threaded_uses_multiple_threads(self, sample_files):
        seen = set()

        def record(path: Path) -> LinesResult:
            seen.add(threading.current_thread().name)
            time.sleep(0.02)
            return LinesResult(path=path, line_count=0)

        run_batch(sample_files, TransformSpec("record", record), workers=3)
        assert all(name.startswith("filebatch") for name in seen)

    def test_interrupt_returns_partial_results(self, sample_files):
        calls = []

        def interrupt_on_second(path: Path) -> LinesResult:
            calls.append(path)
            if len(calls) == 2:
                raise KeyboardInterrupt
            return LinesResult(path=path, line_count=1)

        outcome = run_batch(sample_files, TransformSpec("stop", interrupt_on_second))

        assert outcome.interrupted is True
        assert [result.path for result in outcome.results] == sample_files[:1]
        assert outcome.total == 3

    def test_progress_advanced_per_file(self, sample_files):
        progress = ProgressContext(enabled=False, total=3)
        run_batch(sample_files, transform_registry.get("size"), progress=progress)
        assert progress.completed == 3
        assert progress.percent == 100

    def test_failure_logged_above_progress(self, tmp_path):
        stream = io.StringIO()
        with ProgressContext(enabled=True, total=1, stream=stream) as progress:
            run_batch([tmp_path / "gone"], transform_registry.get("hash"), progress=progress)
        assert f"[ERROR] {tmp_path / 'gone'}" in stream.getvalue()


@pytest.mark.unit
class TestBatchOutcome:
    """Test derived counts."""

    def test_counts(self):
        outcome = BatchOutcome(
            results=[
                LinesResult(path=Path("/a"), line_count=1),
                TransformFailure(path=Path("/b"), transform="lines", error="x"),
            ],
            total=2,
        )
        assert (outcome.succeeded, outcome.failed) == (1, 1)


@pytest.mark.unit
class TestSummarizeSizes:
    """Test the analyze aggregation."""

    def test_aggregates(self):
        results = [
            SizeResult(path=Path("/d/a.txt"), size_bytes=10, modified_timestamp=100.0),
            SizeResult(path=Path("/d/b.TXT"), size_bytes=5, modified_timestamp=300.0),
            SizeResult(path=Path("/d/Makefile"), size_bytes=20, modified_timestamp=200.0),
            TransformFailure(path=Path("/d/gone"), transform="size", error="No such file or directory"),
        ]

        summary = summarize_sizes(results)

        assert summary["files"] == 3
        assert summary["total_bytes"] == 35
        assert summary["largest"] == {"path": "/d/Makefile", "size_bytes": 20}
        assert summary["newest"]["path"] == "/d/b.TXT"
        assert summary["newest"]["modified"] == "1970-01-01T00:05:00+00:00"
        assert summary["extensions"] == {"(none)": {"count": 1, "bytes": 20}, "txt": {"count": 2, "bytes": 15}}
        assert summary["failures"] == [{"path": "/d/gone", "error": "No such file or directory"}]

    def test_empty(self):
        summary = summarize_sizes([])
        assert summary["files"] == 0
        assert summary["largest"] is None
        assert summary["newest"] is None
        assert summary["extensions"] == {}


@pytest.mark.unit
class TestResolveDestination:
    """Test where results are written."""

    def test_stdout_by_default(self):
        assert resolve_destination(Settings()) is None

    def test_explicit_output(self, tmp_path):
        settings = Settings(output=str(tmp_path / "r.csv"), output_dir=str(tmp_path / "ignored"))
        assert resolve_destination(settings) == tmp_path / "r.csv"

    def test_output_dir_defaults_to_json(self, tmp_path):
        settings = Settings(output_dir=str(tmp_path), transform="lines")
        assert resolve_destination(settings) == tmp_path / "filebatch-lines.json"

    def test_output_dir_uses_format_extension(self, tmp_path):
        settings = Settings(output_dir=str(tmp_path), transform="size", output_format="yaml")
        assert resolve_destination(settings) == tmp_path / "filebatch-size.yaml"


@pytest.mark.unit
@pytest.mark.cli
class TestRunProcess:
    """Test the process command without a subprocess."""

    def _parse(self, *argv):
        return create_parser().parse_args(["process", *argv])

    def test_dry_run_never_transforms(self, sample_files, capsys):
        args = self._parse("--dry-run", "--json", *map(str, sample_files))
        with patch("filebatch.cli.processors.apply_transform") as mock_apply:
            assert run_process(args) == 0
        mock_apply.assert_not_called()
        captured = capsys.readouterr()
        assert json.loads(captured.out) == [str(path) for path in sample_files]
        assert "Dry run: 3 file(s) would be processed with 'hash'" in captured.err

    def test_unknown_transform(self, sample_files, capsys):
        assert run_process(self._parse("-t", "bogus", str(sample_files[0]))) == 2
        assert "Unknown transform: 'bogus'" in capsys.readouterr().err

    def test_writes_to_output_dir(self, sample_files, tmp_path, capsys):
        out_dir = tmp_path / "results"
        args = self._parse("-t", "lines", "--output-dir", str(out_dir), "--no-summary", *map(str, sample_files))
        assert run_process(args) == 0
        data = json.loads((out_dir / "filebatch-lines.json").read_text())
        assert [row["line_count"] for row in data] == [2, 1, 0]
        assert capsys.readouterr().out == ""

    def test_refuses_overwrite_without_prompt(self, sample_files, tmp_path, capsys):
        target = tmp_path / "out.json"
        target.write_text("keep")
        args = self._parse("-o", str(target), "--no-input", str(sample_files[0]))
        assert run_process(args) == 1
        assert target.read_text() == "keep"
        assert "use --force to overwrite" in capsys.readouterr().err

    def test_interactive_decline_exits_zero(self, sample_files, tmp_path, capsys):
        target = tmp_path / "out.json"
        target.write_text("keep")
        args = self._parse("-o", str(target), str(sample_files[0]))
        with patch("filebatch.cli.processors.is_interactive", return_value=True), patch(
            "filebatch.cli.processors.confirm", return_value=False
        ):
            assert run_process(args) == 0
        assert target.read_text() == "keep"
        assert "Aborted by user" in capsys.readouterr().err

    def test_quiet_suppresses_summary(self, sample_files, capsys):
        assert run_process(self._parse("-q", "--json", str(sample_files[0]))) == 0
        captured = capsys.readouterr()
        assert captured.err == ""
        assert json.loads(captured.out)[0]["status"] == "ok"
