"""Unit tests for input file discovery."""

import io
import os
import socket
import sys
from pathlib import Path

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from filebatch.exceptions import EmptyFileSetError, NoInputGivenError, UsageError
from filebatch.fileset import has_glob_pattern, read_path_list, resolve_file_set


@pytest.mark.unit
class TestGlobDetection:
    """Test wildcard detection."""

    @pytest.mark.parametrize("spec", ["*.txt", "file?.md", "data[0-9].csv", "**/x"])
    def test_patterns(self, spec):
        assert has_glob_pattern(spec)

    @pytest.mark.parametrize("spec", ["plain.txt", "dir/sub/file", ""])
    def test_literals(self, spec):
        assert not has_glob_pattern(spec)


@pytest.mark.unit
class TestResolveFileSet:
    """Test resolution of literal paths, globs and directories."""

    def test_missing_file_dropped_with_warning(self, tmp_path):
        (tmp_path / "a.txt").write_text("a")
        result = resolve_file_set(["a.txt", "missing.txt"], cwd=tmp_path)

        assert result.files == [tmp_path / "a.txt"]
        assert result.warnings == ["Path does not exist: missing.txt"]

    def test_paths_are_absolute(self, sample_files, tmp_path):
        result = resolve_file_set(["a.txt"], cwd=tmp_path)
        assert result.files[0].is_absolute()

    def test_order_preserved(self, sample_files, tmp_path):
        result = resolve_file_set(["c.md", "a.txt", "b.txt"], cwd=tmp_path)
        assert [p.name for p in result.files] == ["c.md", "a.txt", "b.txt"]

    def test_duplicates_removed_first_wins(self, sample_files, tmp_path):
        result = resolve_file_set(
            ["b.txt", str(tmp_path / "a.txt"), "./b.txt", "a.txt", "sub/../a.txt"], cwd=tmp_path
        )
        assert [p.name for p in result.files] == ["b.txt", "a.txt"]
        assert result.warnings == []

    def test_glob_expansion_sorted(self, sample_files, tmp_path):
        result = resolve_file_set(["*.txt"], cwd=tmp_path)
        assert [p.name for p in result.files] == ["a.txt", "b.txt"]

    def test_glob_without_match_warns(self, sample_files, tmp_path):
        result = resolve_file_set(["a.txt", "*.pdf"], cwd=tmp_path)
        assert len(result.files) == 1
        assert result.warnings == ["Pattern matched no files: *.pdf"]

    def test_glob_overlapping_literal(self, sample_files, tmp_path):
        result = resolve_file_set(["b.txt", "*.txt"], cwd=tmp_path)
        assert [p.name for p in result.files] == ["b.txt", "a.txt"]

    def test_directory_without_recursive_warns(self, nested_tree, tmp_path):
        (tmp_path / "keep.txt").write_text("k")
        result = resolve_file_set(["tree", "keep.txt"], cwd=tmp_path)
        assert [p.name for p in result.files] == ["keep.txt"]
        assert len(result.warnings) == 1
        assert "use --recursive" in result.warnings[0]

    def test_directory_recursive(self, nested_tree, tmp_path):
        result = resolve_file_set(["tree"], recursive=True, cwd=tmp_path)
        relative = [p.relative_to(nested_tree).as_posix() for p in result.files]
        assert relative == ["top.txt", "sub/inner.txt", "sub/deeper/leaf.log"]

    def test_recursive_dedup_with_literal(self, nested_tree, tmp_path):
        result = resolve_file_set(["tree/sub/inner.txt", "tree"], recursive=True, cwd=tmp_path)
        names = [p.name for p in result.files]
        assert names[0] == "inner.txt"
        assert names.count("inner.txt") == 1
        assert len(names) == 3

    def test_recursive_glob(self, nested_tree, tmp_path):
        result = resolve_file_set(["tree/**/*.txt"], cwd=tmp_path)
        assert sorted(p.name for p in result.files) == ["inner.txt", "top.txt"]

    def test_home_expansion(self, monkeypatch, tmp_path):
        (tmp_path / "home.txt").write_text("h")
        monkeypatch.setenv("HOME", str(tmp_path))
        result = resolve_file_set(["~/home.txt"], cwd=Path("/"))
        assert result.files == [tmp_path / "home.txt"]

    @pytest.mark.skipif(sys.platform == "win32", reason="FIFOs require POSIX")
    def test_fifo_skipped(self, tmp_path):
        fifo = tmp_path / "pipe"
        os.mkfifo(fifo)
        (tmp_path / "a.txt").write_text("a")
        result = resolve_file_set(["pipe", "a.txt"], cwd=tmp_path)
        assert [p.name for p in result.files] == ["a.txt"]
        assert result.warnings == ["Skipping non-regular file: pipe"]

    @pytest.mark.skipif(sys.platform == "win32", reason="FIFOs and symlinks require POSIX")
    def test_recursive_walk_warns_for_dropped_entries(self, tmp_path):
        root = tmp_path / "mixed"
        root.mkdir()
        (root / "ok.txt").write_text("ok")
        (root / "dangling").symlink_to(root / "gone.txt")
        os.mkfifo(root / "pipe")

        result = resolve_file_set(["mixed"], recursive=True, cwd=tmp_path)

        assert result.files == [root / "ok.txt"]
        assert result.warnings == [
            f"Path does not exist: {root / 'dangling'}",
            f"Skipping non-regular file: {root / 'pipe'}",
        ]

    @pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="Unix sockets not available")
    def test_socket_skipped(self, tmp_path):
        (tmp_path / "a.txt").write_text("a")
        sock_path = tmp_path / "s.sock"
        server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            server.bind(str(sock_path))
            result = resolve_file_set(["s.sock", "a.txt"], cwd=tmp_path)
        finally:
            server.close()
        assert [p.name for p in result.files] == ["a.txt"]
        assert "non-regular" in result.warnings[0]

    def test_empty_specs_raise_usage_error(self):
        with pytest.raises(NoInputGivenError):
            resolve_file_set([])
        assert issubclass(NoInputGivenError, UsageError)

    def test_blank_specs_count_as_empty(self):
        with pytest.raises(NoInputGivenError):
            resolve_file_set(["", ""])

    def test_everything_filtered_raises(self, tmp_path):
        with pytest.raises(EmptyFileSetError) as exc_info:
            resolve_file_set(["nope.txt", "*.none"], cwd=tmp_path)
        assert exc_info.value.warnings == ["Pattern matched no files: *.none", "Path does not exist: nope.txt"]

    def test_len(self, sample_files, tmp_path):
        assert len(resolve_file_set(["*"], cwd=tmp_path)) == 3

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(st.lists(st.sampled_from(["a.txt", "b.txt", "c.md", "./a.txt", "*.txt", "missing"]), min_size=1))
    def test_no_duplicates_first_seen_order(self, tmp_path_factory, specs):
        directory = tmp_path_factory.mktemp("dedup")
        for name in ("a.txt", "b.txt", "c.md"):
            (directory / name).write_text(name)

        try:
            result = resolve_file_set(specs, cwd=directory)
        except EmptyFileSetError:
            assert all(spec == "missing" for spec in specs)
            return

        assert len(result.files) == len(set(result.files))
        # Each file appears at the position of its first mention
        first_seen: list[str] = []
        for spec in specs:
            names = ["a.txt", "b.txt"] if spec == "*.txt" else [spec.lstrip("./")] if spec != "missing" else []
            for name in names:
                if name not in first_seen:
                    first_seen.append(name)
        assert [p.name for p in result.files] == first_seen


@pytest.mark.unit
class TestReadPathList:
    """Test reading a path list from a stream."""

    def test_skips_blank_and_comments(self):
        stream = io.StringIO("a.txt\n\n  # comment\n  b.txt  \n#c.txt\n")
        assert read_path_list(stream) == ["a.txt", "b.txt"]

    def test_empty_stream(self):
        assert read_path_list(io.StringIO("")) == []
