"""Unit tests for the argument parser and exit code mapping."""

import pytest

from filebatch.cli.builder import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    EXIT_SUCCESS,
    EXIT_USAGE_ERROR,
    PROCESS_SETTING_ARGS,
    create_parser,
    get_exit_code_for_exception,
)
from filebatch.cli.custom_actions import get_provided_values
from filebatch.exceptions import (
    AbortedByUserError,
    ConfigurationError,
    EmptyFileSetError,
    FileBatchError,
    NoInputGivenError,
    UnknownTransformError,
)


@pytest.mark.unit
@pytest.mark.cli
class TestCreateParser:
    """Test parsing of the process and analyze commands."""

    def test_process_defaults_are_not_provided(self):
        args = create_parser().parse_args(["process", "a.txt"])
        assert args.command == "process"
        assert args.inputs == ["a.txt"]
        assert get_provided_values(args, PROCESS_SETTING_ARGS) == {}

    def test_typed_flags_are_tracked(self):
        args = create_parser().parse_args(
            ["process", "-t", "lines", "-r", "--no-color", "--workers", "4", "--retries", "0", "a.txt"]
        )
        assert get_provided_values(args, PROCESS_SETTING_ARGS) == {
            "transform": "lines",
            "recursive": True,
            "color": False,
            "workers": 4,
            "retries": 0,
        }

    def test_flag_matching_default_still_tracked(self):
        args = create_parser().parse_args(["process", "--transform", "hash", "x"])
        assert get_provided_values(args, ["transform"]) == {"transform": "hash"}

    def test_json_shorthand(self):
        args = create_parser().parse_args(["process", "--json", "x"])
        assert get_provided_values(args, ["output_format"]) == {"output_format": "json"}

    def test_format_and_json_are_exclusive(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["process", "--json", "--format", "csv", "x"])
        assert exc_info.value.code == EXIT_USAGE_ERROR

    def test_unknown_format_rejected(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["process", "--format", "xml", "x"])
        assert exc_info.value.code == EXIT_USAGE_ERROR

    @pytest.mark.parametrize("argv", [["--workers", "0"], ["--workers", "two"], ["--retries", "-1"]])
    def test_bounded_ints(self, capsys, argv):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["process", *argv, "x"])
        assert exc_info.value.code == EXIT_USAGE_ERROR
        assert "argument" in capsys.readouterr().err

    def test_analyze_has_no_transform_flag(self, capsys):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["analyze", "--transform", "lines", "x"])

    def test_process_only_flags(self):
        args = create_parser().parse_args(["process", "--dry-run", "--force", "--no-input", "--stdin"])
        assert args.dry_run and args.force and args.no_input and args.stdin
        assert args.inputs == []

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("filebatch ")


@pytest.mark.unit
class TestExitCodes:
    """Test the exception to exit code mapping."""

    @pytest.mark.parametrize(
        "exception, expected",
        [
            (KeyboardInterrupt(), EXIT_INTERRUPTED),
            (AbortedByUserError(), EXIT_SUCCESS),
            (NoInputGivenError(), EXIT_USAGE_ERROR),
            (UnknownTransformError("bogus", ["hash"]), EXIT_USAGE_ERROR),
            (ConfigurationError("bad"), EXIT_CONFIG_ERROR),
            (EmptyFileSetError(), EXIT_ERROR),
            (FileBatchError("boom"), EXIT_ERROR),
            (RuntimeError("boom"), EXIT_ERROR),
        ],
    )
    def test_mapping(self, exception, expected):
        assert get_exit_code_for_exception(exception) == expected
