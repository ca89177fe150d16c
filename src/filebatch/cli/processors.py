#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/filebatch/cli/processors.py
"""Batch orchestration for the ``process`` and ``analyze`` commands.

This is the only module that knows the order of a run: settings, logging,
inputs, transform validation, file set, dry run, overwrite confirmation,
transforms with progress, output, summary and exit code. Everything it
calls is a plain function over explicit arguments.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections import defaultdict
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from filebatch.cli.builder import (
    ANALYZE_SETTING_ARGS,
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    EXIT_SUCCESS,
    EXIT_USAGE_ERROR,
    PROCESS_SETTING_ARGS,
    get_exit_code_for_exception,
)
from filebatch.cli.confirm import confirm
from filebatch.cli.custom_actions import get_provided_values
from filebatch.cli.output import (
    format_file_list,
    format_mapping,
    format_results,
    is_interactive,
    resolve_output_format,
)
from filebatch.cli.progress import ProgressContext, SummaryRenderer
from filebatch.cli.timing import TimingContext
from filebatch.cli.validation import collect_argument_problems, report_validation_problems
from filebatch.config import ConfigResolution, Settings, resolve_settings
from filebatch.constants import OUTPUT_FORMAT_EXTENSIONS, RESULT_FILE_STEM
from filebatch.exceptions import AbortedByUserError, EmptyFileSetError, FileBatchError, UsageError
from filebatch.fileset import FileSetResult, read_path_list, resolve_file_set
from filebatch.logging_utils import configure_logging, resolve_log_level
from filebatch.results import SizeResult, TransformFailure, TransformResult
from filebatch.transforms import TransformSpec, apply_transform, transform_registry

logger = logging.getLogger(__name__)


@dataclass
class BatchOutcome:
    """Results of one batch run.

    Attributes
    ----------
    results : list of TransformResult
        One result per processed file, in file set order. When the batch
        was interrupted this holds only the files that finished.
    total : int
        Number of files in the batch
    interrupted : bool
        True when the run was stopped by Ctrl-C
    elapsed : float
        Wall time in seconds

    """

    results: List[TransformResult] = field(default_factory=list)
    total: int = 0
    interrupted: bool = False
    elapsed: float = 0.0

    @property
    def failed(self) -> int:
        """Number of failure results."""
        return sum(1 for result in self.results if not result.ok)

    @property
    def succeeded(self) -> int:
        """Number of success results."""
        return len(self.results) - self.failed


def _report_result(result: TransformResult, progress: ProgressContext) -> None:
    if not isinstance(result, TransformFailure):
        logger.debug(f"[OK] {result.path}")
        return

    message = f"[ERROR] {result.path}: {result.error}"
    if progress.enabled:
        progress.log(message)
    else:
        logger.warning(message)


def _run_sequential(
    files: Sequence[Path], spec: TransformSpec, retries: int, progress: ProgressContext, outcome: BatchOutcome
) -> None:
    for path in files:
        result = apply_transform(spec, path, retries=retries)
        outcome.results.append(result)
        _report_result(result, progress)
        progress.update()


def _run_threaded(
    files: Sequence[Path],
    spec: TransformSpec,
    retries: int,
    workers: int,
    progress: ProgressContext,
    outcome: BatchOutcome,
) -> None:
    # Results land in slots by index so output order never depends on timing
    slots: List[Optional[TransformResult]] = [None] * len(files)
    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="filebatch")
    try:
        futures: Dict[Future[TransformResult], int] = {
            executor.submit(apply_transform, spec, path, retries): index for index, path in enumerate(files)
        }
        for future in as_completed(futures):
            result = future.result()
            slots[futures[future]] = result
            _report_result(result, progress)
            progress.update()
    finally:
        # Queued tasks are dropped on interrupt; running ones finish
        executor.shutdown(wait=True, cancel_futures=True)
        outcome.results.extend(result for result in slots if result is not None)


def run_batch(
    files: Sequence[Path],
    spec: TransformSpec,
    workers: int = 1,
    retries: int = 0,
    progress: Optional[ProgressContext] = None,
) -> BatchOutcome:
    """Apply one transform to every file.

    A failing file never stops the batch. Ctrl-C stops dispatching new
    files and returns the results gathered so far with ``interrupted`` set.

    Parameters
    ----------
    files : sequence of Path
        Files in the order results should be reported
    spec : TransformSpec
        Transform to apply
    workers : int, default 1
        Worker threads; 1 runs sequentially in the calling thread
    retries : int, default 0
        Additional attempts for reads that fail with an OS error
    progress : ProgressContext, optional
        Progress bar updated once per finished file

    Returns
    -------
    BatchOutcome
        Ordered results with interruption flag and elapsed time

    """
    progress = progress or ProgressContext(enabled=False, total=len(files))
    outcome = BatchOutcome(total=len(files))

    with TimingContext(f"{spec.name} batch of {len(files)} file(s)", logger) as timer:
        try:
            if workers > 1 and len(files) > 1:
                _run_threaded(files, spec, retries, workers, progress, outcome)
            else:
                _run_sequential(files, spec, retries, progress, outcome)
        except KeyboardInterrupt:
            outcome.interrupted = True

    outcome.elapsed = timer.elapsed
    return outcome


def _resolve_run_settings(args: argparse.Namespace, setting_args: Sequence[str]) -> ConfigResolution:
    """Resolve settings and set up logging for a run."""
    resolution = resolve_settings(get_provided_values(args, setting_args), config_path=args.config)
    settings = resolution.settings

    configure_logging(resolve_log_level(settings.verbose, settings.quiet), log_file=getattr(args, "log_file", None))
    for warning in resolution.warnings:
        logger.warning(warning)
    return resolution


def _gather_input_specs(args: argparse.Namespace) -> List[str]:
    if args.stdin:
        return read_path_list(sys.stdin)
    return list(args.inputs or [])


def _resolve_files(args: argparse.Namespace, settings: Settings) -> FileSetResult:
    file_set = resolve_file_set(_gather_input_specs(args), recursive=settings.recursive)
    for warning in file_set.warnings:
        logger.warning(warning)
    return file_set


def _report_fatal(error: FileBatchError) -> int:
    if isinstance(error, EmptyFileSetError):
        for warning in error.warnings:
            logger.warning(warning)
    print(f"Error: {error.message}", file=sys.stderr)
    return get_exit_code_for_exception(error)


def resolve_destination(settings: Settings) -> Optional[Path]:
    """Return the result file path, or None for standard output.

    ``--output`` wins; otherwise an output directory yields
    ``<dir>/filebatch-<transform>.<ext>`` with the extension of the output
    format a file destination gets.
    """
    if settings.output:
        return Path(settings.output).expanduser()
    if settings.output_dir:
        output_format = resolve_output_format(settings.output_format, destination_is_interactive=False)
        extension = OUTPUT_FORMAT_EXTENSIONS[output_format]
        return Path(settings.output_dir).expanduser() / f"{RESULT_FILE_STEM}-{settings.transform}.{extension}"
    return None


def _check_overwrite(destination: Path, args: argparse.Namespace) -> None:
    """Ask before replacing an existing result file.

    Raises
    ------
    AbortedByUserError
        If the user answered no at the prompt
    FileBatchError
        If nobody could be asked and ``--force`` was not given

    """
    # With --stdin the input stream carries the file list, not answers
    interactive = not args.no_input and not args.stdin and is_interactive(sys.stdin)

    if confirm(f"Output file {destination} exists. Overwrite?", force=args.force, interactive=interactive):
        return
    if interactive:
        raise AbortedByUserError()
    raise FileBatchError(f"Output file already exists: {destination} (use --force to overwrite)")


def _emit(text: str, destination: Optional[Path]) -> None:
    if destination is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(text, encoding="utf-8")
    logger.info(f"Wrote results to {destination}")


def _exit_code_for_outcome(outcome: BatchOutcome) -> int:
    if outcome.interrupted:
        logger.warning(f"Interrupted: emitted {len(outcome.results)} of {outcome.total} result(s)")
        return EXIT_INTERRUPTED
    return EXIT_ERROR if outcome.failed else EXIT_SUCCESS


def run_process(args: argparse.Namespace) -> int:
    """Run the ``process`` command.

    Returns
    -------
    int
        0 when every file succeeded or the user declined the overwrite
        prompt, 1 on per-file failures or runtime errors, 2 on usage
        errors, 130 when interrupted

    """
    resolution = _resolve_run_settings(args, PROCESS_SETTING_ARGS)
    settings = resolution.settings

    if report_validation_problems(collect_argument_problems(args, settings), logger=logger):
        return EXIT_USAGE_ERROR

    try:
        spec = transform_registry.get(settings.transform)
        file_set = _resolve_files(args, settings)
    except (UsageError, EmptyFileSetError) as e:
        return _report_fatal(e)

    destination = resolve_destination(settings)
    to_terminal = destination is None and is_interactive(sys.stdout)

    if args.dry_run:
        sys.stdout.write(format_file_list(file_set.files, settings.output_format, is_interactive(sys.stdout)))
        if not settings.quiet:
            print(f"Dry run: {len(file_set)} file(s) would be processed with '{spec.name}'", file=sys.stderr)
        return EXIT_SUCCESS

    if destination is not None and destination.exists():
        try:
            _check_overwrite(destination, args)
        except AbortedByUserError as e:
            print(e.message, file=sys.stderr)
            return get_exit_code_for_exception(e)
        except FileBatchError as e:
            return _report_fatal(e)

    status_is_terminal = is_interactive(sys.stderr)
    with ProgressContext(enabled=not settings.quiet and status_is_terminal, total=len(file_set)) as progress:
        outcome = run_batch(
            file_set.files, spec, workers=settings.workers, retries=settings.retries, progress=progress
        )

    text = format_results(
        outcome.results,
        explicit_format=settings.output_format,
        destination_is_interactive=to_terminal,
        color=settings.color and to_terminal,
    )
    try:
        _emit(text, destination)
    except OSError as e:
        print(f"Error: Cannot write results to {destination}: {e.strerror or e}", file=sys.stderr)
        return EXIT_ERROR

    SummaryRenderer(
        enabled=not settings.quiet and not args.no_summary,
        color=settings.color and status_is_terminal,
    ).render_batch_summary(outcome.succeeded, outcome.failed, outcome.total, outcome.elapsed)

    return _exit_code_for_outcome(outcome)


def summarize_sizes(results: Sequence[TransformResult]) -> Dict[str, Any]:
    """Aggregate ``size`` results into the ``analyze`` report.

    Returns
    -------
    dict
        ``files``, ``total_bytes``, ``largest``, ``newest``, per-extension
        ``extensions`` statistics and the list of ``failures``

    """
    sizes = [result for result in results if isinstance(result, SizeResult)]
    failures = [result for result in results if isinstance(result, TransformFailure)]

    extensions: Dict[str, Dict[str, int]] = defaultdict(lambda: {"count": 0, "bytes": 0})
    for result in sizes:
        name = result.path.suffix.lower().lstrip(".") or "(none)"
        extensions[name]["count"] += 1
        extensions[name]["bytes"] += result.size_bytes

    largest = max(sizes, key=lambda r: r.size_bytes, default=None)
    newest = max(sizes, key=lambda r: r.modified_timestamp, default=None)

    return {
        "files": len(sizes),
        "total_bytes": sum(result.size_bytes for result in sizes),
        "largest": {"path": str(largest.path), "size_bytes": largest.size_bytes} if largest else None,
        "newest": {"path": str(newest.path), "modified": newest.modified_iso} if newest else None,
        "extensions": {name: extensions[name] for name in sorted(extensions)},
        "failures": [{"path": str(result.path), "error": result.error} for result in failures],
    }


def run_analyze(args: argparse.Namespace) -> int:
    """Run the ``analyze`` command.

    Applies the metadata-only ``size`` transform to every file and prints
    the aggregate report on standard output.
    """
    resolution = _resolve_run_settings(args, ANALYZE_SETTING_ARGS)
    settings = resolution.settings

    if report_validation_problems(collect_argument_problems(args, settings), logger=logger):
        return EXIT_USAGE_ERROR

    try:
        file_set = _resolve_files(args, settings)
    except (UsageError, EmptyFileSetError) as e:
        return _report_fatal(e)

    status_is_terminal = is_interactive(sys.stderr)
    with ProgressContext(enabled=not settings.quiet and status_is_terminal, total=len(file_set)) as progress:
        outcome = run_batch(
            file_set.files,
            transform_registry.get("size"),
            workers=settings.workers,
            retries=settings.retries,
            progress=progress,
        )

    to_terminal = is_interactive(sys.stdout)
    sys.stdout.write(
        format_mapping(
            summarize_sizes(outcome.results),
            explicit_format=settings.output_format,
            destination_is_interactive=to_terminal,
            color=settings.color and to_terminal,
            title="Analysis",
        )
    )
    return _exit_code_for_outcome(outcome)


__all__ = [
    "BatchOutcome",
    "resolve_destination",
    "run_analyze",
    "run_batch",
    "run_process",
    "summarize_sizes",
]
