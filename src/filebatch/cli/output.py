#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/filebatch/cli/output.py
"""Rendering of results for the data stream.

Human-readable tables go to terminals and JSON goes everywhere else unless
a format was requested explicitly. Every renderer returns a string ending
in a newline. Nothing here writes to a stream.
"""

from __future__ import annotations

import csv
import io
import json
import shutil
import sys
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, TextIO

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from filebatch.constants import OUTPUT_FORMATS
from filebatch.results import SUCCESS_TYPES, TransformFailure, TransformResult

# Table width used when rendering for files and pipes
NON_INTERACTIVE_WIDTH = 240

_COMMON_KEYS = ("path", "transform", "status")


def is_interactive(stream: Optional[TextIO] = None) -> bool:
    """Return True when ``stream`` (default stdout) is attached to a terminal."""
    target = stream if stream is not None else sys.stdout
    isatty = getattr(target, "isatty", None)
    if not callable(isatty):
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        # Closed or detached streams
        return False


def resolve_output_format(explicit_format: Optional[str], destination_is_interactive: bool) -> str:
    """Choose the output format.

    An explicit format always wins; otherwise terminals get ``table`` and
    files or pipes get ``json``.

    Raises
    ------
    ValueError
        If ``explicit_format`` is not a known format

    """
    if explicit_format:
        if explicit_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {explicit_format!r}")
        return explicit_format
    return "table" if destination_is_interactive else "json"


def _make_console(buffer: io.StringIO, color: bool, destination_is_interactive: bool) -> Console:
    width = shutil.get_terminal_size().columns if destination_is_interactive else NON_INTERACTIVE_WIDTH
    return Console(
        file=buffer,
        force_terminal=color,
        no_color=not color,
        width=width,
        highlight=False,
    )


def _result_rows(results: Sequence[TransformResult]) -> List[Dict[str, Any]]:
    rows = []
    for result in results:
        if not isinstance(result, SUCCESS_TYPES) and not isinstance(result, TransformFailure):
            raise TypeError(f"Cannot format result of type {type(result).__name__}")
        rows.append(result.to_dict())
    return rows


def _detail_columns(rows: Iterable[Mapping[str, Any]]) -> List[str]:
    """Union of the non-common keys, in first-seen order."""
    columns: List[str] = []
    for row in rows:
        for key in row:
            if key not in _COMMON_KEYS and key not in columns:
                columns.append(key)
    return columns


def _render_results_table(rows: List[Dict[str, Any]], color: bool, destination_is_interactive: bool) -> str:
    buffer = io.StringIO()
    console = _make_console(buffer, color, destination_is_interactive)

    if not rows:
        console.print("No results")
        return buffer.getvalue()

    transforms = sorted({row["transform"] for row in rows})
    table = Table(title=f"Results ({', '.join(transforms)})")
    table.add_column("Path", style="cyan", overflow="fold")
    table.add_column("Status", no_wrap=True)
    columns = _detail_columns(rows)
    for column in columns:
        table.add_column(column.replace("_", " ").title(), overflow="fold")

    for row in rows:
        ok = row["status"] == "ok"
        status = "[green]ok[/green]" if ok else "[red]error[/red]"
        table.add_row(_cell(row["path"]), status, *(_cell(row.get(column)) for column in columns))

    console.print(table)
    return buffer.getvalue()


def _cell(value: Any) -> str:
    # Paths and error messages are data, not rich markup
    return "" if value is None else escape(str(value))


def _render_csv(rows: List[Dict[str, Any]], columns: List[str]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, lineterminator="\n", extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({column: _cell(row.get(column)) for column in columns})
    return buffer.getvalue()


def _render_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _render_yaml(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)


def format_results(
    results: Sequence[TransformResult],
    explicit_format: Optional[str] = None,
    destination_is_interactive: bool = False,
    color: bool = False,
) -> str:
    """Render a result sequence.

    Parameters
    ----------
    results : sequence of TransformResult
        Results in task order
    explicit_format : str, optional
        One of ``table``, ``json``, ``yaml``, ``csv``
    destination_is_interactive : bool, default False
        Whether the destination is a terminal; picks the default format
    color : bool, default False
        Allow ANSI colors in tables

    Returns
    -------
    str
        Rendered output ending in a newline

    Raises
    ------
    TypeError
        If a result is not one of the known result types

    """
    output_format = resolve_output_format(explicit_format, destination_is_interactive)
    rows = _result_rows(results)

    if output_format == "table":
        return _render_results_table(rows, color, destination_is_interactive)
    if output_format == "json":
        return _render_json(rows)
    if output_format == "yaml":
        return _render_yaml(rows)
    return _render_csv(rows, list(_COMMON_KEYS) + _detail_columns(rows))


def format_file_list(
    paths: Sequence[Any],
    explicit_format: Optional[str] = None,
    destination_is_interactive: bool = False,
) -> str:
    """Render the file list shown by ``--dry-run``.

    Tables are rendered as one path per line so the list stays usable in
    shell pipelines.
    """
    output_format = resolve_output_format(explicit_format, destination_is_interactive)
    names = [str(path) for path in paths]

    if output_format == "json":
        return _render_json(names)
    if output_format == "yaml":
        return _render_yaml(names)
    if output_format == "csv":
        return _render_csv([{"path": name} for name in names], ["path"])
    return "".join(f"{name}\n" for name in names)


def _flatten(data: Mapping[str, Any], prefix: str = "") -> List[tuple[str, Any]]:
    items: List[tuple[str, Any]] = []
    for key, value in data.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            items.extend(_flatten(value, name))
        elif isinstance(value, list):
            for index, entry in enumerate(value):
                if isinstance(entry, Mapping):
                    items.extend(_flatten(entry, f"{name}.{index}"))
                else:
                    items.append((f"{name}.{index}", entry))
        else:
            items.append((name, value))
    return items


def _render_mapping_table(data: Mapping[str, Any], title: str, color: bool, destination_is_interactive: bool) -> str:
    buffer = io.StringIO()
    console = _make_console(buffer, color, destination_is_interactive)

    scalars = {key: value for key, value in data.items() if not isinstance(value, (Mapping, list))}
    table = Table(title=title)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for key, value in scalars.items():
        table.add_row(key.replace("_", " ").capitalize(), _cell(value))
    for key, value in data.items():
        if isinstance(value, Mapping) and not any(isinstance(v, Mapping) for v in value.values()):
            for sub_key, sub_value in value.items():
                table.add_row(f"{key.replace('_', ' ').capitalize()} {sub_key.replace('_', ' ')}", _cell(sub_value))
    console.print(table)

    # Nested mappings of mappings (e.g. per-extension stats) get their own table
    for key, value in data.items():
        if isinstance(value, Mapping) and value and all(isinstance(v, Mapping) for v in value.values()):
            columns = _detail_columns(value.values())
            nested = Table(title=key.replace("_", " ").capitalize())
            nested.add_column("Name", style="cyan")
            for column in columns:
                nested.add_column(column.replace("_", " ").capitalize(), justify="right")
            for name, stats in value.items():
                nested.add_row(_cell(name), *(_cell(stats.get(column)) for column in columns))
            console.print(nested)

    # Lists of records (e.g. failures)
    for key, value in data.items():
        if isinstance(value, list) and value:
            entries = Table(title=key.replace("_", " ").capitalize())
            columns = _detail_columns(entry for entry in value if isinstance(entry, Mapping))
            entries.add_column("Path", style="cyan", overflow="fold")
            for column in columns:
                entries.add_column(column.replace("_", " ").capitalize(), overflow="fold")
            for entry in value:
                entries.add_row(_cell(entry.get("path")), *(_cell(entry.get(column)) for column in columns))
            console.print(entries)

    return buffer.getvalue()


def format_mapping(
    data: Mapping[str, Any],
    explicit_format: Optional[str] = None,
    destination_is_interactive: bool = False,
    color: bool = False,
    title: str = "Summary",
) -> str:
    """Render a summary mapping such as the ``analyze`` report.

    CSV output flattens nested keys with dots, e.g. ``extensions.txt.count``.
    """
    output_format = resolve_output_format(explicit_format, destination_is_interactive)

    if output_format == "table":
        return _render_mapping_table(data, title, color, destination_is_interactive)
    if output_format == "json":
        return _render_json(dict(data))
    if output_format == "yaml":
        return _render_yaml(dict(data))
    rows = [{"metric": name, "value": _cell(value)} for name, value in _flatten(data)]
    return _render_csv(rows, ["metric", "value"])


__all__ = [
    "format_file_list",
    "format_mapping",
    "format_results",
    "is_interactive",
    "resolve_output_format",
]
