"""Render changed line ranges into clang-format and clang-tidy arguments."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from .diff_parser import FileLineRanges, LineRange

# clang-format flag restricting formatting to an inclusive 1-based line span.
FORMAT_FLAG = "--lines"

# JSON value accepted by clang-tidy --line-filter.
LineFilter = List[Dict[str, Any]]


def build_format_args(
    ranges: Sequence[LineRange], flag: str = FORMAT_FLAG
) -> List[str]:
    """Return one ``<flag>=<start>:<end>`` token per range, in input order.

    An empty result means there is nothing to format.  Callers must skip the
    file: clang-format without any ``--lines`` formats the whole file.
    """
    return [f"{flag}={start}:{end}" for start, end in ranges]


def build_line_filter(path: str, ranges: Sequence[LineRange]) -> Optional[LineFilter]:
    """Return the clang-tidy line filter for *path*, or None if there are no ranges.

    *path* is used verbatim; it must match the form clang-tidy sees the file
    under.  None is returned instead of a record with an empty ``lines`` list
    so the caller skips the file rather than running clang-tidy on it.
    """
    if not ranges:
        return None
    return [{"name": path, "lines": [[start, end] for start, end in ranges]}]


def combine_line_filters(changed: FileLineRanges) -> Optional[LineFilter]:
    """Return a single filter with one record per file that has ranges."""
    combined: LineFilter = []
    for path, ranges in changed.items():
        line_filter = build_line_filter(path, ranges)
        if line_filter is not None:
            combined.extend(line_filter)
    return combined or None


def render_line_filter(line_filter: LineFilter) -> str:
    """Serialize *line_filter* as compact JSON for ``--line-filter=``."""
    return json.dumps(line_filter, separators=(",", ":"))
