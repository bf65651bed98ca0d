"""Parse unified diffs into changed line ranges per file."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError

from .errors import DiffParseError

# (start, end) line numbers in the post-change file, 1-based and inclusive.
LineRange = Tuple[int, int]
FileLineRanges = Dict[str, List[LineRange]]

# @@ -<old_start>[,<old_count>] +<new_start>[,<new_count>] @@<anything>
_HUNK_HEADER = re.compile(r"^@@ -[0-9]+(?:,[0-9]+)? \+([0-9]+)(?:,([0-9]+))? @@")


@dataclass(frozen=True)
class DiffHunk:
    """The post-change side of one ``@@ ... @@`` hunk header."""

    new_start: int
    new_count: int = 1

    @property
    def is_deletion(self) -> bool:
        return self.new_count == 0

    @property
    def line_range(self) -> Optional[LineRange]:
        """Lines covered in the new file, or None for a pure deletion."""
        if self.is_deletion:
            return None
        return (self.new_start, self.new_start + self.new_count - 1)


def parse_hunk_header(line: str) -> Optional[DiffHunk]:
    """Return the hunk described by *line*, or None if it is not a hunk header.

    A missing ``,<count>`` on the ``+`` side means one line.  Text after the
    closing ``@@`` (git's function context) is ignored.
    """
    m = _HUNK_HEADER.match(line)
    if m is None:
        return None
    start, count = m.groups()
    return DiffHunk(int(start), 1 if count is None else int(count))


def iter_hunks(diff_text: str) -> Iterator[DiffHunk]:
    """Yield every hunk header in *diff_text*, in order of appearance."""
    # Lines end at "\n" only; form feeds and similar belong to content.
    for line in diff_text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        hunk = parse_hunk_header(line)
        if hunk is not None:
            yield hunk


def extract_line_ranges(diff_text: str) -> List[LineRange]:
    """Return the added/modified line ranges of a single file's diff.

    *diff_text* is any concatenation of unified diffs for one file, typically
    ``git diff <base>...HEAD -U0`` followed by ``git diff -U0``.  Only hunk
    headers are read; everything else, including lines that merely look like
    malformed headers, is skipped.  Ranges keep the order they appear in and
    are neither merged nor sorted.  An empty list means no changed lines.
    """
    ranges: List[LineRange] = []
    for hunk in iter_hunks(diff_text):
        line_range = hunk.line_range
        if line_range is not None:
            ranges.append(line_range)
    return ranges


def parse_diff(
    diff_text: str, extensions: Optional[Iterable[str]] = None
) -> FileLineRanges:
    """Parse a multi-file unified diff into a map of filename -> changed ranges.

    Uses the same hunk semantics as :func:`extract_line_ranges`: one range per
    hunk taken from the ``+`` side, pure deletions skipped.  When
    *extensions* is given only paths ending in one of them are kept.  Deleted
    files and files without ranges are left out.

    Raises DiffParseError if the text is not a well-formed unified diff.
    """
    try:
        patch = PatchSet.from_string(diff_text)
    except UnidiffParseError as exc:
        raise DiffParseError(f"could not parse diff: {exc}") from exc

    suffixes = tuple(extensions) if extensions is not None else None
    result: FileLineRanges = {}

    for patched_file in patch:
        if patched_file.is_removed_file:
            continue
        path = patched_file.path
        if suffixes is not None and not path.endswith(suffixes):
            continue
        ranges: List[LineRange] = []
        for hunk in patched_file:
            if hunk.target_length == 0:
                continue
            ranges.append(
                (hunk.target_start, hunk.target_start + hunk.target_length - 1)
            )
        if ranges:
            # The same path may appear twice (committed + working-tree diff).
            result.setdefault(path, []).extend(ranges)

    return result
