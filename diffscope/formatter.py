"""Line-level clang-format over the C++ files changed on this branch."""

from pathlib import Path
from typing import Generator, Optional

from .config import DiffscopeConfig
from .diff_parser import extract_line_ranges
from .git import changed_files, file_diff, verify_ref
from .line_filter import build_format_args
from .stats import RunStats
from .tools import FileResult, FileStatus, find_tool, format_file


def _exists(path: str, cwd: Optional[str]) -> bool:
    return (Path(cwd or ".") / path).is_file()


def format_changed_file(
    exe: str, path: str, config: DiffscopeConfig, cwd: Optional[str] = None
) -> FileResult:
    """Format the changed lines of one file, or report why it was skipped."""
    if not _exists(path, cwd):
        return FileResult(path, FileStatus.SKIPPED_NOT_FOUND)
    ranges = extract_line_ranges(file_diff(path, config.base_branch, cwd=cwd))
    format_args = build_format_args(ranges)
    if not format_args:
        return FileResult(path, FileStatus.SKIPPED_NO_CHANGES)
    return format_file(exe, path, format_args, style=config.format_style, cwd=cwd)


def run_format(
    config: DiffscopeConfig, stats: RunStats, cwd: Optional[str] = None
) -> Generator[str, None, None]:
    """Format changed lines of every changed C++ file and yield progress messages.

    Per-file outcomes are recorded in *stats*.  Raises ToolNotFoundError or
    BaseRefError before any file is touched.
    """
    exe = find_tool(config.clang_format)
    base = config.base_branch
    yield f"Formatting changed files compared to {base}..."

    verify_ref(base, cwd=cwd)
    files = changed_files(base, config.format_extensions, cwd=cwd)
    if not files:
        yield "No C++ files changed. Nothing to format."
        return

    yield "Found changed C++ files:"
    for path in files:
        if _exists(path, cwd):
            yield f"  - {path}"
    yield f"Total: {len(files)} file(s)"
    yield "Running clang-format on changed lines..."

    for path in files:
        result = format_changed_file(exe, path, config, cwd=cwd)
        stats.record(result)
        if result.status is FileStatus.SKIPPED_NOT_FOUND:
            yield f"⚠ Skipped (file not found): {path}"
        elif result.status is FileStatus.SKIPPED_NO_CHANGES:
            yield f"- Skipped (no changed lines): {path}"
        else:
            yield f"Formatting: {' '.join(result.command)}"
            if result.status is FileStatus.FORMATTED:
                yield f"✓ Formatted: {path}"
            else:
                yield f"✗ Failed to format: {path}"
                if result.output:
                    yield result.output.rstrip()
