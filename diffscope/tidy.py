"""Line-level clang-tidy over the C++ sources changed on this branch."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Generator, List, Optional

from .config import DiffscopeConfig
from .diff_parser import extract_line_ranges
from .errors import AbortedError
from .git import changed_files, file_diff, verify_ref
from .line_filter import build_line_filter
from .stats import RunStats
from .tools import FileResult, FileStatus, find_tool, tidy_file

# Worker count used when neither config nor os.cpu_count() provides one.
_FALLBACK_JOBS = 4


def resolve_jobs(jobs: int) -> int:
    """Return *jobs* if positive, else the CPU count."""
    if jobs > 0:
        return jobs
    return os.cpu_count() or _FALLBACK_JOBS


def check_file(
    exe: str, path: str, config: DiffscopeConfig, cwd: Optional[str] = None
) -> FileResult:
    """Run clang-tidy on the changed lines of one file.

    Touches no shared state, so it can run on any worker thread.
    """
    if not (Path(cwd or ".") / path).is_file():
        return FileResult(path, FileStatus.SKIPPED_NOT_FOUND)
    ranges = extract_line_ranges(file_diff(path, config.base_branch, cwd=cwd))
    line_filter = build_line_filter(path, ranges)
    if line_filter is None:
        return FileResult(path, FileStatus.SKIPPED_NO_CHANGES)
    return tidy_file(
        exe,
        path,
        line_filter,
        build_path=config.build_path,
        extra_args=config.tidy_extra_args,
        cwd=cwd,
    )


def check_files(
    exe: str,
    files: List[str],
    config: DiffscopeConfig,
    jobs: int,
    cwd: Optional[str] = None,
) -> List[FileResult]:
    """Check *files* on a pool of *jobs* workers; results keep the order of *files*."""
    with ThreadPoolExecutor(max_workers=jobs) as ex:
        return list(ex.map(lambda path: check_file(exe, path, config, cwd), files))


def _describe(result: FileResult) -> str:
    path = result.path
    status = result.status
    if status is FileStatus.OK:
        return f"✓ {path}: No issues found"
    if status is FileStatus.WARNING:
        return f"⚠ {path}: Found warnings"
    if status is FileStatus.ERROR:
        return f"✗ {path}: Found errors"
    if status is FileStatus.FAILED:
        return f"✗ {path}: clang-tidy failed"
    if status is FileStatus.SKIPPED_NO_CHANGES:
        return f"- {path}: Skipped (no changed lines)"
    return f"⚠ {path}: Skipped (file not found)"


def _confirm_missing_compile_commands(
    config: DiffscopeConfig, confirm: Callable[[str], str]
) -> None:
    if config.assume_yes:
        return
    try:
        answer = confirm("Continue anyway? (y/N) ")
    except EOFError:
        # closed stdin counts as "no"
        answer = ""
    if answer.strip().lower() not in ("y", "yes"):
        raise AbortedError("compile_commands.json not found; aborted")


def run_tidy(
    config: DiffscopeConfig,
    stats: RunStats,
    cwd: Optional[str] = None,
    confirm: Callable[[str], str] = input,
) -> Generator[str, None, None]:
    """Run clang-tidy on changed lines of every changed C++ source; yield messages.

    Files are checked in parallel; results are reported and recorded in
    *stats* in file order once all workers finish.
    """
    exe = find_tool(config.clang_tidy)
    base = config.base_branch
    jobs = resolve_jobs(config.jobs)
    yield f"Running clang-tidy on changed files compared to {base}..."
    yield f"Using {jobs} parallel jobs"

    verify_ref(base, cwd=cwd)
    files = changed_files(base, config.tidy_extensions, cwd=cwd)
    if not files:
        yield "No C++ source files changed. Nothing to check."
        return

    yield "Found changed C++ source files:"
    for path in files:
        if (Path(cwd or ".") / path).is_file():
            yield f"  - {path}"
    yield f"Total: {len(files)} file(s)"

    if not (Path(cwd or ".") / config.compile_commands).exists():
        yield f"Warning: {config.compile_commands} not found"
        yield "You may need to generate it first with:"
        yield "  cmake -DCMAKE_EXPORT_COMPILE_COMMANDS=ON -B build"
        yield "  ln -s build/compile_commands.json ."
        _confirm_missing_compile_commands(config, confirm)

    yield "Running clang-tidy in parallel..."
    for result in check_files(exe, files, config, jobs, cwd=cwd):
        stats.record(result)
        yield _describe(result)
        if result.output and not result.status.is_skip:
            yield result.output.rstrip()
