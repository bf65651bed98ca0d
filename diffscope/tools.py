"""Locate and run clang-format / clang-tidy on a single file."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .errors import ToolNotFoundError
from .line_filter import LineFilter, render_line_filter

_LLVM_RELEASES = "https://github.com/llvm/llvm-project/releases"

# Install instructions shown when a tool is missing, keyed by tool name.
_INSTALL_HINTS = {
    "clang-format": [
        "# On macOS:",
        "  brew install clang-format",
        "# On Ubuntu/Debian:",
        "  sudo apt-get install clang-format",
        "# On CentOS/RHEL:",
        "  sudo yum install clang-tools-extra",
        "# Or download from LLVM releases:",
        f"  {_LLVM_RELEASES}",
    ],
    "clang-tidy": [
        "# On macOS:",
        "  brew install llvm",
        '  export PATH="/opt/homebrew/opt/llvm/bin:$PATH"',
        "# On Ubuntu/Debian:",
        "  sudo apt-get install clang-tidy",
        "# On CentOS/RHEL:",
        "  sudo yum install clang-tools-extra",
        "# Or download from LLVM releases:",
        f"  {_LLVM_RELEASES}",
    ],
}


class FileStatus(Enum):
    FORMATTED = "formatted"
    FORMAT_FAILED = "format failed"
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"
    FAILED = "failed"
    SKIPPED_NO_CHANGES = "skipped (no changed lines)"
    SKIPPED_NOT_FOUND = "skipped (file not found)"

    @property
    def is_skip(self) -> bool:
        return self in (FileStatus.SKIPPED_NO_CHANGES, FileStatus.SKIPPED_NOT_FOUND)


@dataclass
class FileResult:
    """Outcome of processing one file."""

    path: str
    status: FileStatus
    output: str = ""  # combined tool output, kept for WARNING/ERROR/FAILED
    command: List[str] = field(default_factory=list)


def _install_hints(name: str) -> List[str]:
    """Return install hints for *name*, matching versioned names like clang-tidy-18."""
    base = os.path.basename(name)
    for tool, hints in _INSTALL_HINTS.items():
        if base.startswith(tool):
            return hints
    return []


def find_tool(name: str) -> str:
    """Return the resolved path of executable *name*.

    Raises ToolNotFoundError with install hints when it is not on PATH.
    """
    exe = shutil.which(name)
    if exe:
        return exe
    lines = [f"{name} is not installed"]
    hints = _install_hints(name)
    if hints:
        lines.append("You can install it using:")
        lines.extend(f"  {hint}" for hint in hints)
    raise ToolNotFoundError("\n".join(lines))


def _run(cmd: List[str], cwd: Optional[str]) -> subprocess.CompletedProcess:
    return subprocess.run(
        cmd,
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    )


def format_file(
    exe: str,
    path: str,
    format_args: Sequence[str],
    style: Optional[str] = None,
    cwd: Optional[str] = None,
) -> FileResult:
    """Format *path* in place, restricted to the ``--lines`` tokens in *format_args*."""
    cmd = [exe, "-i"]
    if style:
        cmd.append(f"--style={style}")
    cmd.extend(format_args)
    cmd.append(path)
    try:
        proc = _run(cmd, cwd)
    except OSError as exc:
        return FileResult(path, FileStatus.FORMAT_FAILED, str(exc), cmd)
    if proc.returncode != 0:
        return FileResult(path, FileStatus.FORMAT_FAILED, proc.stdout or "", cmd)
    return FileResult(path, FileStatus.FORMATTED, "", cmd)


def classify_tidy_output(returncode: int, output: str) -> FileStatus:
    """Map a clang-tidy exit code and combined output onto a FileStatus.

    A non-zero exit is a failure regardless of output.  Otherwise any
    ``error:`` diagnostic wins over ``warning:``.
    """
    if returncode != 0:
        return FileStatus.FAILED
    if "error:" in output:
        return FileStatus.ERROR
    if "warning:" in output:
        return FileStatus.WARNING
    return FileStatus.OK


def tidy_file(
    exe: str,
    path: str,
    line_filter: LineFilter,
    build_path: Optional[str] = None,
    extra_args: Sequence[str] = (),
    cwd: Optional[str] = None,
) -> FileResult:
    """Run clang-tidy on *path* with diagnostics limited to *line_filter*."""
    cmd = [exe, path, f"--line-filter={render_line_filter(line_filter)}"]
    if build_path:
        cmd.extend(["-p", build_path])
    cmd.extend(extra_args)
    try:
        proc = _run(cmd, cwd)
    except OSError as exc:
        return FileResult(path, FileStatus.FAILED, str(exc), cmd)
    output = proc.stdout or ""
    status = classify_tidy_output(proc.returncode, output)
    if status is FileStatus.OK:
        output = ""
    return FileResult(path, status, output, cmd)
