"""Cumulative statistics for a single diffscope run."""

from dataclasses import dataclass, field
from typing import List

from .tools import FileResult, FileStatus


@dataclass
class RunStats:
    """Holds cumulative counts for a single diffscope run."""

    # Formatting
    formatted: int = 0
    format_failed: int = 0

    # clang-tidy
    checked: int = 0
    warnings: int = 0
    errors: int = 0

    # Files not processed (missing, or no changed lines)
    skipped: int = 0

    files_formatted: List[str] = field(default_factory=list)
    files_with_issues: List[str] = field(default_factory=list)

    def record(self, result: FileResult) -> None:
        """Count *result* under the matching counters."""
        status = result.status
        if status.is_skip:
            self.skipped += 1
        elif status is FileStatus.FORMATTED:
            self.formatted += 1
            self.files_formatted.append(result.path)
        elif status is FileStatus.OK:
            self.checked += 1
        elif status is FileStatus.WARNING:
            self.checked += 1
            self.warnings += 1
            self.files_with_issues.append(result.path)
        elif status is FileStatus.FORMAT_FAILED:
            self.format_failed += 1
            self.files_with_issues.append(result.path)
        else:
            # ERROR and FAILED
            self.checked += 1
            self.errors += 1
            self.files_with_issues.append(result.path)

    def exit_code(self, mode: str) -> int:
        """Return the process exit code for a ``format`` or ``tidy`` run."""
        if mode == "format":
            return 1 if self.format_failed else 0
        return 1 if self.errors else 0

    def format_summary(self) -> List[str]:
        """Return the summary lines for a formatting run."""
        lines = ["========================================", "Summary:"]
        lines.append(f"  Formatted: {self.formatted} file(s)")
        lines.append(f"  Skipped: {self.skipped} file(s)")
        if self.format_failed:
            lines.append(f"  Failed: {self.format_failed} file(s)")
            lines.append("Formatting finished with failures.")
        else:
            lines.append("Formatting complete!")
        return lines

    def tidy_summary(self) -> List[str]:
        """Return the summary lines for a clang-tidy run."""
        lines = ["========================================", "Summary:"]
        lines.append(f"  Checked: {self.checked} file(s)")
        lines.append(f"  Errors: {self.errors}")
        lines.append(f"  Warnings: {self.warnings}")
        if self.errors:
            lines.append("clang-tidy check failed with errors!")
        elif self.warnings:
            lines.append("clang-tidy check completed with warnings.")
        else:
            lines.append("All checks passed!")
        return lines
