"""Tests for diffscope.stats.RunStats."""

from diffscope.stats import RunStats
from diffscope.tools import FileResult, FileStatus


def _record(stats, path, status):
    stats.record(FileResult(path, status))


def test_record_tidy_statuses():
    s = RunStats()
    _record(s, "a.cpp", FileStatus.OK)
    _record(s, "b.cpp", FileStatus.WARNING)
    _record(s, "c.cpp", FileStatus.ERROR)
    _record(s, "d.cpp", FileStatus.FAILED)
    _record(s, "e.cpp", FileStatus.SKIPPED_NO_CHANGES)
    _record(s, "f.cpp", FileStatus.SKIPPED_NOT_FOUND)
    assert s.checked == 4
    assert s.warnings == 1
    assert s.errors == 2
    assert s.skipped == 2
    assert s.files_with_issues == ["b.cpp", "c.cpp", "d.cpp"]


def test_record_format_statuses():
    s = RunStats()
    _record(s, "a.cpp", FileStatus.FORMATTED)
    _record(s, "b.h", FileStatus.FORMAT_FAILED)
    _record(s, "c.h", FileStatus.SKIPPED_NO_CHANGES)
    assert s.formatted == 1
    assert s.format_failed == 1
    assert s.skipped == 1
    assert s.checked == 0
    assert s.files_formatted == ["a.cpp"]


def test_exit_code_tidy():
    assert RunStats().exit_code("tidy") == 0
    assert RunStats(warnings=3, checked=3).exit_code("tidy") == 0
    assert RunStats(errors=1, checked=1).exit_code("tidy") == 1


def test_exit_code_format():
    assert RunStats(formatted=2).exit_code("format") == 0
    assert RunStats(formatted=2, format_failed=1).exit_code("format") == 1


def test_tidy_summary_all_passed():
    lines = RunStats(checked=2).tidy_summary()
    assert "  Checked: 2 file(s)" in lines
    assert "  Errors: 0" in lines
    assert lines[-1] == "All checks passed!"


def test_tidy_summary_warnings():
    assert RunStats(checked=1, warnings=1).tidy_summary()[-1] == (
        "clang-tidy check completed with warnings."
    )


def test_tidy_summary_errors_win():
    assert RunStats(checked=2, warnings=1, errors=1).tidy_summary()[-1] == (
        "clang-tidy check failed with errors!"
    )


def test_format_summary():
    lines = RunStats(formatted=3, skipped=1).format_summary()
    assert "  Formatted: 3 file(s)" in lines
    assert "  Skipped: 1 file(s)" in lines
    assert lines[-1] == "Formatting complete!"


def test_format_summary_with_failures():
    lines = RunStats(formatted=1, format_failed=2).format_summary()
    assert "  Failed: 2 file(s)" in lines
    assert lines[-1] == "Formatting finished with failures."
