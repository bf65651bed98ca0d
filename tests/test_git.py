"""Tests for diffscope.git."""

import shutil
import subprocess
from unittest.mock import patch

import pytest

from diffscope.errors import BaseRefError, ToolNotFoundError
from diffscope.git import changed_files, file_diff, modified_files, verify_ref


def _proc(stdout="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout)


# ---------------------------------------------------------------------------
# Mocked git
# ---------------------------------------------------------------------------


def test_verify_ref_ok():
    with patch("diffscope.git.subprocess.run", return_value=_proc("abc123\n")) as run:
        verify_ref("main")
    assert run.call_args.args[0] == ["git", "rev-parse", "--verify", "--quiet", "main"]


def test_verify_ref_missing():
    with patch("diffscope.git.subprocess.run", return_value=_proc(returncode=1)):
        with pytest.raises(BaseRefError, match="'nope' does not exist"):
            verify_ref("nope")


def test_git_not_installed():
    with patch("diffscope.git.subprocess.run", side_effect=FileNotFoundError("git")):
        with pytest.raises(ToolNotFoundError):
            verify_ref("main")


def test_changed_files_union_filtered_sorted():
    outputs = [
        _proc("src/b.cpp\nREADME.md\nsrc/a.h\n"),
        _proc("src/b.cpp\nsrc/c.cc\nscripts/x.py\n"),
    ]
    with patch("diffscope.git.subprocess.run", side_effect=outputs) as run:
        files = changed_files("main", [".cc", ".cpp", ".h"])
    assert files == ["src/a.h", "src/b.cpp", "src/c.cc"]
    first, second = (c.args[0] for c in run.call_args_list)
    assert first == ["git", "diff", "--name-only", "main...HEAD"]
    assert second == ["git", "diff", "--name-only"]


def test_file_diff_concatenates_committed_and_worktree():
    outputs = [_proc("@@ -1 +1 @@\n"), _proc("@@ -9,0 +10,2 @@\n")]
    with patch("diffscope.git.subprocess.run", side_effect=outputs) as run:
        text = file_diff("src/a.cpp", "main", cwd="/repo")
    assert text == "@@ -1 +1 @@\n\n@@ -9,0 +10,2 @@\n"
    first = run.call_args_list[0]
    assert first.args[0] == [
        "git",
        "diff",
        "main...HEAD",
        "--unified=0",
        "--",
        "src/a.cpp",
    ]
    assert first.kwargs["cwd"] == "/repo"


def test_file_diff_ignores_failing_diff():
    outputs = [_proc("fatal: bad revision", returncode=128), _proc("@@ -2 +2 @@\n")]
    with patch("diffscope.git.subprocess.run", side_effect=outputs):
        assert file_diff("src/a.cpp", "main") == "@@ -2 +2 @@\n"


def test_file_diff_empty_when_unchanged():
    with patch("diffscope.git.subprocess.run", return_value=_proc("")):
        assert file_diff("src/a.cpp", "main") == ""


def test_modified_files():
    with patch("diffscope.git.subprocess.run", return_value=_proc("a.cpp\nb.txt\n")):
        assert modified_files([".cpp"]) == ["a.cpp"]


# ---------------------------------------------------------------------------
# Real git
# ---------------------------------------------------------------------------

needs_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(repo, *args):
    subprocess.run(
        [
            "git",
            "-c",
            "user.name=Test",
            "-c",
            "user.email=test@example.com",
            "-c",
            "commit.gpgsign=false",
            *args,
        ],
        cwd=repo,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def repo(tmp_path):
    _git(tmp_path, "init", "-q")
    lines = [f"int v{i} = {i};" for i in range(1, 11)]
    (tmp_path / "a.cpp").write_text("\n".join(lines) + "\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("hello\n", encoding="utf-8")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-q", "-m", "base")
    _git(tmp_path, "branch", "base")

    # Committed change on HEAD: rewrite line 2.
    lines[1] = "int v2 = 20;"
    (tmp_path / "a.cpp").write_text("\n".join(lines) + "\n", encoding="utf-8")
    _git(tmp_path, "commit", "-q", "-am", "change line 2")

    # Uncommitted change: rewrite lines 7 and 8.
    lines[6] = "int v7 = 70;"
    lines[7] = "int v8 = 80;"
    (tmp_path / "a.cpp").write_text("\n".join(lines) + "\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("changed\n", encoding="utf-8")
    return tmp_path


@needs_git
def test_real_repo_changed_files(repo):
    assert changed_files("base", [".cpp"], cwd=str(repo)) == ["a.cpp"]


@needs_git
def test_real_repo_file_diff_ranges(repo):
    from diffscope.diff_parser import extract_line_ranges

    text = file_diff("a.cpp", "base", cwd=str(repo))
    assert extract_line_ranges(text) == [(2, 2), (7, 8)]


@needs_git
def test_real_repo_verify_ref(repo):
    verify_ref("base", cwd=str(repo))
    with pytest.raises(BaseRefError):
        verify_ref("no-such-branch", cwd=str(repo))
