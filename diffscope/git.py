"""Thin wrappers over the git commands diffscope needs."""

from __future__ import annotations

import subprocess
from typing import Iterable, List, Optional

from .errors import BaseRefError, ToolNotFoundError


def _git(args: List[str], cwd: Optional[str] = None) -> subprocess.CompletedProcess:
    """Run ``git <args>`` and return the completed process (never checks)."""
    try:
        return subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise ToolNotFoundError("git is not installed or not on PATH") from exc


def _filter_paths(output: str, extensions: Iterable[str]) -> List[str]:
    suffixes = tuple(extensions)
    return [
        line.strip()
        for line in output.splitlines()
        if line.strip() and line.strip().endswith(suffixes)
    ]


def verify_ref(base: str, cwd: Optional[str] = None) -> None:
    """Raise BaseRefError unless *base* names an existing revision."""
    proc = _git(["rev-parse", "--verify", "--quiet", base], cwd=cwd)
    if proc.returncode != 0:
        raise BaseRefError(f"base branch '{base}' does not exist")


def changed_files(
    base: str, extensions: Iterable[str], cwd: Optional[str] = None
) -> List[str]:
    """Return sorted, de-duplicated paths changed on this branch or in the worktree.

    Combines files changed between *base* and HEAD (committed work) with files
    that have uncommitted modifications, keeping those ending in *extensions*.
    """
    extensions = list(extensions)
    committed = _git(["diff", "--name-only", f"{base}...HEAD"], cwd=cwd)
    uncommitted = _git(["diff", "--name-only"], cwd=cwd)
    paths = set(_filter_paths(committed.stdout, extensions))
    paths.update(_filter_paths(uncommitted.stdout, extensions))
    return sorted(paths)


def file_diff(path: str, base: str, cwd: Optional[str] = None) -> str:
    """Return the zero-context diff text of *path* against *base* plus the worktree.

    A git diff that fails contributes no text, so an unknown path simply
    yields an empty string.
    """
    parts = []
    for args in (
        ["diff", f"{base}...HEAD", "--unified=0", "--", path],
        ["diff", "--unified=0", "--", path],
    ):
        proc = _git(args, cwd=cwd)
        if proc.returncode == 0 and proc.stdout:
            parts.append(proc.stdout)
    return "\n".join(parts)


def modified_files(extensions: Iterable[str], cwd: Optional[str] = None) -> List[str]:
    """Return worktree files with unstaged modifications ending in *extensions*."""
    proc = _git(["diff", "--name-only"], cwd=cwd)
    return _filter_paths(proc.stdout, extensions)
