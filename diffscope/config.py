"""Load diffscope configuration from pyproject.toml and optional .diffscope.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class DiffscopeConfig:
    """Runtime configuration for diffscope."""

    # Revision the current branch is compared against (``<base>...HEAD``).
    base_branch: str = "main"
    # Number of parallel clang-tidy workers. 0 means one per CPU core.
    jobs: int = 0

    # Executable names or paths, resolved through PATH.
    clang_format: str = "clang-format"
    clang_tidy: str = "clang-tidy"

    # Optional value for clang-format --style (e.g. "file", "Google").
    # When unset clang-format picks up the nearest .clang-format itself.
    format_style: Optional[str] = None

    # File suffixes considered by each command. Headers are formatted but not
    # passed to clang-tidy on their own.
    format_extensions: List[str] = field(
        default_factory=lambda: [".cc", ".h", ".cpp", ".hpp"]
    )
    tidy_extensions: List[str] = field(default_factory=lambda: [".cc", ".cpp"])

    # compile_commands.json location, relative to the working directory.
    # clang-tidy runs without it, but usually with bogus include errors.
    compile_commands: str = "compile_commands.json"
    # Optional build directory passed to clang-tidy as -p.
    build_path: Optional[str] = None
    # Extra arguments appended to every clang-tidy invocation.
    tidy_extra_args: List[str] = field(default_factory=list)

    # Skip the "Continue anyway?" prompt when compile_commands.json is missing.
    assume_yes: bool = False


def _read_toml(path: Path) -> dict:
    """Read a TOML file; return empty dict if missing or unparseable."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except Exception:
        return {}


def _apply(cfg: DiffscopeConfig, d: dict) -> None:
    """Overlay dict values onto cfg, ignoring unknown keys."""
    valid = set(cfg.__dataclass_fields__)
    for key, val in d.items():
        if key in valid:
            setattr(cfg, key, val)


def load_config(project_root: Optional[Path] = None) -> DiffscopeConfig:
    """Load config from pyproject.toml [tool.diffscope], then .diffscope.toml."""
    if project_root is None:
        project_root = Path.cwd()
    cfg = DiffscopeConfig()
    pyproject = _read_toml(project_root / "pyproject.toml")
    _apply(cfg, pyproject.get("tool", {}).get("diffscope", {}))
    local = _read_toml(project_root / ".diffscope.toml")
    _apply(cfg, local)
    return cfg
