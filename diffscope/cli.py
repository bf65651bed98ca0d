"""CLI entry point: parses arguments, drives a workflow, reports to stdout."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .config import DiffscopeConfig, load_config
from .diff_parser import parse_diff
from .errors import DiffscopeError
from .formatter import run_format
from .git import modified_files
from .line_filter import build_format_args, combine_line_filters, render_line_filter
from .stats import RunStats
from .tidy import run_tidy


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diffscope",
        description="Run clang-format / clang-tidy on changed lines only.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    fmt = sub.add_parser("format", help="clang-format the changed lines in place")
    fmt.add_argument("base_branch", nargs="?", help="revision to compare against")
    fmt.add_argument("--style", help="clang-format --style value")

    tidy = sub.add_parser("tidy", help="clang-tidy the changed lines")
    tidy.add_argument("base_branch", nargs="?", help="revision to compare against")
    tidy.add_argument("jobs", nargs="?", type=int, help="parallel jobs (default: CPUs)")
    tidy.add_argument("-p", "--build-path", help="build directory for clang-tidy -p")
    tidy.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="continue without compile_commands.json instead of asking",
    )

    ranges = sub.add_parser("ranges", help="print changed line ranges of a stdin diff")
    ranges.add_argument(
        "--json", action="store_true", help="print a clang-tidy --line-filter value"
    )
    ranges.add_argument(
        "--ext",
        action="append",
        metavar="EXT",
        help="only include files ending in EXT (repeatable)",
    )
    return parser


def _apply_args(config: DiffscopeConfig, args: argparse.Namespace) -> None:
    """Override config values with those given on the command line."""
    if getattr(args, "base_branch", None):
        config.base_branch = args.base_branch
    if getattr(args, "style", None):
        config.format_style = args.style
    if getattr(args, "jobs", None) is not None:
        config.jobs = args.jobs
    if getattr(args, "build_path", None):
        config.build_path = args.build_path
    if getattr(args, "yes", False):
        config.assume_yes = True


def _ranges(args: argparse.Namespace) -> None:
    diff_text = sys.stdin.read()
    if not diff_text.strip():
        print("diffscope: no diff provided on stdin", file=sys.stderr)
        sys.exit(1)

    changed = parse_diff(diff_text, extensions=args.ext)
    if not changed:
        return

    if args.json:
        line_filter = combine_line_filters(changed)
        if line_filter is not None:
            print(render_line_filter(line_filter))
        return
    for path, file_ranges in changed.items():
        print(f"{path}: {' '.join(build_format_args(file_ranges))}")


def main(argv: Optional[List[str]] = None) -> None:
    args = _build_parser().parse_args(argv)

    try:
        if args.command == "ranges":
            _ranges(args)
            return

        config = load_config()
        _apply_args(config, args)
        run_stats = RunStats()
        if args.command == "format":
            for message in run_format(config, run_stats):
                print(message)
            summary = run_stats.format_summary()
        else:
            for message in run_tidy(config, run_stats):
                print(message)
            summary = run_stats.tidy_summary()
    except DiffscopeError as exc:
        print(f"diffscope: {exc}", file=sys.stderr)
        sys.exit(1)

    print()
    for line in summary:
        print(line)

    if args.command == "format" and run_stats.formatted:
        touched = modified_files(config.format_extensions)
        if touched:
            print()
            print("Files modified by clang-format:")
            for path in touched:
                print(path)

    code = run_stats.exit_code(args.command)
    if code:
        sys.exit(code)
