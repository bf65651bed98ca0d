"""Diffscope-specific exceptions."""


class DiffscopeError(Exception):
    """Base class for errors that stop a run.

    The CLI prints the message and exits non-zero.
    """


class ToolNotFoundError(DiffscopeError):
    """Raised when clang-format, clang-tidy or git is not on PATH."""


class BaseRefError(DiffscopeError):
    """Raised when the base branch to diff against does not exist."""


class AbortedError(DiffscopeError):
    """Raised when the user declines to continue a run."""


class DiffParseError(DiffscopeError):
    """Raised when a multi-file diff read from stdin cannot be parsed."""
