# tspw/exceptions.py
"""
Error taxonomy.

Parse-time errors (ParseError subclasses) are fatal: the CLI prints the
message plus usage text and exits with status 1. CompileFailure aborts the
remaining invocation after the captured compiler output has been echoed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class TspwError(Exception):
    """Base class for every error raised by tspw."""


# -----------------------------------------------------------------------------
# Parse-time
# -----------------------------------------------------------------------------
class ParseError(TspwError):
    """Raised while turning command-line tokens into Options."""


class NotFoundError(ParseError):
    pass


class InvalidPathError(ParseError):
    pass


class NoCompilerFoundError(ParseError):
    pass


class UnhandledParameterError(ParseError):
    pass


class MissingArgumentError(ParseError):
    pass


class HelpRequested(Exception):
    """Control flow for --help; not an error."""


# -----------------------------------------------------------------------------
# Run-time
# -----------------------------------------------------------------------------
class CompileFailure(TspwError):
    """A compile-mode child exited non-zero or could not be spawned."""

    def __init__(
        self,
        project: Path,
        returncode: Optional[int],
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.project = project
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        if returncode is None:
            detail = "could not be started"
        else:
            detail = f"exit code {returncode}"
        super().__init__(f"Failed to compile {project} ({detail})")
