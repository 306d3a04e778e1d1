"""Exception types raised by the mirage handlers.

Everything a handler can fail with at runtime derives from `MirageError`, so the
CLI can turn any of them into a log line and an exit code.
"""

from __future__ import annotations


class MirageError(Exception):
    """Base class for runtime failures. Argument errors are left to argparse."""

    exit_code = 1


class DecodeError(MirageError):
    """The input file could not be opened or decoded as an image."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to open INFILE {path}: {reason}")


class WriteError(MirageError):
    """The output file could not be encoded or written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed writing OUTFILE {path}: {reason}")


class ProcessingError(MirageError):
    """libvips rejected the requested transformation."""
