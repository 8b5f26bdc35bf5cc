"""
Error types raised by the simulator, its loader and the CLI.
"""

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error the simulator reports to the user."""


class InvalidArguments(SchedulerError):
    """The command line was not shaped the way the CLI expects."""


class InputUnreadable(SchedulerError):
    """The workload source could not be opened or read."""


class MalformedRecord(SchedulerError, ValueError):
    """A workload row had the wrong number of fields or a non-integer field."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class EmptyProcessList(SchedulerError, ValueError):
    """An engine was asked to schedule zero processes."""

    def __init__(self, algorithm: str) -> None:
        self.algorithm = algorithm
        super().__init__(f"{algorithm}: cannot schedule an empty process list")
