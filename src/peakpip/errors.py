"""Error taxonomy for peakpip. Every error ends the current command."""

from typing import Optional


class PeakPipError(Exception):
    """Base class for all errors surfaced to the user."""


class InitializationError(PeakPipError):
    """python/pip executables could not be located."""


class UsageError(PeakPipError):
    """Invalid argument combination for a verb."""


class NetworkError(PeakPipError):
    """Transport-level failure talking to the package index."""


class NotFoundError(PeakPipError):
    """The index answered with a non-2xx status."""


class DecodeError(PeakPipError):
    """The index response body could not be decoded into a record."""


class SubprocessError(PeakPipError):
    """The wrapped package manager exited non-zero or could not be started."""

    def __init__(self, message: str, returncode: Optional[int] = None) -> None:
        super().__init__(message)
        self.returncode = returncode
