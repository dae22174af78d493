from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class SizeSpec:
    magnitude: int
    anchored_from_start: bool = False   # True for "+N": absolute offset


@dataclass(slots=True)
class FetchState:
    resource: str
    offset: int = 0
    last_modified: datetime | None = None
    expires: datetime | None = None


class TailError(RuntimeError):
    """Base class for every error that aborts a tail run."""
    pass


class ParseError(TailError):
    """Raised when a size specification cannot be parsed."""
    pass


class TransportError(TailError, IOError):
    """Raised when a request cannot be completed (connection, TLS, timeout)."""
    pass


class RemoteError(TailError):
    """Raised when the server answers with a status other than 2xx or 304."""

    def __init__(self, status_line: str, status_code: int | None = None):
        super().__init__(status_line)
        self.status_line = status_line
        self.status_code = status_code


class SinkError(TailError, IOError):
    """Raised when the output cannot be created or written."""
    pass
