"""Base protocols and shared types for the transport layer."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import (Any, AsyncContextManager, AsyncIterator, ContextManager, Iterable,
                    Iterator, Mapping, Protocol, TextIO, runtime_checkable)


@dataclass(slots=True)
class TransportResponse:
    """Status, headers and a chunked body of one GET."""

    status_code: int
    reason: str
    headers: Mapping[str, str]          # case-insensitive
    body: Iterator[bytes] | AsyncIterator[bytes]

    @property
    def status_line(self) -> str:
        return f"{self.status_code} {self.reason}".strip()


@runtime_checkable
class Transport(Protocol):
    """Protocol for synchronous transports."""

    def probe_size(self, url: str) -> int | None:
        """Return the resource's total size from a metadata-only request.
        None when the response carries no usable size.
        """
        ...

    def conditional_get(self, url: str, headers: Mapping[str, str]) -> ContextManager[TransportResponse]:
        """GET `url` with the extra `headers`; the context owns the connection."""
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Protocol for asynchronous transports."""

    async def probe_size(self, url: str) -> int | None:
        ...

    def conditional_get(self, url: str, headers: Mapping[str, str]) -> AsyncContextManager[TransportResponse]:
        ...


def parse_content_length(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        size = int(value.strip())
    except ValueError:
        return None
    return size if size >= 0 else None


def _write_headers(stream: TextIO, headers: Iterable[tuple[str, Any]]) -> None:
    for name, value in headers:
        stream.write(f"{name}: {value}\r\n")


def dump_exchange(method: str, url: str, request_headers: Mapping[str, Any],
                  status_line: str | None, response_headers: Mapping[str, Any] | None,
                  stream: TextIO | None = None) -> None:
    """Write a request and (if there was one) its response header block."""
    stream = stream if stream is not None else sys.stderr
    stream.write(f"\n-- REQUEST: {method} {url}\n")
    stream.write("-- REQUEST HEADERS BEGIN --\n")
    _write_headers(stream, request_headers.items())
    stream.write("-- REQUEST HEADERS END --\n\n")
    if status_line is None:
        stream.write("-- RESPONSE: none\n\n")
    else:
        stream.write(f"-- RESPONSE: {status_line}\n")
        stream.write("-- RESPONSE HEADERS BEGIN --\n")
        _write_headers(stream, (response_headers or {}).items())
        stream.write("-- RESPONSE HEADERS END --\n\n")
    stream.flush()
