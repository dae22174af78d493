"""Local file transports that answer like a range-capable HTTP server."""

import asyncio
import os
from contextlib import asynccontextmanager, contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, BinaryIO, Iterator, Mapping, Optional, Union
from urllib.parse import unquote, urlparse

from requests.structures import CaseInsensitiveDict

from ..core.model import TransportError
from ..core.util import format_http_date, parse_http_date
from .base import TransportResponse

CHUNK_SIZE = 64 * 1024


def _to_path(source: Union[Path, str]) -> Path:
    source_str = str(source)
    if source_str.startswith("file://"):
        return Path(unquote(urlparse(source_str).path))
    return Path(source_str)


def _range_start(headers: Mapping[str, str]) -> int:
    """Start offset of an open-ended ``bytes=N-`` range, 0 without one."""
    value = CaseInsensitiveDict(headers).get("range")
    if not value or not value.startswith("bytes="):
        return 0
    start, _, _ = value[len("bytes="):].partition("-")
    try:
        return max(int(start), 0)
    except ValueError:
        return 0


def _mtime(st: os.stat_result) -> datetime:
    # HTTP dates have second resolution
    return datetime.fromtimestamp(int(st.st_mtime), tz=timezone.utc)


class LocalTransport:
    """Synchronous transport for local paths and ``file://`` URLs."""

    def __init__(self):
        self.requests_made = 0

    def _stat(self, source) -> os.stat_result:
        self.requests_made += 1
        try:
            return os.stat(_to_path(source))
        except OSError as e:
            raise TransportError(f"cannot stat {source}: {e}") from e

    def probe_size(self, url: str) -> Optional[int]:
        return self._stat(url).st_size

    def _respond(self, url: str, headers: Mapping[str, str]) -> tuple[int, str, CaseInsensitiveDict, int, int]:
        """Return (status, reason, response headers, body start, body length)."""
        st = self._stat(url)
        last_modified = _mtime(st)
        out = CaseInsensitiveDict({"Last-Modified": format_http_date(last_modified)})

        start = _range_start(headers)
        since = CaseInsensitiveDict(headers).get("if-modified-since")
        if since:
            since_dt = parse_http_date(since)
            # mtime has second resolution; bytes past `start` still count as modified
            if since_dt is not None and last_modified <= since_dt and start >= st.st_size:
                return 304, "Not Modified", out, 0, 0

        if start and start >= st.st_size:
            out["Content-Range"] = f"bytes */{st.st_size}"
            return 416, "Requested Range Not Satisfiable", out, 0, 0

        length = max(st.st_size - start, 0)
        out["Content-Length"] = str(length)
        if start:
            out["Content-Range"] = f"bytes {start}-{st.st_size - 1}/{st.st_size}"
            return 206, "Partial Content", out, start, length
        return 200, "OK", out, 0, length

    @staticmethod
    def _read(f: BinaryIO, remaining: int) -> bytes:
        try:
            return f.read(min(CHUNK_SIZE, remaining))
        except OSError as e:
            raise TransportError(f"cannot read {f.name}: {e}") from e

    def _iter_file(self, f: BinaryIO, length: int) -> Iterator[bytes]:
        remaining = length
        while remaining > 0:
            chunk = self._read(f, remaining)
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk

    def _open(self, url: str, start: int) -> BinaryIO:
        try:
            f = open(_to_path(url), "rb")
        except OSError as e:
            raise TransportError(f"cannot open {url}: {e}") from e
        f.seek(start)
        return f

    @contextmanager
    def conditional_get(self, url: str, headers: Mapping[str, str]) -> Iterator[TransportResponse]:
        status, reason, out, start, length = self._respond(url, headers)
        if not length:
            yield TransportResponse(status, reason, out, iter(()))
            return
        f = self._open(url, start)
        try:
            yield TransportResponse(status, reason, out, self._iter_file(f, length))
        finally:
            f.close()

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class LocalAsyncTransport:
    """Asynchronous local transport - thin wrapper around the sync one."""

    def __init__(self):
        self._sync_transport = LocalTransport()

    @property
    def requests_made(self) -> int:
        return self._sync_transport.requests_made

    async def probe_size(self, url: str) -> Optional[int]:
        return await asyncio.to_thread(self._sync_transport.probe_size, url)

    async def _aiter_file(self, f: BinaryIO, length: int) -> AsyncIterator[bytes]:
        remaining = length
        while remaining > 0:
            chunk = await asyncio.to_thread(LocalTransport._read, f, remaining)
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk

    @asynccontextmanager
    async def conditional_get(self, url: str, headers: Mapping[str, str]) -> AsyncIterator[TransportResponse]:
        status, reason, out, start, length = await asyncio.to_thread(self._sync_transport._respond, url, headers)
        if not length:
            yield TransportResponse(status, reason, out, _empty_body())
            return
        f = await asyncio.to_thread(self._sync_transport._open, url, start)
        try:
            yield TransportResponse(status, reason, out, self._aiter_file(f, length))
        finally:
            await asyncio.to_thread(f.close)

    async def aclose(self):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


async def _empty_body() -> AsyncIterator[bytes]:
    return
    yield


def open_local_transport() -> LocalTransport:
    """Create a synchronous local transport."""
    return LocalTransport()


async def open_local_transport_async() -> LocalAsyncTransport:
    """Create an asynchronous local transport."""
    return LocalAsyncTransport()
