"""Shared fakes: an in-memory remote resource, transports over it and a clock."""

from contextlib import asynccontextmanager, contextmanager
from datetime import datetime, timedelta, timezone

import pytest
from requests.structures import CaseInsensitiveDict

from rtail.core.util import format_http_date, parse_http_date
from rtail.io.base import TransportResponse

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


class FakeRemote:
    """In-memory resource answering like a range-capable HTTP server."""

    def __init__(self, data=b"", *, last_modified=None, max_age=None, clock=None, size_header=True):
        self.data = bytearray(data)
        self.last_modified = last_modified
        self.max_age = max_age
        self.clock = clock
        self.size_header = size_header
        self.status = None          # (code, reason) forced on every GET
        self.probe_error = None     # exception raised by the probe
        self.requests = []          # (method, headers)

    @property
    def gets(self):
        return [headers for method, headers in self.requests if method == "GET"]

    def probe(self):
        self.requests.append(("HEAD", {}))
        if self.probe_error is not None:
            raise self.probe_error
        return len(self.data) if self.size_header else None

    def respond(self, headers):
        self.requests.append(("GET", dict(headers)))
        out = CaseInsensitiveDict()
        if self.status is not None:
            code, reason = self.status
            return TransportResponse(code, reason, out, [])
        if self.last_modified is not None:
            out["Last-Modified"] = format_http_date(self.last_modified)
        if self.max_age is not None:
            out["Expires"] = format_http_date(self.clock() + timedelta(seconds=self.max_age))

        since = headers.get("If-Modified-Since")
        if since and self.last_modified is not None and self.last_modified <= parse_http_date(since):
            return TransportResponse(304, "Not Modified", out, [])

        rng = headers.get("Range")
        start = int(rng[len("bytes="):-1]) if rng else 0
        body = bytes(self.data[start:])
        chunks = [body[i:i + 7] for i in range(0, len(body), 7)]
        return TransportResponse(206 if rng else 200, "Partial Content" if rng else "OK", out, chunks)


class FakeTransport:
    def __init__(self, remote):
        self.remote = remote
        self.closed = False

    def probe_size(self, url):
        return self.remote.probe()

    @contextmanager
    def conditional_get(self, url, headers):
        response = self.remote.respond(headers)
        response.body = iter(response.body)
        yield response

    def close(self):
        self.closed = True


async def _aiter(chunks):
    for chunk in chunks:
        yield chunk


class FakeAsyncTransport:
    def __init__(self, remote):
        self.remote = remote
        self.closed = False

    async def probe_size(self, url):
        return self.remote.probe()

    @asynccontextmanager
    async def conditional_get(self, url, headers):
        response = self.remote.respond(headers)
        response.body = _aiter(response.body)
        yield response

    async def aclose(self):
        self.closed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def payload():
    """2048 bytes of distinguishable content."""
    return bytes(range(256)) * 8
