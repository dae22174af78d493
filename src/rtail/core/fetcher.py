"""One conditional, ranged GET against the tailed resource."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import BinaryIO, Callable, Dict, Mapping

from .model import FetchState, RemoteError
from .sink import flush_sink, write_chunk
from .util import format_http_date, parse_http_date, utcnow

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def is_fresh(state: FetchState, now: datetime) -> bool:
    """True while a previous response's Expires is strictly in the future."""
    return state.expires is not None and now < state.expires


def request_headers(state: FetchState) -> Dict[str, str]:
    """Conditional and range headers for the next GET.

    No Range is sent at offset 0 so a cold start gets the whole resource.
    """
    headers: Dict[str, str] = {}
    if state.last_modified is not None:
        headers["If-Modified-Since"] = format_http_date(state.last_modified)
    if state.offset > 0:
        headers["Range"] = f"bytes={state.offset}-"
    return headers


def _remember_validators(state: FetchState, headers: Mapping[str, str]) -> None:
    # an unparseable header keeps the previous value
    if lm := headers.get("last-modified"):
        if (parsed := parse_http_date(lm)) is not None:
            state.last_modified = parsed
    if ex := headers.get("expires"):
        if (parsed := parse_http_date(ex)) is not None:
            state.expires = parsed


def _check_status(state: FetchState, response) -> bool:
    """Return True when the response carries a body to write."""
    if 200 <= response.status_code < 300:
        _remember_validators(state, response.headers)
        return True
    if response.status_code == 304:
        logger.debug("%s: not modified", state.resource)
        return False
    raise RemoteError(response.status_line, response.status_code)


def fetch(state: FetchState, sink: BinaryIO, transport, *, clock: Clock = utcnow) -> int:
    """Write the resource's bytes past ``state.offset`` to `sink`.

    Returns the number of bytes written; ``state`` is updated in place.
    """
    if is_fresh(state, clock()):
        logger.debug("%s: fresh until %s, skipping", state.resource, state.expires)
        return 0

    with transport.conditional_get(state.resource, request_headers(state)) as response:
        if not _check_status(state, response):
            return 0
        written = 0
        try:
            for chunk in response.body:
                written += write_chunk(sink, chunk)
        finally:
            state.offset += written
    flush_sink(sink)
    logger.debug("%s: wrote %d bytes, offset now %d", state.resource, written, state.offset)
    return written


async def fetch_async(state: FetchState, sink: BinaryIO, transport, *, clock: Clock = utcnow) -> int:
    """Async twin of `fetch` for an AsyncTransport."""
    if is_fresh(state, clock()):
        logger.debug("%s: fresh until %s, skipping", state.resource, state.expires)
        return 0

    async with transport.conditional_get(state.resource, request_headers(state)) as response:
        if not _check_status(state, response):
            return 0
        written = 0
        try:
            async for chunk in response.body:
                written += write_chunk(sink, chunk)
        finally:
            state.offset += written
    flush_sink(sink)
    logger.debug("%s: wrote %d bytes, offset now %d", state.resource, written, state.offset)
    return written
