"""The follow loop: fetch once, or fetch, wait, fetch ... until a failure."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Awaitable, BinaryIO, Callable, Optional

from .fetcher import Clock, fetch, fetch_async
from .model import FetchState
from .util import utcnow

logger = logging.getLogger(__name__)

Wait = Callable[[int], bool]                    # True -> stop following
AsyncWait = Callable[[int], Awaitable[bool]]


def check_interval(interval: Optional[int]) -> None:
    if interval is not None and (isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0):
        raise ValueError(f"invalid interval {interval!r}: must be a whole number of seconds > 0")


def interval_waiter(stop: Optional[threading.Event] = None) -> Wait:
    """Sleep for the interval; with `stop`, return early (True) once it is set."""
    if stop is not None:
        return stop.wait

    def _sleep(seconds: int) -> bool:
        time.sleep(seconds)
        return False
    return _sleep


async def _async_sleep(seconds: int) -> bool:
    await asyncio.sleep(seconds)
    return False


def follow(state: FetchState, sink: BinaryIO, transport, *, interval: Optional[int] = None,
           wait: Optional[Wait] = None, clock: Clock = utcnow) -> int:
    """Run the fetch loop and return the total number of bytes written.

    Without `interval` exactly one fetch is made. With it, the loop
    fetches every `interval` seconds until a fetch fails (the error
    propagates) or `wait` asks to stop.
    """
    check_interval(interval)
    wait = wait or interval_waiter()
    total = fetch(state, sink, transport, clock=clock)
    while interval is not None:
        if wait(interval):
            logger.debug("%s: stopped while waiting", state.resource)
            break
        total += fetch(state, sink, transport, clock=clock)
    return total


async def follow_async(state: FetchState, sink: BinaryIO, transport, *, interval: Optional[int] = None,
                       wait: Optional[AsyncWait] = None, clock: Clock = utcnow) -> int:
    """Async twin of `follow`; cancelling the task ends the loop."""
    check_interval(interval)
    wait = wait or _async_sleep
    total = await fetch_async(state, sink, transport, clock=clock)
    while interval is not None:
        if await wait(interval):
            logger.debug("%s: stopped while waiting", state.resource)
            break
        total += await fetch_async(state, sink, transport, clock=clock)
    return total
