"""rtail - output the tail of a remote resource, optionally following it as it grows."""

__version__ = "1.2.0"

from .core.model import (SizeSpec, FetchState, TailError, ParseError,       # re-export
                         TransportError, RemoteError, SinkError)
from .core.config import ClientConfig
from .core.sizespec import parse_byte_size
from .core.initiator import initiate, initiate_async
from .core.fetcher import fetch, fetch_async
from .core.follow import check_interval, follow, follow_async, interval_waiter
from .core.sink import open_sink
from .io import open_transport, open_transport_async


def _as_spec(size) -> SizeSpec:
    return size if isinstance(size, SizeSpec) else parse_byte_size(size)


async def tail(resource, *, size="1K", output=None, config: ClientConfig | None = None,
               interval: int | None = None, transport=None) -> int:
    """Tail `resource` asynchronously; returns the number of bytes written.

    With `interval` the resource is polled every `interval` seconds until a
    fetch fails or the task is cancelled.
    """
    spec = _as_spec(size)
    check_interval(interval)
    owned = transport is None
    if owned:
        transport = await open_transport_async(resource, config)
    try:
        state = await initiate_async(resource, spec, transport)
        with open_sink(output) as sink:
            return await follow_async(state, sink, transport, interval=interval)
    finally:
        if owned:
            await transport.aclose()


def tail_sync(resource, *, size="1K", output=None, config: ClientConfig | None = None,
              interval: int | None = None, transport=None, stop=None) -> int:
    """Tail `resource` synchronously; returns the number of bytes written.

    `stop` is an optional threading.Event that ends a follow run cleanly
    while it is waiting for the next poll.
    """
    spec = _as_spec(size)
    check_interval(interval)
    owned = transport is None
    if owned:
        transport = open_transport(resource, config)
    try:
        state = initiate(resource, spec, transport)
        with open_sink(output) as sink:
            return follow(state, sink, transport, interval=interval, wait=interval_waiter(stop))
    finally:
        if owned:
            transport.close()


__all__ = [
    "tail", "tail_sync", "parse_byte_size",
    "initiate", "initiate_async", "fetch", "fetch_async", "follow", "follow_async",
    "SizeSpec", "FetchState", "ClientConfig",
    "TailError", "ParseError", "TransportError", "RemoteError", "SinkError",
]
