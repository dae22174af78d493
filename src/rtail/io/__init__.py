"""Transport layer for rtail - answers probe and conditional GET requests."""

# Re-export these for import convenience
from .base import Transport, AsyncTransport, TransportResponse
from .local import open_local_transport, open_local_transport_async
from .http_sync import open_http_transport
from .http_async import open_http_transport_async


def _is_http(source) -> bool:
    return str(source).startswith(('http://', 'https://'))


def open_transport(source, config=None):
    """Factory function to create the appropriate Transport for a resource."""
    if _is_http(source):
        return open_http_transport(config)
    return open_local_transport()


async def open_transport_async(source, config=None):
    """Factory function to create the appropriate AsyncTransport for a resource."""
    if _is_http(source):
        return await open_http_transport_async(config)
    return await open_local_transport_async()
