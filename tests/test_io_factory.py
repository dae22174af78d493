"""Tests for transport factory functions."""

import pytest

from rtail.core.config import ClientConfig
from rtail.io import AsyncTransport, Transport, open_transport, open_transport_async
from rtail.io.http_async import AsyncHTTPTransport
from rtail.io.http_sync import HTTPTransport
from rtail.io.local import LocalAsyncTransport, LocalTransport


class TestFactoryFunctions:
    """Test the main factory functions."""

    @pytest.mark.parametrize("url", ["http://example.com/app.log", "https://example.com/app.log"])
    def test_open_transport_http(self, url):
        """HTTP(S) URLs get the requests transport, configured from ClientConfig."""
        config = ClientConfig(user="bob", password="pw")
        transport = open_transport(url, config)
        assert isinstance(transport, HTTPTransport)
        assert transport.config is config
        assert isinstance(transport, Transport)
        transport.close()

    def test_open_transport_local(self, tmp_path):
        """Paths and file:// URLs get the local transport."""
        assert isinstance(open_transport(str(tmp_path / "a.log")), LocalTransport)
        assert isinstance(open_transport((tmp_path / "a.log").as_uri()), LocalTransport)

    @pytest.mark.asyncio
    async def test_open_transport_async_http(self):
        transport = await open_transport_async("https://example.com/app.log")
        assert isinstance(transport, AsyncHTTPTransport)
        assert isinstance(transport, AsyncTransport)
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_open_transport_async_local(self, tmp_path):
        transport = await open_transport_async(str(tmp_path / "a.log"))
        assert isinstance(transport, LocalAsyncTransport)
