"""Asynchronous HTTP transport using httpx."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Mapping, Optional, TextIO

import httpx

from ..core.config import ClientConfig
from ..core.model import RemoteError, TransportError
from .base import TransportResponse, dump_exchange, parse_content_length

logger = logging.getLogger(__name__)


def _status_line(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".strip()


class AsyncHTTPTransport:
    """Asynchronous HTTP transport; owns one httpx AsyncClient."""

    def __init__(self, config: Optional[ClientConfig] = None, dump_stream: Optional[TextIO] = None,
                 client: Optional[httpx.AsyncClient] = None):
        self.config = config or ClientConfig()
        self.requests_made = 0
        self._dump_stream = dump_stream
        if client is None:
            headers = {"Accept-Encoding": "identity"}
            if self.config.user_agent:
                headers["User-Agent"] = self.config.user_agent
            client = httpx.AsyncClient(
                auth=self.config.auth,
                headers=headers,
                verify=self.config.verify,
                timeout=httpx.Timeout(self.config.read_timeout, connect=self.config.connect_timeout),
                follow_redirects=True,
            )
        self._client = client

    async def _send(self, method: str, url: str, headers: Mapping[str, str], stream: bool = False) -> httpx.Response:
        """Send one request; every httpx request failure becomes a TransportError."""
        request = None
        try:
            request = self._client.build_request(method, url, headers=dict(headers))
            self.requests_made += 1
            logger.debug("%s %s %s", method, url, dict(headers))
            response = await self._client.send(request, stream=stream)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            if self.config.dump_headers and request is not None:
                dump_exchange(method, url, request.headers, None, None, self._dump_stream)
            raise TransportError(f"{method} {url} failed: {e}") from e

        if self.config.dump_headers:
            dump_exchange(method, response.request.url, response.request.headers,
                          _status_line(response), response.headers, self._dump_stream)
        return response

    async def probe_size(self, url: str) -> Optional[int]:
        """Perform a HEAD request and return Content-Length, if any."""
        response = await self._send("HEAD", url, {})
        try:
            if response.status_code >= 400:
                raise RemoteError(_status_line(response), response.status_code)
            return parse_content_length(response.headers.get("content-length"))
        finally:
            await response.aclose()

    async def _iter_body(self, response: httpx.Response) -> AsyncIterator[bytes]:
        try:
            async for chunk in response.aiter_raw():
                if chunk:
                    yield chunk
        except httpx.RequestError as e:
            raise TransportError(f"reading {response.url} failed: {e}") from e

    @asynccontextmanager
    async def conditional_get(self, url: str, headers: Mapping[str, str]) -> AsyncIterator[TransportResponse]:
        response = await self._send("GET", url, headers, stream=True)
        try:
            yield TransportResponse(
                status_code=response.status_code,
                reason=response.reason_phrase,
                headers=response.headers,
                body=self._iter_body(response),
            )
        finally:
            await response.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


async def open_http_transport_async(config: Optional[ClientConfig] = None) -> AsyncHTTPTransport:
    """Create an asynchronous HTTP transport."""
    return AsyncHTTPTransport(config)
