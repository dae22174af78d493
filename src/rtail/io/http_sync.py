"""Synchronous HTTP transport using requests."""

import logging
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional, TextIO

import requests
from urllib3.exceptions import HTTPError as Urllib3Error

from ..core.config import ClientConfig
from ..core.model import RemoteError, TransportError
from .base import TransportResponse, dump_exchange, parse_content_length

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _status_line(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


class HTTPTransport:
    """Synchronous HTTP transport; one pooled session per instance."""

    def __init__(self, config: Optional[ClientConfig] = None, dump_stream: Optional[TextIO] = None):
        self.config = config or ClientConfig()
        self.requests_made = 0
        self._dump_stream = dump_stream
        self._session = requests.Session()
        if self.config.auth:
            self._session.auth = self.config.auth
        if self.config.user_agent:
            self._session.headers["User-Agent"] = self.config.user_agent
        # offsets count raw bytes, so bodies must arrive unencoded
        self._session.headers["Accept-Encoding"] = "identity"

    def _send(self, method: str, url: str, headers: Mapping[str, str], stream: bool = False) -> requests.Response:
        """Send one request; every requests failure becomes a TransportError."""
        prepared = None
        try:
            prepared = self._session.prepare_request(requests.Request(method, url, headers=dict(headers)))
            self.requests_made += 1
            logger.debug("%s %s %s", method, url, dict(headers))
            response = self._session.send(
                prepared, stream=stream, timeout=self.config.timeout,
                verify=self.config.verify, allow_redirects=True,
            )
        except requests.RequestException as e:
            if self.config.dump_headers and prepared is not None:
                dump_exchange(method, url, prepared.headers, None, None, self._dump_stream)
            raise TransportError(f"{method} {url} failed: {e}") from e

        if self.config.dump_headers:
            dump_exchange(method, response.request.url, response.request.headers,
                          _status_line(response), response.headers, self._dump_stream)
        return response

    def probe_size(self, url: str) -> Optional[int]:
        """Perform a HEAD request and return Content-Length, if any."""
        response = self._send("HEAD", url, {})
        try:
            if response.status_code >= 400:
                raise RemoteError(_status_line(response), response.status_code)
            return parse_content_length(response.headers.get("content-length"))
        finally:
            response.close()

    def _iter_body(self, response: requests.Response) -> Iterator[bytes]:
        # bytes as sent; a Content-Encoding must not change the offset arithmetic
        try:
            for chunk in response.raw.stream(CHUNK_SIZE, decode_content=False):
                if chunk:
                    yield chunk
        except (Urllib3Error, requests.RequestException) as e:
            raise TransportError(f"reading {response.url} failed: {e}") from e

    @contextmanager
    def conditional_get(self, url: str, headers: Mapping[str, str]) -> Iterator[TransportResponse]:
        response = self._send("GET", url, headers, stream=True)
        try:
            yield TransportResponse(
                status_code=response.status_code,
                reason=response.reason or "",
                headers=response.headers,
                body=self._iter_body(response),
            )
        finally:
            response.close()

    def close(self):
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def open_http_transport(config: Optional[ClientConfig] = None) -> HTTPTransport:
    """Create a synchronous HTTP transport."""
    return HTTPTransport(config)
