"""
httpx-backed transport.
"""
import logging
import os
from typing import Optional, Union

import httpx

from .config import TimeoutConfig, normalize_timeout
from .request import Request
from .types import TransportResponse

logger = logging.getLogger("fetch_network.transport")


def _is_ssl_verify_disabled_by_env() -> bool:
    """
    Check if SSL verification is disabled via environment variables.

    Returns True if any of these are set:
    - NODE_TLS_REJECT_UNAUTHORIZED=0
    - SSL_CERT_VERIFY=0
    """
    node_tls = os.environ.get("NODE_TLS_REJECT_UNAUTHORIZED", "")
    ssl_cert_verify = os.environ.get("SSL_CERT_VERIFY", "")
    return node_tls == "0" or ssl_cert_verify == "0"


def to_httpx_timeout(timeout: TimeoutConfig) -> httpx.Timeout:
    return httpx.Timeout(
        connect=timeout.connect,
        read=timeout.read,
        write=timeout.write,
        pool=timeout.connect,
    )


class HttpxTransport:
    """Sends ``Request`` values through an ``httpx.AsyncClient``.

    Errors raised by httpx propagate unchanged; the network wraps them.

    Example:
        transport = HttpxTransport(timeout=10.0)
        response = await transport.send(Request(url="https://example.com/"))
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: Union[TimeoutConfig, float, None] = None,
        verify: Optional[bool] = None,
    ) -> None:
        self._timeout = normalize_timeout(timeout)
        if client is not None:
            self._client = client
            self._owns_client = False
        else:
            if verify is None:
                # NODE_TLS_REJECT_UNAUTHORIZED=0 or SSL_CERT_VERIFY=0 disables SSL verification
                verify = not _is_ssl_verify_disabled_by_env()
            self._client = httpx.AsyncClient(timeout=to_httpx_timeout(self._timeout), verify=verify)
            self._owns_client = True
        self._closed = False

    def build_httpx_request(self, request: Request) -> httpx.Request:
        extensions = dict(request.extensions)
        if request.timeout is not None:
            extensions["timeout"] = httpx.Timeout(request.timeout).as_dict()
        return self._client.build_request(
            method=request.method,
            url=request.url,
            headers=list(request.headers),
            content=request.body,
            extensions=extensions or None,
        )

    async def send(self, request: Request) -> TransportResponse:
        if self._closed:
            raise RuntimeError("Transport has been closed")

        httpx_request = self.build_httpx_request(request)
        logger.debug(f"HttpxTransport.send: {httpx_request.method} {httpx_request.url}")

        # None defers to the client's own redirect setting
        follow_redirects = (
            httpx.USE_CLIENT_DEFAULT if request.follow_redirects is None else request.follow_redirects
        )
        response = await self._client.send(httpx_request, follow_redirects=follow_redirects)
        try:
            content = await response.aread()
        finally:
            await response.aclose()

        return TransportResponse(
            status_code=response.status_code,
            content=content,
            headers=tuple(response.headers.multi_items()),
            url=str(response.url),
            reason_phrase=response.reason_phrase or "",
        )

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        self._closed = True
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
