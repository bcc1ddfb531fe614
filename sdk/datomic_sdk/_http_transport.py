"""
Internal HTTP transport for the Datomic REST SDK.

This module provides the low-level HTTP layer on top of httpx.
It is internal to the SDK and should not be used directly by users,
except to inject a configured transport into connect() or
create_database().

Connection pooling, TLS and timeouts are left to httpx.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from .errors import TransportError

if TYPE_CHECKING:
    from .config import DatomicSettings

logger = logging.getLogger(__name__)

EDN_CONTENT_TYPE = "application/edn"


@dataclass(frozen=True)
class RawResponse:
    """Undecoded response from the REST service."""

    status: int
    text: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HttpTransport:
    """HTTP transport for the Datomic REST service.

    Wraps a single httpx.AsyncClient. Every request asks for EDN.
    Transport-level failures are raised as TransportError; HTTP status
    codes are returned untouched for the caller to interpret.

    Example:
        >>> async with HttpTransport(timeout=5.0) as transport:
        ...     conn = connect("localhost", 8888, "free", "mbrainz", transport=transport)
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = 30.0,
        accept: str = EDN_CONTENT_TYPE,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Preconfigured httpx client (owned by the caller)
            timeout: Request timeout in seconds for the default client
            accept: Accept header sent with every request
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = {"Accept": accept}

    @classmethod
    def from_settings(cls, settings: DatomicSettings) -> HttpTransport:
        """Build a transport from SDK settings."""
        return cls(timeout=settings.timeout, accept=settings.accept)

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        form: Mapping[str, str] | None = None,
    ) -> RawResponse:
        """Perform one HTTP request.

        Args:
            method: HTTP method (GET or POST)
            url: Absolute URL
            params: Query-string parameters, already rendered
            form: Form fields, sent url-encoded

        Returns:
            RawResponse with status and body text

        Raises:
            TransportError: If the service could not be reached
        """
        logger.debug(f"{method} {url} params={dict(params or {})}")
        try:
            response = await self._client.request(
                method,
                url,
                params=dict(params) if params else None,
                data=dict(form) if form else None,
                headers=self._headers,
            )
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e!r}")
            raise TransportError(f"Could not reach {url}: {e}", url=url) from e

        return RawResponse(
            status=response.status_code,
            text=response.text,
            url=str(response.url),
            headers=dict(response.headers),
        )

    async def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


# One default transport per event loop: an httpx.AsyncClient pools
# connections on the loop that opened them.
_default_transports: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, HttpTransport] = (
    weakref.WeakKeyDictionary()
)


def get_transport() -> HttpTransport:
    """Get the default transport of the running loop, creating it on first use.

    Raises:
        RuntimeError: If no event loop is running
    """
    loop = asyncio.get_running_loop()
    # Pooled connections may keep a finished loop referenced.
    for stale in [other for other in _default_transports if other.is_closed()]:
        del _default_transports[stale]

    transport = _default_transports.get(loop)
    if transport is None:
        transport = HttpTransport()
        _default_transports[loop] = transport
        logger.debug(f"Created default transport for loop {id(loop):#x}")
    return transport


async def close_default_transport() -> None:
    """Close and forget the default transport of the running loop."""
    transport = _default_transports.pop(asyncio.get_running_loop(), None)
    if transport is not None:
        await transport.close()
