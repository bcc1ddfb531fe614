"""
Connections to a Datomic REST service.

This module provides:
- Connection: immutable handle on one remote database
- connect: build a Connection (no I/O)
- create_database: create or connect to a database, asynchronously

Example:
    >>> conn = connect("localhost", 8888, "free", "mbrainz")
    >>> result = await create_database("localhost", 8888, "free", "scratch")
    >>> if result.is_ok():
    ...     conn = result.value

Invariants:
    - A Connection never changes after construction
    - db_alias is always "<alias>/<db_name>"
    - connect() performs no I/O
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from . import codec
from ._http_transport import HttpTransport, RawResponse, get_transport
from .errors import HttpStatusError
from .result import ResultChannel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Connection:
    """Abstract connection to one database behind a REST service.

    Attributes:
        hostname: REST service host
        port: REST service port
        db_alias: "<storage alias>/<database name>"
        transport: HTTP transport to use (the running loop's default if None)
    """

    hostname: str
    port: int
    db_alias: str
    transport: HttpTransport | None = field(default=None, compare=False, repr=False)

    @property
    def base_url(self) -> str:
        return f"http://{self.hostname}:{self.port}"

    def url_for(self, path: str = "") -> str:
        """Absolute URL for a path on the REST service."""
        return f"{self.base_url}{path}"

    def transact_endpoint(self) -> str:
        return self.url_for(f"/data/{self.db_alias}/")

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        form: Mapping[str, str] | None = None,
    ) -> RawResponse:
        """Send one request through this connection's transport.

        params values are rendered with codec.to_query_value; None values
        are dropped.
        """
        transport = self.transport or get_transport()
        return await transport.request(
            method,
            url,
            params=codec.query_params(params) if params else None,
            form=form,
        )

    async def fetch(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        form: Mapping[str, str] | None = None,
    ) -> Any:
        """Send one request and decode its EDN body.

        Raises:
            TransportError: If the service could not be reached
            HttpStatusError: If the status is not 2xx
            DecodeError: If the body is not valid EDN
        """
        response = await self.request(method, url, params=params, form=form)
        if not response.ok:
            logger.warning(f"{method} {url} returned HTTP {response.status}")
            raise HttpStatusError(
                response.status,
                f"{method} {url} returned HTTP {response.status}",
                url=url,
                body=response.text,
            )
        return codec.decode(response.text)


def connect(
    hostname: str,
    port: int,
    alias: str,
    db_name: str,
    *,
    transport: HttpTransport | None = None,
) -> Connection:
    """Create an abstract connection to a Datomic REST service.

    Args:
        hostname: Host of the REST service, e.g. localhost
        port: Port the REST service listens on
        alias: Storage alias configured on the REST service
        db_name: Name of the database being connected to
        transport: Optional transport (defaults to the shared one)

    Returns:
        Connection; nothing is sent over the network
    """
    return Connection(hostname, port, f"{alias}/{db_name}", transport)


def create_database(
    hostname: str,
    port: int,
    alias: str,
    db_name: str,
    *,
    transport: HttpTransport | None = None,
) -> ResultChannel[Connection]:
    """Create or connect to a database via the REST service.

    Takes the same arguments as connect().

    Returns:
        ResultChannel delivering Ok(Connection) on HTTP 200/201, or Err
        with the status (HttpStatusError) or the transport failure.
    """
    conn = connect(hostname, port, alias, db_name, transport=transport)
    return ResultChannel.spawn(_create_database(conn, alias, db_name))


async def _create_database(conn: Connection, alias: str, db_name: str) -> Connection:
    url = conn.url_for(f"/data/{alias}/")
    response = await conn.request("POST", url, form={"db-name": db_name})
    if response.status not in (200, 201):
        logger.warning(f"Could not create or connect to {conn.db_alias}: HTTP {response.status}")
        raise HttpStatusError(
            response.status,
            f"Could not create or connect to db: {response.status}",
            url=url,
            body=response.text,
        )
    logger.info(f"Connected to database {conn.db_alias} at {conn.base_url}")
    return conn
