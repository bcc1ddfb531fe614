"""
Immutable database values.

A DatabaseValue names a snapshot of a remote database: a Connection plus
the filters as-of, since, history, limit and offset. Every filter method
returns a new value; nothing is ever modified in place, so values can be
shared freely between concurrent operations.

Example:
    >>> latest = db(conn)
    >>> past = latest.as_of(1000)
    >>> latest.as_of_t is None and past.as_of_t == 1000
    True

Invariants:
    - Filter methods return new values (dataclasses.replace)
    - Re-applying a filter overwrites only that filter
    - history cannot be switched back off
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any

from . import codec
from .codec import Keyword
from .connection import Connection
from .errors import DecodeError
from .result import ResultChannel

logger = logging.getLogger(__name__)

DB_ALIAS = Keyword("db/alias")
AS_OF = Keyword("as-of")
SINCE = Keyword("since")
BASIS_T = Keyword("basis-t")


@dataclass(frozen=True)
class DatabaseValue:
    """Filterable snapshot descriptor of a remote database.

    Attributes:
        connection: Connection the value belongs to
        as_of_t: Point (t, tx id or instant) the value is as of, inclusive
        since_t: Point the value starts after, exclusive
        is_history: Whether this is a history value (all assertions and
            retractions; meaningful for datoms and index_range)
        result_limit: Maximum number of results for query and datoms
        result_offset: Number of results to skip for query and datoms
    """

    connection: Connection
    as_of_t: Any = None
    since_t: Any = None
    is_history: bool = False
    result_limit: int | None = None
    result_offset: int | None = None

    def as_of(self, t: Any) -> DatabaseValue:
        """Value of the database as of point t, inclusive."""
        return dataclasses.replace(self, as_of_t=t)

    def since(self, t: Any) -> DatabaseValue:
        """Value of the database since point t, exclusive."""
        return dataclasses.replace(self, since_t=t)

    def history(self) -> DatabaseValue:
        """History value containing all assertions and retractions."""
        return dataclasses.replace(self, is_history=True)

    def limit(self, n: int) -> DatabaseValue:
        return dataclasses.replace(self, result_limit=n)

    def offset(self, n: int) -> DatabaseValue:
        return dataclasses.replace(self, result_offset=n)

    @property
    def db_alias(self) -> str:
        return self.connection.db_alias

    def implicit_args(self) -> dict[Keyword, Any]:
        """Database descriptor passed as the first query input."""
        args: dict[Keyword, Any] = {DB_ALIAS: self.db_alias}
        if self.as_of_t is not None:
            args[AS_OF] = self.as_of_t
        if self.since_t is not None:
            args[SINCE] = self.since_t
        return args

    def implicit_query_params(self) -> dict[str, Any]:
        """history/limit/offset query-string parameters that are set."""
        params: dict[str, Any] = {}
        if self.is_history:
            params["history"] = True
        if self.result_limit is not None:
            params["limit"] = self.result_limit
        if self.result_offset is not None:
            params["offset"] = self.result_offset
        return params

    # Endpoints

    def query_endpoint(self) -> str:
        return self.connection.url_for("/api/query")

    def entity_endpoint(self) -> str:
        return self.connection.url_for(f"/data/{self.db_alias}/-/entity")

    def datoms_endpoint(self) -> str:
        return self.connection.url_for(f"/data/{self.db_alias}/-/datoms")

    def basis_endpoint(self) -> str:
        point = "-" if self.as_of_t is None else codec.to_query_value(self.as_of_t)
        return self.connection.url_for(f"/data/{self.db_alias}/{point}/")

    def basis_t(self) -> ResultChannel[Any]:
        """Resolve the t of the most recent transaction visible here.

        When as-of is set the answer is known and delivered without any
        request. Otherwise one GET is issued and :basis-t is read from
        the response. Nothing is cached between calls.
        """
        if self.as_of_t is not None:
            logger.debug(f"basis-t for {self.db_alias} taken from as-of {self.as_of_t!r}")
            return ResultChannel.resolved(self.as_of_t)
        return ResultChannel.spawn(self._fetch_basis_t())

    async def _fetch_basis_t(self) -> Any:
        body = await self.connection.fetch("GET", self.basis_endpoint())
        try:
            return body[BASIS_T]
        except (KeyError, TypeError) as e:
            raise DecodeError("Response has no :basis-t", text=repr(body)) from e


def db(connection: Connection) -> DatabaseValue:
    """Create an unfiltered database value that can be queried."""
    return DatabaseValue(connection)
