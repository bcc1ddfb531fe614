"""
Functions mirroring datomic.api, backed by a Datomic REST service.

Every function that talks to the service returns a ResultChannel; await
it to get Ok(value) or Err(error).

Example:
    >>> from datomic_sdk import api
    >>> from datomic_sdk.codec import kw
    >>>
    >>> conn = api.connect("localhost", 8888, "free", "mbrainz")
    >>> await api.transact(conn, [[kw("db/add"), api.tempid("db.part/user"), kw("artist/name"), "Ann"]])
    >>> result = await api.q("[:find ?n :where [_ :artist/name ?n]]", api.db(conn))
    >>> names = result.unwrap()
"""

from __future__ import annotations

from typing import Any

from .connection import connect, create_database
from .database import DatabaseValue, db
from .executors import datoms, entid, entity, ident, index_range, q, transact
from .result import ResultChannel
from .tags import tempid

__all__ = [
    "as_of",
    "as_of_t",
    "basis_t",
    "connect",
    "create_database",
    "datoms",
    "db",
    "entid",
    "entity",
    "history",
    "ident",
    "index_range",
    "limit",
    "offset",
    "q",
    "since",
    "since_t",
    "tempid",
    "transact",
]


def as_of(database: DatabaseValue, t: Any) -> DatabaseValue:
    """Value of the database as of point t, inclusive.

    t can be a transaction number, transaction id, or instant.
    """
    return database.as_of(t)


def since(database: DatabaseValue, t: Any) -> DatabaseValue:
    """Value of the database since point t, exclusive.

    t can be a transaction number, transaction id, or instant.
    """
    return database.since(t)


def history(database: DatabaseValue) -> DatabaseValue:
    """Database value containing all assertions and retractions across
    time, for use with datoms and index_range."""
    return database.history()


def limit(database: DatabaseValue, n: int) -> DatabaseValue:
    """Database value limiting query and datoms results to n."""
    return database.limit(n)


def offset(database: DatabaseValue, n: int) -> DatabaseValue:
    """Database value skipping the first n query and datoms results."""
    return database.offset(n)


def as_of_t(database: DatabaseValue) -> Any:
    """The as-of point, or None."""
    return database.as_of_t


def since_t(database: DatabaseValue) -> Any:
    """The since point, or None."""
    return database.since_t


def basis_t(database: DatabaseValue) -> ResultChannel[Any]:
    """t of the most recent transaction available via this value."""
    return database.basis_t()

