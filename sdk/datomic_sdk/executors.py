"""
Query, entity, datoms and transaction execution.

Each operation turns a DatabaseValue (or Connection) plus its arguments
into exactly one HTTP request and decodes the answer. All of them return
a ResultChannel immediately; failures arrive as Err values on that
channel and are never raised to the caller.

Invariants:
    - One request per call (zero for entid/ident given a resolved value)
    - Transaction data given as a string is sent byte-for-byte
    - No retries at this layer
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from edn_format import ImmutableDict, ImmutableList

from . import codec
from .codec import Keyword
from .connection import Connection
from .database import BASIS_T, DatabaseValue, db
from .errors import DecodeError
from .result import ResultChannel

logger = logging.getLogger(__name__)

TX_DATA = Keyword("tx-data")
TEMPIDS = Keyword("tempids")
DB_BEFORE = Keyword("db-before")
DB_AFTER = Keyword("db-after")

ENTID_QUERY = "[:find ?e :in $ ?ident :where [?e :db/ident ?ident]]"
IDENT_QUERY = "[:find ?ident :in $ ?e :where [?e :db/ident ?ident]]"

_SEQUENCE_TYPES = (list, tuple, ImmutableList)
_MAPPING_TYPES = (Mapping, ImmutableDict)


@dataclass(frozen=True)
class TxReport:
    """Result of a transaction.

    Attributes:
        tx_data: Datoms asserted and retracted by the transaction
        tempids: Mapping from request tempids to permanent entity ids
        db_before: Database value as of the basis before the transaction,
            or None when the service did not report it
        db_after: Database value as of the basis after the transaction,
            or None when the service did not report it
    """

    tx_data: list[Any] = field(default_factory=list)
    tempids: dict[Any, Any] = field(default_factory=dict)
    db_before: DatabaseValue | None = None
    db_after: DatabaseValue | None = None


def _expect_sequence(body: Any, what: str) -> list[Any]:
    if not isinstance(body, _SEQUENCE_TYPES):
        raise DecodeError(f"Expected a vector of {what}, got {type(body).__name__}", text=repr(body))
    return list(body)


def _index_name(index: str | Keyword) -> str:
    if isinstance(index, Keyword):
        return index.name
    return index.lstrip(":")


# Query


def q(query: Any, database: DatabaseValue, *inputs: Any) -> ResultChannel[list[tuple[Any, ...]]]:
    """Execute a query against a database value with inputs.

    Args:
        query: Query as EDN text (sent verbatim) or as EDN data
        database: Database value bound to $
        *inputs: Further inputs, bound in :in order after $

    Returns:
        ResultChannel delivering the result tuples
    """
    return ResultChannel.spawn(_query(query, database, inputs))


async def _query(query: Any, database: DatabaseValue, inputs: Sequence[Any]) -> list[tuple[Any, ...]]:
    args = [database.implicit_args(), *inputs]
    params = dict(database.implicit_query_params())
    params["q"] = query if isinstance(query, str) else codec.encode(query)
    params["args"] = codec.encode(args)

    body = await database.connection.fetch("GET", database.query_endpoint(), params=params)
    try:
        return [tuple(row) for row in _expect_sequence(body, "result tuples")]
    except TypeError as e:
        raise DecodeError(f"Query result rows are not tuples: {e}", text=repr(body)) from e


async def _query_ffirst(query: str, database: DatabaseValue, *inputs: Any) -> Any:
    rows = await _query(query, database, inputs)
    if not rows or not rows[0]:
        return None
    return rows[0][0]


def entid(database: DatabaseValue, ident: int | str | Keyword) -> ResultChannel[Any]:
    """Entity id for a symbolic keyword, or the id itself if passed one."""
    if isinstance(ident, int) and not isinstance(ident, bool):
        return ResultChannel.resolved(ident)
    if isinstance(ident, str):
        ident = codec.kw(ident)
    return ResultChannel.spawn(_query_ffirst(ENTID_QUERY, database, ident))


def ident(database: DatabaseValue, eid: int | Keyword) -> ResultChannel[Any]:
    """Keyword ident for an entity id, or the ident itself if passed one."""
    if isinstance(eid, Keyword):
        return ResultChannel.resolved(eid)
    return ResultChannel.spawn(_query_ffirst(IDENT_QUERY, database, eid))


# Entities and datoms


def entity(database: DatabaseValue, eid: Any) -> ResultChannel[dict[Any, Any]]:
    """Attribute map of the entity with the given id."""
    return ResultChannel.spawn(_entity(database, eid))


async def _entity(database: DatabaseValue, eid: Any) -> dict[Any, Any]:
    params = {"e": eid, "as-of": database.as_of_t, "since": database.since_t}
    body = await database.connection.fetch("GET", database.entity_endpoint(), params=params)
    if not isinstance(body, _MAPPING_TYPES):
        raise DecodeError(f"Expected an entity map, got {type(body).__name__}", text=repr(body))
    return dict(body)


def datoms(database: DatabaseValue, index: str | Keyword, **components: Any) -> ResultChannel[list[Any]]:
    """Raw access to index data.

    Args:
        database: Database value (history/limit/offset apply)
        index: Index name: eavt, aevt, avet or vaet
        **components: Leading components (e, a, v) or start/end;
            underscores in names are sent as dashes

    Returns:
        ResultChannel delivering the datoms
    """
    return ResultChannel.spawn(_datoms(database, index, components))


def index_range(database: DatabaseValue, index: str | Keyword, start: Any, end: Any) -> ResultChannel[list[Any]]:
    """Datoms in index from start (or the beginning if None) to end
    (or through the end if None)."""
    return ResultChannel.spawn(_datoms(database, index, {"start": start, "end": end}))


async def _datoms(database: DatabaseValue, index: str | Keyword, components: Mapping[str, Any]) -> list[Any]:
    params = dict(database.implicit_query_params())
    params["as-of"] = database.as_of_t
    params["since"] = database.since_t
    params.update({name.replace("_", "-"): value for name, value in components.items()})
    params["index"] = _index_name(index)

    body = await database.connection.fetch("GET", database.datoms_endpoint(), params=params)
    return _expect_sequence(body, "datoms")


# Transactions


def transact(conn: Connection, tx_data: str | Sequence[Any]) -> ResultChannel[TxReport]:
    """Submit a transaction.

    Args:
        conn: Connection to the database being written
        tx_data: EDN text, sent verbatim, or a sequence of operations,
            each a sequence starting with an operation keyword, e.g.
            [[kw("db/add"), tempid("db.part/user"), kw("person/name"), "Ann"]]

    Returns:
        ResultChannel delivering a TxReport. db_before/db_after are set
        only when the service reports their basis.
    """
    return ResultChannel.spawn(_transact(conn, tx_data))


async def _transact(conn: Connection, tx_data: str | Sequence[Any]) -> TxReport:
    tx_data_str = tx_data if isinstance(tx_data, str) else codec.encode(list(tx_data))
    body = await conn.fetch("POST", conn.transact_endpoint(), form={"tx-data": tx_data_str})
    if not isinstance(body, _MAPPING_TYPES):
        raise DecodeError(f"Expected a transaction report map, got {type(body).__name__}", text=repr(body))

    logger.debug(f"Transaction against {conn.db_alias} returned {len(body.get(TX_DATA) or ())} datoms")
    return TxReport(
        tx_data=list(body.get(TX_DATA) or ()),
        tempids=dict(body.get(TEMPIDS) or {}),
        db_before=_pinned_db(conn, body.get(DB_BEFORE)),
        db_after=_pinned_db(conn, body.get(DB_AFTER)),
    )


def _pinned_db(conn: Connection, descriptor: Any) -> DatabaseValue | None:
    if not isinstance(descriptor, _MAPPING_TYPES) or descriptor.get(BASIS_T) is None:
        return None
    return db(conn).as_of(descriptor[BASIS_T])
