"""
Datomic REST SDK - asyncio client for a Datomic REST service.

This SDK exposes a remote Datomic database through an API shaped like
datomic.api:
- connect / create_database for connections
- db, as_of, since, history, limit, offset for immutable database values
- q, entity, datoms, index_range, entid, ident for reads
- transact for writes

Every operation that talks to the service returns a ResultChannel that
delivers Ok(value) or Err(error) exactly once.

Example:
    >>> from datomic_sdk import api, kw
    >>>
    >>> result = await api.create_database("localhost", 8888, "free", "scratch")
    >>> conn = result.unwrap()
    >>> report = (await api.transact(conn, '[[:db/add #db/id[:db.part/user -1] :db/doc "hi"]]')).unwrap()
    >>> rows = (await api.q("[:find ?d :where [_ :db/doc ?d]]", api.db(conn))).unwrap()

Invariants:
    - Connections and database values are immutable
    - The #db/id tag parser is registered once, when this package is imported
    - Failures are delivered, never raised, by public operations

Version: 0.1.0
"""

__version__ = "0.1.0"

from . import api
from ._http_transport import HttpTransport, RawResponse, close_default_transport
from .codec import Keyword, Symbol, kw
from .config import DatomicSettings
from .connection import Connection, connect, create_database
from .database import DatabaseValue, db
from .errors import (
    ChannelClosedError,
    DatomicError,
    DecodeError,
    EncodeError,
    HttpStatusError,
    MalformedLiteral,
    TransportError,
)
from .executors import TxReport
from .result import Err, Ok, Result, ResultChannel
from .tags import DbId, install_tag_parsers, register_tag, tempid

install_tag_parsers()

__all__ = [
    # Version
    "__version__",
    # API namespace
    "api",
    # Connections and values
    "Connection",
    "DatabaseValue",
    "TxReport",
    "connect",
    "create_database",
    "db",
    # Results
    "Ok",
    "Err",
    "Result",
    "ResultChannel",
    # EDN
    "DbId",
    "Keyword",
    "Symbol",
    "kw",
    "tempid",
    "register_tag",
    "install_tag_parsers",
    # Transport and config
    "HttpTransport",
    "RawResponse",
    "DatomicSettings",
    "close_default_transport",
    # Errors
    "DatomicError",
    "TransportError",
    "HttpStatusError",
    "DecodeError",
    "EncodeError",
    "MalformedLiteral",
    "ChannelClosedError",
]
