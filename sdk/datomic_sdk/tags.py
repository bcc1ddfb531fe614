"""
Tagged literal registry for the Datomic REST SDK.

This module owns the process-wide table of EDN tag parsers used when
decoding response bodies:
- DbId: the #db/id literal (a tempid such as #db/id[:db.part/user -1])
- read_db_id: parser for the db/id tag
- register_tag: add or replace a tag parser
- install_tag_parsers: register the SDK's parsers, once
- tempid: build a DbId for use in transaction data

The table lives inside edn_format and is shared by the whole process.
install_tag_parsers() runs when datomic_sdk is imported and must not be
re-run while a decode is in progress.

Example:
    >>> from datomic_sdk import tempid
    >>> str(tempid("db.part/user", -1))
    '#db/id[:db.part/user -1]'
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Callable

import edn_format
from edn_format import ImmutableList, Keyword, TaggedElement

from .errors import MalformedLiteral

logger = logging.getLogger(__name__)

DB_ID_TAG = "db/id"

_SEQUENCE_TYPES = (list, tuple, ImmutableList)

_installed = False
_install_lock = threading.Lock()

# Datomic reserves small negative numbers for user-supplied tempids.
_tempid_counter = itertools.count(-1000000, -1)


class DbId(TaggedElement):
    """Opaque entity id literal, rendered as #db/id<spec>.

    The spec is never interpreted locally; it is only written back out
    on the wire.
    """

    def __init__(self, spec: Any) -> None:
        self.spec = spec

    def __str__(self) -> str:
        return f"#{DB_ID_TAG}{edn_format.dumps(list(self.spec))}"

    def __repr__(self) -> str:
        return f"DbId({list(self.spec)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DbId):
            return NotImplemented
        return list(self.spec) == list(other.spec)

    def __hash__(self) -> int:
        return hash((DB_ID_TAG, tuple(self.spec)))


def read_db_id(representation: Any) -> DbId:
    """Parse the value following a #db/id tag.

    Raises:
        MalformedLiteral: If the representation is not an ordered sequence
    """
    if not isinstance(representation, _SEQUENCE_TYPES):
        raise MalformedLiteral(DB_ID_TAG, representation)
    return DbId(representation)


def register_tag(tag: str, parse_fn: Callable[[Any], Any]) -> None:
    """Register parse_fn for #tag, replacing any previous parser."""
    edn_format.add_tag(tag, parse_fn)
    logger.debug(f"Registered EDN tag parser for #{tag}")


def install_tag_parsers() -> None:
    """Register the SDK's tag parsers. Later calls are no-ops."""
    global _installed
    with _install_lock:
        if _installed:
            return
        register_tag(DB_ID_TAG, read_db_id)
        _installed = True


def tempid(partition: str | Keyword, n: int | None = None) -> DbId:
    """Build a temporary id in the given partition.

    Args:
        partition: Partition name, e.g. "db.part/user"
        n: Explicit negative index; drawn from a process counter if omitted

    Returns:
        DbId rendering as #db/id[:partition n]
    """
    if not isinstance(partition, Keyword):
        partition = Keyword(partition.lstrip(":"))
    if n is None:
        n = next(_tempid_counter)
    return DbId([partition, n])
