"""
EDN wire codec for the Datomic REST SDK.

Thin facade over edn_format:
- encode / decode: native values <-> EDN text
- to_query_value / encode_query_params: query-string rendering
- register_tag: hook for custom tagged literals (see tags.py)

Keywords and symbols are edn_format.Keyword / edn_format.Symbol.
Decoded vectors are edn_format.ImmutableList and maps are
edn_format.ImmutableDict.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

import edn_format
import httpx
from edn_format import Keyword, Symbol

from .errors import DecodeError, EncodeError, MalformedLiteral
from .tags import register_tag

logger = logging.getLogger(__name__)

__all__ = [
    "Keyword",
    "Symbol",
    "decode",
    "encode",
    "encode_query_params",
    "kw",
    "query_params",
    "register_tag",
    "to_query_value",
]


def kw(name: str) -> Keyword:
    """Shorthand for edn_format.Keyword, accepting an optional leading colon."""
    return Keyword(name.lstrip(":"))


def encode(value: Any) -> str:
    """Render value as EDN text.

    Raises:
        EncodeError: If value has no EDN representation
    """
    try:
        return edn_format.dumps(value)
    except Exception as e:
        raise EncodeError(f"Cannot encode value as EDN: {e}", value=value) from e


def decode(text: str) -> Any:
    """Parse EDN text.

    Raises:
        DecodeError: If text is not exactly one valid EDN form
        MalformedLiteral: If a tagged literal has the wrong shape
    """
    if not text or not text.strip():
        raise DecodeError("Empty response body", text=text)
    snippet = text if len(text) <= 200 else text[:200] + "..."
    try:
        forms = edn_format.loads_all(text)
    except MalformedLiteral:
        raise
    except Exception as e:
        raise DecodeError(f"Response body is not valid EDN: {e}", text=snippet) from e
    if len(forms) != 1:
        raise DecodeError(f"Expected one EDN form, got {len(forms)}", text=snippet)
    return forms[0]


def to_query_value(value: Any) -> str:
    """Render a single query-string value.

    Strings go out verbatim, booleans as true/false, dates as ISO-8601;
    everything else (keywords, vectors, tempids) as EDN.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return encode(value)


def query_params(mapping: Mapping[str, Any]) -> dict[str, str]:
    """Render mapping for a query string, dropping None values."""
    return {key: to_query_value(value) for key, value in mapping.items() if value is not None}


def encode_query_params(mapping: Mapping[str, Any]) -> str:
    """Render mapping as a URL-encoded query string."""
    return str(httpx.QueryParams(query_params(mapping)))
