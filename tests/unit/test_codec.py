"""
Unit tests for the EDN wire codec.

Tests cover:
- Encoding structured values
- Decoding and decode failures
- Query-string rendering
"""

from datetime import datetime, timezone

import pytest

from datomic_sdk import codec
from datomic_sdk.codec import Symbol, kw
from datomic_sdk.errors import DecodeError, EncodeError


class TestEncode:
    """Tests for encode()."""

    def test_transaction_vector(self):
        """Operation vectors encode with single spaces."""
        tx = [[kw("db/add"), 1, kw("name"), "x"]]

        assert codec.encode(tx) == '[[:db/add 1 :name "x"]]'

    def test_keyword_keyed_map(self):
        """Keyword keys keep their colon."""
        assert codec.encode({kw("db/alias"): "free/test"}) == '{:db/alias "free/test"}'

    def test_query_form(self):
        """Symbols and keywords render as a query."""
        query = [kw("find"), Symbol("?e"), kw("where"), [Symbol("?e"), kw("db/ident"), kw("foo")]]

        assert codec.encode(query) == "[:find ?e :where [?e :db/ident :foo]]"

    def test_unsupported_value(self):
        """Values with no EDN form raise EncodeError."""
        with pytest.raises(EncodeError):
            codec.encode(object())

    def test_kw_strips_colon(self):
        """kw accepts a leading colon."""
        assert kw(":db/ident") == kw("db/ident")


class TestDecode:
    """Tests for decode()."""

    def test_map_with_keyword_keys(self):
        """Maps decode with Keyword keys."""
        value = codec.decode('{:basis-t 1000 :db/alias "free/test"}')

        assert value[kw("basis-t")] == 1000
        assert value[kw("db/alias")] == "free/test"

    def test_nested_vectors(self):
        """Vectors decode to sequences."""
        value = codec.decode("[[1 2] [3 4]]")

        assert [list(row) for row in value] == [[1, 2], [3, 4]]

    def test_invalid_text(self):
        """Unparsable text raises DecodeError."""
        with pytest.raises(DecodeError):
            codec.decode("[[1 2")

    def test_empty_body(self):
        """Empty bodies are not EDN values."""
        with pytest.raises(DecodeError, match="Empty response body"):
            codec.decode("   ")

    def test_trailing_form(self):
        """A second top-level form makes the body invalid."""
        with pytest.raises(DecodeError, match="Expected one EDN form, got 2"):
            codec.decode("[1] [2]")


class TestQueryParams:
    """Tests for query-string rendering."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("[:find ?e]", "[:find ?e]"),
            (True, "true"),
            (False, "false"),
            (17592186045418, "17592186045418"),
            (kw("db/ident"), ":db/ident"),
        ],
    )
    def test_to_query_value(self, value, expected):
        """Each value type renders as the REST service expects."""
        assert codec.to_query_value(value) == expected

    def test_datetime_value(self):
        """Instants render as ISO-8601."""
        instant = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        assert codec.to_query_value(instant) == "2024-01-02T03:04:05+00:00"

    def test_none_values_dropped(self):
        """Unset parameters are omitted."""
        assert codec.query_params({"e": 1, "as-of": None, "since": None}) == {"e": "1"}

    def test_encode_query_params(self):
        """Parameters are URL-encoded."""
        encoded = codec.encode_query_params({"index": "aevt", "history": True, "limit": None})

        assert encoded == "index=aevt&history=true"
