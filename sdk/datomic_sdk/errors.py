"""
Error types for the Datomic REST SDK.

This module defines every error the SDK can deliver:
- DatomicError: Base exception
- TransportError: The REST service could not be reached
- HttpStatusError: The REST service answered with a non-2xx status
- DecodeError: A response body is not the expected EDN value
- EncodeError: A value has no EDN representation
- MalformedLiteral: A #db/id literal is not backed by a sequence

Errors are not raised out of public operations. They are delivered as
Err values through a ResultChannel (see result.py).

Invariants:
    - All delivered errors inherit from DatomicError
    - status is set only when the remote service answered
    - Messages distinguish "unreachable" from "rejected" from "unparsable"
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DatomicError(Exception):
    """Base exception for all SDK errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    status: Optional[int] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "DATOMIC_ERROR"
        self.details = details or {}


class TransportError(DatomicError):
    """The REST service could not be reached.

    Raised when:
    - Connection is refused
    - DNS resolution fails
    - The transport times out
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="TRANSPORT_ERROR",
            details={"url": url},
        )
        self.url = url


class HttpStatusError(DatomicError):
    """The REST service rejected the request.

    Attributes:
        status: HTTP status code
        body: Response body text, as received
    """

    def __init__(
        self,
        status: int,
        message: Optional[str] = None,
        url: Optional[str] = None,
        body: str = "",
    ) -> None:
        super().__init__(
            message or f"Request failed with HTTP status {status}",
            code="HTTP_STATUS_ERROR",
            details={"status": status, "url": url},
        )
        self.status = status
        self.url = url
        self.body = body


class DecodeError(DatomicError):
    """Response body does not parse as the expected EDN value."""

    def __init__(
        self,
        message: str,
        text: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="DECODE_ERROR",
            details={"text": text},
        )
        self.text = text


class EncodeError(DatomicError):
    """Value cannot be written as EDN."""

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(
            message,
            code="ENCODE_ERROR",
            details={"type": type(value).__name__},
        )
        self.value = value


class MalformedLiteral(DatomicError):
    """A tagged literal's representation has the wrong shape.

    Raised by the #db/id parser when the tagged value is not an
    ordered sequence such as [:db.part/user -1].
    """

    def __init__(self, tag: str, representation: Any) -> None:
        super().__init__(
            f"#{tag} literal expects a vector as its representation, "
            f"got {representation!r}",
            code="MALFORMED_LITERAL",
            details={"tag": tag},
        )
        self.tag = tag
        self.representation = representation


class ChannelClosedError(RuntimeError):
    """A ResultChannel was written to more than once.

    This is a programming error and is raised directly to the writer.
    """

    pass
