"""
Fixtures for SDK integration tests.

A MockService stands in for the Datomic REST service: it records every
request and answers from a queue of canned responses.
"""

from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from datomic_sdk import HttpTransport, connect


class MockService:
    """Scripted stand-in for the REST service."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[tuple[int, str] | Exception] = []

    def respond(self, status: int = 200, body: str = "") -> None:
        """Queue one response."""
        self._responses.append((status, body))

    def fail(self, error: Exception) -> None:
        """Queue one transport failure."""
        self._responses.append(error)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(404, text="no response scripted")
        scripted = self._responses.pop(0)
        if isinstance(scripted, Exception):
            raise scripted
        status, body = scripted
        return httpx.Response(status, text=body, headers={"Content-Type": "application/edn"})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_form(self) -> dict[str, list[str]]:
        """Form fields of the last request."""
        return parse_qs(self.last.content.decode())


@pytest.fixture
def service() -> MockService:
    return MockService()


@pytest.fixture
def transport(service: MockService) -> HttpTransport:
    return HttpTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(service)))


@pytest.fixture
def conn(transport: HttpTransport):
    return connect("localhost", 8888, "free", "test", transport=transport)
