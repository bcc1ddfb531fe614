"""
Datomic REST SDK Test Suite.

This package contains:
- unit/: Unit tests (no network)
- integration/: SDK against a mock REST service (httpx.MockTransport)
- e2e/: End-to-end tests (live Datomic REST service)
"""
