"""
E2E test fixtures for the Datomic REST SDK.

These tests require a running Datomic REST service, e.g.:

    bin/rest -p 8888 free datomic:mem://

Configure it with DATOMIC_HOST / DATOMIC_PORT / DATOMIC_ALIAS.
"""

import os
import socket
import time
import uuid

import pytest

from datomic_sdk import DatomicSettings

# Skip E2E tests if not in E2E mode
E2E_ENABLED = os.environ.get("DATOMIC_E2E_TESTS", "0") == "1"

pytestmark = pytest.mark.skipif(
    not E2E_ENABLED,
    reason="E2E tests disabled. Set DATOMIC_E2E_TESTS=1 to enable."
)


def wait_for_service(host: str, port: int, timeout: int = 60) -> bool:
    """Wait for a service to become available."""
    start = time.time()
    while time.time() - start < timeout:
        try:
            with socket.create_connection((host, port), timeout=1):
                return True
        except OSError:
            time.sleep(1)
    return False


@pytest.fixture(scope="session")
def settings() -> DatomicSettings:
    """Settings for the REST service under test."""
    settings = DatomicSettings()
    if E2E_ENABLED:
        assert wait_for_service(settings.host, settings.port, timeout=60), "REST service not ready"
    return settings


@pytest.fixture
def db_name() -> str:
    """Unique database name per test."""
    return f"e2e-{uuid.uuid4().hex[:8]}"
