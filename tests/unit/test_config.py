"""
Unit tests for SDK configuration.

Tests cover:
- Defaults
- Environment overrides
- Building connections and transports from settings
"""

from datomic_sdk import DatomicSettings, HttpTransport


class TestDatomicSettings:
    """Tests for DatomicSettings."""

    def test_defaults(self, monkeypatch):
        """Defaults target a local REST service."""
        for name in ("HOST", "PORT", "ALIAS", "DB_NAME", "TIMEOUT", "ACCEPT"):
            monkeypatch.delenv(f"DATOMIC_{name}", raising=False)

        settings = DatomicSettings()

        assert settings.host == "localhost"
        assert settings.port == 8888
        assert settings.alias == "free"
        assert settings.accept == "application/edn"
        assert settings.base_url == "http://localhost:8888"

    def test_environment_overrides(self, monkeypatch):
        """DATOMIC_* variables override defaults."""
        monkeypatch.setenv("DATOMIC_HOST", "datomic.internal")
        monkeypatch.setenv("DATOMIC_PORT", "9999")
        monkeypatch.setenv("DATOMIC_ALIAS", "dev")
        monkeypatch.setenv("DATOMIC_DB_NAME", "mbrainz")
        monkeypatch.setenv("DATOMIC_TIMEOUT", "2.5")

        settings = DatomicSettings()

        assert settings.port == 9999
        assert settings.timeout == 2.5
        assert settings.base_url == "http://datomic.internal:9999"

    def test_connection_from_settings(self):
        """Settings build the matching connection."""
        settings = DatomicSettings(host="db", port=8080, alias="dev", db_name="mbrainz")

        conn = settings.connection()

        assert conn.db_alias == "dev/mbrainz"
        assert conn.base_url == "http://db:8080"
        assert conn.transport is None

    def test_transport_from_settings(self):
        """Transport takes the configured Accept header."""
        settings = DatomicSettings(accept="application/edn;charset=utf-8", timeout=3.0)

        transport = HttpTransport.from_settings(settings)

        assert transport._headers == {"Accept": "application/edn;charset=utf-8"}
        assert transport._client.timeout.read == 3.0
