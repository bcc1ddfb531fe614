"""
Configuration for the Datomic REST SDK.

Uses pydantic-settings for environment variable loading, e.g.:

    DATOMIC_HOST=datomic.internal DATOMIC_PORT=8888 DATOMIC_ALIAS=dev \\
    DATOMIC_DB_NAME=mbrainz python app.py
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field
from pydantic_settings import BaseSettings

from .connection import Connection, connect

if TYPE_CHECKING:
    from ._http_transport import HttpTransport


class DatomicSettings(BaseSettings):
    """SDK configuration loaded from environment."""

    # REST service location
    host: str = Field(default="localhost", description="Datomic REST service host")
    port: int = Field(default=8888, description="Datomic REST service port")

    # Database selection
    alias: str = Field(default="free", description="Storage alias configured on the REST service")
    db_name: str = Field(default="", description="Database name within the alias")

    # Transport
    timeout: float = Field(default=30.0, description="HTTP request timeout seconds")
    accept: str = Field(default="application/edn", description="Accept header for every request")

    model_config = {"env_prefix": "DATOMIC_"}

    @property
    def base_url(self) -> str:
        """Root URL of the REST service."""
        return f"http://{self.host}:{self.port}"

    def connection(self, transport: HttpTransport | None = None) -> Connection:
        """Build a Connection for the configured database."""
        return connect(self.host, self.port, self.alias, self.db_name, transport=transport)
