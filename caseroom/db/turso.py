"""libSQL connection wrapper used by SqlStore."""

import logging
from typing import Any

from libsql_client import Client, ResultSet, create_client

from caseroom.config import settings

logger = logging.getLogger(__name__)

DEFAULT_URL = "file:caseroom.db"
REMOTE_SCHEMES = ("libsql://", "https://", "wss://")

# Batch entry: bare SQL, or SQL with positional parameters
Statement = str | tuple[str, list[Any]]


class TursoClient:
    """Async client for a hosted libSQL database or a local SQLite file.

    Can be used as an async context manager:

        async with TursoClient("file:caseroom.db") as db:
            await db.execute("SELECT 1")
    """

    def __init__(self, url: str | None = None, auth_token: str | None = None):
        """Initialize client.

        Args:
            url: Database URL. Falls back to settings, then a local file.
            auth_token: Token for hosted databases. Falls back to settings.
        """
        self.url = url or settings.database_url or DEFAULT_URL
        self.auth_token = auth_token or settings.database_auth_token
        self._client: Client | None = None

    @property
    def is_remote(self) -> bool:
        return self.url.startswith(REMOTE_SCHEMES)

    async def connect(self) -> None:
        """Open the connection. Calling it again is a no-op."""
        if self._client is not None:
            return

        if self.is_remote and self.auth_token:
            self._client = create_client(url=self.url, auth_token=self.auth_token)
        else:
            self._client = create_client(url=self.url)
        logger.info(
            f"Connected to {'remote' if self.is_remote else 'local'} database: "
            f"{self.url}"
        )

    def _require_client(self) -> Client:
        if self._client is None:
            raise RuntimeError("Database not connected; call connect() first")
        return self._client

    async def execute(self, sql: str, params: list[Any] | None = None) -> ResultSet:
        """Run one statement with ? placeholders."""
        return await self._require_client().execute(sql, params or [])

    async def execute_batch(self, statements: list[Statement]) -> list[ResultSet]:
        """Run statements in one transaction: all commit or none do.

        Returns:
            One ResultSet per statement, in order
        """
        return await self._require_client().batch(statements)

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.close()
        self._client = None
        logger.info(f"Closed database connection: {self.url}")

    async def is_healthy(self) -> bool:
        """Round-trip a trivial query."""
        if self._client is None:
            return False
        try:
            result = await self._client.execute("SELECT 1")
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return False
        return len(result.rows) == 1

    async def __aenter__(self) -> "TursoClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
