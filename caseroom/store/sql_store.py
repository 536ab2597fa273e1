"""SQL-backed Store implementation.

Persists rooms, participants, messages and canvases in libSQL/SQLite via
TursoClient. Table and column names are checked against a fixed schema
before any SQL is built; values always travel as parameters.
"""

import logging
import re
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from caseroom.db.turso import TursoClient
from caseroom.errors import DuplicateError, StoreError
from caseroom.store.base import CANVASES, MESSAGES, PARTICIPANTS, ROOMS, Filters, Row

logger = logging.getLogger(__name__)

COLUMNS: dict[str, tuple[str, ...]] = {
    ROOMS: ("id", "name", "type", "created_at"),
    PARTICIPANTS: (
        "id",
        "room_id",
        "name",
        "email",
        "phone",
        "organization",
        "photo_url",
        "description",
        "created_at",
    ),
    MESSAGES: (
        "id",
        "room_id",
        "participant_id",
        "text",
        "status",
        "replies_to_message_id",
        "created_at",
    ),
    CANVASES: (
        "id",
        "title",
        "content",
        "is_public",
        "room_id",
        "updated_at",
        "created_at",
    ),
}

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS rooms (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        type TEXT NOT NULL DEFAULT 'normal',
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS participants (
        id TEXT PRIMARY KEY,
        room_id TEXT NOT NULL,
        name TEXT NOT NULL,
        email TEXT,
        phone TEXT,
        organization TEXT,
        photo_url TEXT,
        description TEXT,
        created_at TEXT NOT NULL
    )
    """,
    # NULL emails (public rooms) never collide in a SQLite unique index
    """
    CREATE UNIQUE INDEX IF NOT EXISTS idx_participants_room_email
    ON participants(room_id, email)
    """,
    """
    CREATE UNIQUE INDEX IF NOT EXISTS idx_participants_room_name
    ON participants(room_id, name)
    """,
    """
    CREATE TABLE IF NOT EXISTS messages (
        id TEXT PRIMARY KEY,
        room_id TEXT NOT NULL,
        participant_id TEXT NOT NULL,
        text TEXT NOT NULL,
        status TEXT,
        replies_to_message_id TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_messages_room
    ON messages(room_id)
    """,
    """
    CREATE TABLE IF NOT EXISTS canvases (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        content TEXT NOT NULL DEFAULT '',
        is_public INTEGER NOT NULL DEFAULT 1,
        room_id TEXT,
        updated_at TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
]

_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: ([\w., ]+)")


class SqlStore:
    """Store protocol implementation on top of TursoClient.

    Rows come back in insertion order (rowid). Inserts fill in a UUID
    id and a UTC created_at when the caller leaves them out.
    """

    def __init__(self, db_client: TursoClient):
        """Initialize store with database client.

        Args:
            db_client: Connected TursoClient
        """
        self._db = db_client

    async def initialize(self) -> None:
        """Create tables and unique indexes if they don't exist."""
        await self._db.execute_batch(SCHEMA)

    async def query(
        self, table: str, filters: Filters, *, limit: int | None = None
    ) -> list[Row]:
        columns = self._columns(table)
        where, params = self._where(table, filters)
        sql = f"SELECT {', '.join(columns)} FROM {table}{where} ORDER BY rowid"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        try:
            result = await self._db.execute(sql, params)
        except Exception as e:
            raise self._translate(e, table) from e
        return [dict(zip(columns, row)) for row in result.rows]

    async def insert_one(self, table: str, row: Row) -> Row:
        prepared = self._prepare(table, row)
        sql, params = self._insert_statement(table, prepared)
        try:
            await self._db.execute(sql, params)
        except Exception as e:
            raise self._translate(e, table) from e
        return prepared

    async def insert_many(self, table: str, rows: list[Row]) -> list[Row]:
        if not rows:
            return []
        prepared = [self._prepare(table, row) for row in rows]
        statements = [self._insert_statement(table, row) for row in prepared]
        try:
            await self._db.execute_batch(statements)
        except Exception as e:
            raise self._translate(e, table) from e
        logger.debug(f"Inserted {len(prepared)} row(s) into {table}")
        return prepared

    async def update_one(self, table: str, filters: Filters, patch: Row) -> bool:
        self._check_keys(table, patch)
        if not patch:
            return await self.exists(table, filters)
        where, where_params = self._where(table, filters)
        assignments = ", ".join(f"{column} = ?" for column in patch)
        sql = (
            f"UPDATE {table} SET {assignments} "
            f"WHERE rowid = (SELECT rowid FROM {table}{where} ORDER BY rowid LIMIT 1)"
        )
        try:
            result = await self._db.execute(sql, [*patch.values(), *where_params])
        except Exception as e:
            raise self._translate(e, table) from e
        return result.rows_affected > 0

    async def exists(self, table: str, filters: Filters) -> bool:
        where, params = self._where(table, filters)
        try:
            result = await self._db.execute(
                f"SELECT 1 FROM {table}{where} LIMIT 1", params
            )
        except Exception as e:
            raise self._translate(e, table) from e
        return len(result.rows) > 0

    async def delete(self, table: str, filters: Filters) -> int:
        where, params = self._where(table, filters)
        try:
            result = await self._db.execute(f"DELETE FROM {table}{where}", params)
        except Exception as e:
            raise self._translate(e, table) from e
        return result.rows_affected

    def _columns(self, table: str) -> tuple[str, ...]:
        try:
            return COLUMNS[table]
        except KeyError:
            raise StoreError(f"Unknown table: {table}") from None

    def _check_keys(self, table: str, row: Row) -> None:
        unknown = set(row) - set(self._columns(table))
        if unknown:
            raise StoreError(f"Unknown column(s) for {table}: {sorted(unknown)}")

    def _where(self, table: str, filters: Filters) -> tuple[str, list[Any]]:
        self._check_keys(table, filters)
        if not filters:
            return "", []
        clauses = []
        params: list[Any] = []
        for column, value in filters.items():
            if value is None:
                clauses.append(f"{column} IS NULL")
            else:
                clauses.append(f"{column} = ?")
                params.append(value)
        return " WHERE " + " AND ".join(clauses), params

    def _prepare(self, table: str, row: Row) -> Row:
        self._check_keys(table, row)
        prepared = {column: row.get(column) for column in self._columns(table)}
        prepared["id"] = prepared["id"] or str(uuid4())
        prepared["created_at"] = (
            prepared["created_at"] or datetime.now(UTC).isoformat()
        )
        return prepared

    def _insert_statement(self, table: str, row: Row) -> tuple[str, list[Any]]:
        columns = list(row)
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
        return sql, list(row.values())

    @staticmethod
    def _translate(error: Exception, table: str) -> Exception:
        """Map a backend exception to DuplicateError or StoreError."""
        match = _UNIQUE_RE.search(str(error))
        if match:
            columns = match.group(1)
            if table == PARTICIPANTS and "email" in columns:
                return DuplicateError("Email already exists in this room")
            if table == PARTICIPANTS and "name" in columns:
                return DuplicateError("Name already exists in this room")
            return DuplicateError(f"Duplicate {table} row")
        logger.error(f"Store operation on {table} failed: {error}")
        return StoreError(str(error))
