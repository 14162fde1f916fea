import aiosqlite
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional
import logging

logger = logging.getLogger(__name__)


class Database:
    """
    Small key-value store on top of SQLite.
    Each value is a whole serialized blob, read and written in one go.
    """

    MEMORY = ":memory:"

    def __init__(self, path: str):
        self.path = path
        self._initialized = False
        self._memory_conn: Optional[aiosqlite.Connection] = None

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        if self.path == self.MEMORY:
            # An in-memory database lives only as long as its connection
            if self._memory_conn is None:
                self._memory_conn = await aiosqlite.connect(self.path)
            yield self._memory_conn
            return

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        conn = await aiosqlite.connect(self.path)
        await conn.execute("PRAGMA journal_mode=WAL;")
        try:
            yield conn
        finally:
            await conn.close()

    async def close(self) -> None:
        """Close the shared in-memory connection, dropping its data."""
        if self._memory_conn is not None:
            await self._memory_conn.close()
            self._memory_conn = None
            self._initialized = False

    async def execute(self, query: str, params: tuple = ()) -> None:
        async with self.connect() as conn:
            await conn.execute(query, params)
            await conn.commit()

    async def fetchone(self, query: str, params: tuple = ()):
        async with self.connect() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchone()

    async def init_tables(self) -> None:
        """Initialize the key-value table."""
        if self._initialized:
            return
        async with self.connect() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            await conn.commit()
        self._initialized = True
        logger.info("Database tables initialized")

    async def get_value(self, key: str) -> Optional[str]:
        await self.init_tables()
        row = await self.fetchone("SELECT value FROM kv_store WHERE key = ?", (key,))
        return row[0] if row else None

    async def set_value(self, key: str, value: str) -> None:
        await self.init_tables()
        await self.execute(
            """
            INSERT OR REPLACE INTO kv_store (key, value, updated_at)
            VALUES (?, ?, ?)
            """,
            (key, value, datetime.now(timezone.utc).isoformat()),
        )

    async def delete_value(self, key: str) -> None:
        await self.init_tables()
        await self.execute("DELETE FROM kv_store WHERE key = ?", (key,))
