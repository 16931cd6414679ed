"""Database setup and management.

Records are kept in SQLite as documents: scalar fields get their own
columns, nested lists (a user's carrier permissions) are stored as JSON text.
"""

import aiosqlite
import logging
from pathlib import Path
from typing import Optional
from contextlib import asynccontextmanager

from shipdesk.config import get_settings
from shipdesk.errors import StorageError

logger = logging.getLogger(__name__)


class Database:
    """Async SQLite database manager."""

    def __init__(self, db_path: Optional[Path] = None, timeout: Optional[float] = None):
        """Initialize database.

        Args:
            db_path: Path to SQLite database file. Defaults to DATABASE_PATH.
            timeout: Seconds to wait for a write lock. Defaults to DATABASE_TIMEOUT.
        """
        settings = get_settings()
        self.db_path = Path(db_path or settings.database_path)
        self.timeout = timeout if timeout is not None else settings.database_timeout
        self._ensure_data_dir()

    def _ensure_data_dir(self) -> None:
        """Create data directory if it doesn't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @asynccontextmanager
    async def connection(self):
        """Get database connection context manager.

        Errors raised by SQLite that the caller did not handle itself are
        re-raised as StorageError.

        Usage:
            async with db.connection() as conn:
                await conn.execute(...)
        """
        try:
            async with aiosqlite.connect(self.db_path, timeout=self.timeout) as conn:
                conn.row_factory = aiosqlite.Row
                yield conn
        except aiosqlite.Error as e:
            raise StorageError() from e

    async def initialize(self) -> None:
        """Create tables if they don't exist."""
        async with self.connection() as conn:
            # WAL lets readers proceed while a take-one holds the write lock
            await conn.execute("PRAGMA journal_mode=WAL")

            await conn.execute("""
                CREATE TABLE IF NOT EXISTS admins (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            await conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    name TEXT,
                    status TEXT NOT NULL DEFAULT 'active',
                    available_balance REAL NOT NULL DEFAULT 0,
                    is_dealer INTEGER NOT NULL DEFAULT 0,
                    allowed_carriers TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            # Tracking-number pool, consumed one row at a time
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS shipments (
                    id TEXT PRIMARY KEY,
                    carrier TEXT NOT NULL,
                    tracking TEXT NOT NULL,
                    label_type TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            await conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_shipments_carrier_label
                ON shipments (carrier, label_type)
            """)

            await conn.commit()
            logger.info(f"Database initialized at {self.db_path}")

    async def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            async with self.connection() as conn:
                cursor = await conn.execute("SELECT 1")
                await cursor.fetchone()
            return True
        except StorageError as e:
            logger.error(f"Database health check failed: {e.__cause__!r}")
            return False


# Singleton instance
_db: Optional[Database] = None


def get_database() -> Database:
    """Get the singleton database instance."""
    global _db
    if _db is None:
        _db = Database()
    return _db


async def init_database() -> None:
    """Initialize the database (call on app startup)."""
    db = get_database()
    await db.initialize()
