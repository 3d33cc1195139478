"""Database connection management for the local credential store."""

import logging

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS credential (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
);
"""


class Database:
    """Manages the SQLite connection that backs the credential store."""

    def __init__(self, db_path: str = "imiccharge.db"):
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

    async def connect(self) -> aiosqlite.Connection:
        """Establish database connection with WAL and relaxed sync pragmas."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            self.connection.row_factory = aiosqlite.Row

            await self.connection.execute("PRAGMA journal_mode=WAL")
            await self.connection.execute("PRAGMA synchronous=NORMAL")
        return self.connection

    async def disconnect(self):
        """Close database connection."""
        if self.connection:
            await self.connection.close()
            self.connection = None

    async def initialize_schema(self):
        """Create the credential table if it does not exist yet."""
        conn = await self.connect()
        await conn.executescript(SCHEMA)
        await conn.commit()
        logger.debug(f"Credential schema ready in {self.db_path}")
