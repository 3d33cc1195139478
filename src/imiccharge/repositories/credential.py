"""Repository for stored credentials."""

import aiosqlite


class CredentialRepository:
    """Key/value access to the credential table."""

    def __init__(self, connection: aiosqlite.Connection):
        self.conn = connection

    async def get(self, key: str) -> str | None:
        """Get the stored value for a key."""
        cursor = await self.conn.execute("SELECT value FROM credential WHERE key = ?", (key,))
        row = await cursor.fetchone()
        if row:
            return row["value"]
        return None

    async def upsert(self, key: str, value: str) -> None:
        """Insert or replace the value for a key."""
        query = """
            INSERT INTO credential (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = CURRENT_TIMESTAMP
        """
        await self._write(query, (key, value))

    async def delete(self, key: str) -> None:
        """Remove a key if present."""
        await self._write("DELETE FROM credential WHERE key = ?", (key,))

    async def keys(self) -> list[str]:
        """List stored keys."""
        cursor = await self.conn.execute("SELECT key FROM credential ORDER BY key")
        return [row["key"] for row in await cursor.fetchall()]

    async def _write(self, query: str, params: tuple) -> None:
        await self.conn.execute(query, params)
        await self.conn.commit()
