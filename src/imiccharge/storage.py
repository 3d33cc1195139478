"""Credential stores the client reads its bearer token from."""

import logging
from abc import ABC, abstractmethod

from .database import Database
from .repositories import CredentialRepository

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"


class TokenStore(ABC):
    """
    Key/value store for credentials.

    The API client only reads from it; writing tokens after a login is left
    to the application.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is unknown."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key. Removing an unknown key is not an error."""

    async def close(self) -> None:
        """Release any resources held by the store."""


class MemoryTokenStore(TokenStore):
    """Process-local store, mostly useful for tests and embedding."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value

    async def delete(self, key: str) -> None:
        self._values.pop(key, None)


class SQLiteTokenStore(TokenStore):
    """Store backed by a local SQLite file through aiosqlite."""

    def __init__(self, db_path: str = "imiccharge.db"):
        self.db = Database(db_path)
        self._repo: CredentialRepository | None = None

    async def _repository(self) -> CredentialRepository:
        if self._repo is None:
            await self.db.initialize_schema()
            self._repo = CredentialRepository(await self.db.connect())
        return self._repo

    async def get(self, key: str) -> str | None:
        repo = await self._repository()
        return await repo.get(key)

    async def set(self, key: str, value: str) -> None:
        repo = await self._repository()
        await repo.upsert(key, value)
        logger.debug(f"Stored credential '{key}'")

    async def delete(self, key: str) -> None:
        repo = await self._repository()
        await repo.delete(key)
        logger.debug(f"Deleted credential '{key}'")

    async def close(self) -> None:
        await self.db.disconnect()
        self._repo = None
