"""Tests for credential stores and the credential repository."""

import pytest

from imiccharge.database import Database
from imiccharge.repositories import CredentialRepository
from imiccharge.storage import MemoryTokenStore, SQLiteTokenStore


@pytest.fixture
async def db_connection(temp_db_path):
    """Provide an initialized database connection."""
    db = Database(temp_db_path)
    await db.initialize_schema()
    conn = await db.connect()
    yield conn
    await db.disconnect()


@pytest.mark.unit
class TestCredentialRepository:
    """Test CredentialRepository operations."""

    async def test_upsert_and_get(self, db_connection):
        repo = CredentialRepository(db_connection)

        await repo.upsert("access_token", "tok-1")

        assert await repo.get("access_token") == "tok-1"

    async def test_upsert_replaces(self, db_connection):
        repo = CredentialRepository(db_connection)

        await repo.upsert("access_token", "tok-1")
        await repo.upsert("access_token", "tok-2")

        assert await repo.get("access_token") == "tok-2"
        assert await repo.keys() == ["access_token"]

    async def test_get_not_found(self, db_connection):
        repo = CredentialRepository(db_connection)

        assert await repo.get("missing") is None

    async def test_delete(self, db_connection):
        repo = CredentialRepository(db_connection)
        await repo.upsert("access_token", "tok-1")
        await repo.upsert("refresh_token", "r-1")

        await repo.delete("access_token")

        assert await repo.get("access_token") is None
        assert await repo.keys() == ["refresh_token"]

    async def test_writes_visible_to_other_connections(self, db_connection, temp_db_path):
        await CredentialRepository(db_connection).upsert("access_token", "tok-1")

        other = Database(temp_db_path)
        try:
            repo = CredentialRepository(await other.connect())
            assert await repo.get("access_token") == "tok-1"
        finally:
            await other.disconnect()

    async def test_disconnect_is_idempotent(self, temp_db_path):
        db = Database(temp_db_path)
        await db.connect()

        await db.disconnect()
        await db.disconnect()

        assert db.connection is None

    async def test_schema_initialization_is_idempotent(self, temp_db_path):
        db = Database(temp_db_path)
        await db.initialize_schema()
        await db.initialize_schema()
        await db.disconnect()


@pytest.mark.unit
class TestSQLiteTokenStore:
    """Test the SQLite-backed token store."""

    async def test_roundtrip(self, sqlite_store):
        await sqlite_store.set("access_token", "tok-1")

        assert await sqlite_store.get("access_token") == "tok-1"

    async def test_unknown_key(self, sqlite_store):
        assert await sqlite_store.get("access_token") is None

    async def test_delete_unknown_key(self, sqlite_store):
        await sqlite_store.delete("access_token")

        assert await sqlite_store.get("access_token") is None

    async def test_persists_across_instances(self, temp_db_path):
        first = SQLiteTokenStore(temp_db_path)
        await first.set("access_token", "tok-1")
        await first.close()

        second = SQLiteTokenStore(temp_db_path)
        try:
            assert await second.get("access_token") == "tok-1"
        finally:
            await second.close()

    async def test_reopen_after_close(self, sqlite_store):
        await sqlite_store.set("access_token", "tok-1")
        await sqlite_store.close()

        assert await sqlite_store.get("access_token") == "tok-1"


@pytest.mark.unit
class TestMemoryTokenStore:
    """Test the in-memory token store."""

    async def test_initial_values_are_copied(self):
        initial = {"access_token": "tok-1"}
        store = MemoryTokenStore(initial)

        await store.delete("access_token")

        assert initial == {"access_token": "tok-1"}
        assert await store.get("access_token") is None

    async def test_set_and_get(self):
        store = MemoryTokenStore()

        await store.set("access_token", "tok-2")

        assert await store.get("access_token") == "tok-2"
