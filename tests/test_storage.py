"""Tests for storage module."""
import pytest
import pytest_asyncio

from bookmark_yard import storage
from bookmark_yard.storage import MemoryStore, SqliteKeyValueStore, get_state_store


@pytest.fixture
def state_db_path(tmp_path):
    """Return path for a temporary state database."""
    return tmp_path / "test_state.db"


@pytest_asyncio.fixture
async def store(state_db_path):
    """Create and initialize a test state store."""
    s = SqliteKeyValueStore(state_db_path)
    await s.initialize()
    yield s
    await s.close()


@pytest.mark.asyncio
class TestSqliteKeyValueStore:
    async def test_initialize_creates_db(self, state_db_path):
        store = SqliteKeyValueStore(state_db_path)
        await store.initialize()
        assert state_db_path.exists()
        await store.close()

    async def test_set_and_get(self, store):
        await store.set("sidebar-state", '{"Tags": true}')
        assert await store.get("sidebar-state") == '{"Tags": true}'

    async def test_get_nonexistent_returns_none(self, store):
        assert await store.get("missing") is None

    async def test_set_overwrites(self, store):
        await store.set("k", "one")
        await store.set("k", "two")
        assert await store.get("k") == "two"

    async def test_survives_reopen(self, state_db_path):
        first = SqliteKeyValueStore(state_db_path)
        await first.initialize()
        await first.set("k", "persisted")
        await first.close()

        second = SqliteKeyValueStore(state_db_path)
        await second.initialize()
        assert await second.get("k") == "persisted"
        await second.close()

    async def test_uninitialized_raises(self, state_db_path):
        store = SqliteKeyValueStore(state_db_path)
        with pytest.raises(RuntimeError, match="not initialized"):
            await store.get("k")

    async def test_global_store(self, state_db_path, monkeypatch):
        monkeypatch.setattr(storage, "_state_store", None)
        s = await get_state_store(state_db_path)
        assert await get_state_store() is s
        await s.close()


@pytest.mark.asyncio
class TestMemoryStore:
    async def test_set_and_get(self):
        store = MemoryStore()
        await store.set("k", "v")
        assert await store.get("k") == "v"

    async def test_initial_values(self):
        store = MemoryStore({"k": "v"})
        assert await store.get("k") == "v"
        assert await store.get("other") is None
