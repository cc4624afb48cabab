"""
Album API: Database Store Tests
================================

What:  DatabaseAlbumStore against a real SQLite database (aiosqlite).
How:   Each test gets a fresh temp database file from the sqlite_engine fixture.

What we test:
    ✅ Insert assigns a database id and returns the row as stored
    ✅ get_all returns rows ordered by id, mapped by column name
    ✅ get_by_id: one row, zero rows (NotFoundError), many rows (ConsistencyError)
    ✅ Driver errors are wrapped in StoreError naming the operation
    ✅ A query cancelled by the deadline gives its connection back to the pool
    ✅ Concurrent inserts all persist with distinct ids
"""

import asyncio

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from album_api.database import Base, build_engine
from album_api.dependencies import call_store
from album_api.exceptions import ConsistencyError, NotFoundError, StoreError
from album_api.schemas.album import AlbumCreate
from album_api.services.database_store import DatabaseAlbumStore


class TestDatabaseStoreInsert:

    @pytest.mark.asyncio
    async def test_insert_returns_generated_id(self, db_store, sample_album):
        created = await db_store.insert(sample_album)

        assert created.id == "1"
        assert created.title == "Kind of Blue"
        assert created.artist == "Miles Davis"
        assert created.price == 29.99

    @pytest.mark.asyncio
    async def test_insert_returns_stored_row(self, db_store):
        created = await db_store.insert(
            AlbumCreate(title="Mingus Ah Um", artist="Charles Mingus", price=19.5)
        )

        assert created == await db_store.get_by_id(int(created.id))

    @pytest.mark.asyncio
    async def test_insert_then_list_round_trip(self, db_store, sample_album):
        created = await db_store.insert(sample_album)
        albums = await db_store.get_all()

        assert albums == [created]

    @pytest.mark.asyncio
    async def test_concurrent_inserts_persist_distinct_rows(self, db_store):
        payloads = [
            AlbumCreate(title=f"Album {i}", artist="Various", price=10.0 + i)
            for i in range(10)
        ]

        created = await asyncio.gather(*(db_store.insert(p) for p in payloads))

        assert len({album.id for album in created}) == 10
        stored = await db_store.get_all()
        assert len(stored) == 10
        assert {a.title for a in stored} == {p.title for p in payloads}


class TestDatabaseStoreRead:

    @pytest.mark.asyncio
    async def test_get_all_empty(self, db_store):
        assert await db_store.get_all() == []

    @pytest.mark.asyncio
    async def test_get_all_ordered_by_id(self, db_store):
        for title in ("C", "A", "B"):
            await db_store.insert(AlbumCreate(title=title, artist="X", price=1.0))

        albums = await db_store.get_all()

        assert [a.id for a in albums] == ["1", "2", "3"]
        assert [a.title for a in albums] == ["C", "A", "B"]

    @pytest.mark.asyncio
    async def test_get_by_id(self, db_store, sample_album):
        created = await db_store.insert(sample_album)

        album = await db_store.get_by_id(int(created.id))

        assert album == created

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, db_store):
        with pytest.raises(NotFoundError):
            await db_store.get_by_id(99)

    @pytest.mark.asyncio
    async def test_get_by_id_duplicate_rows_raise_consistency_error(self, sqlite_url):
        # A table without the primary key constraint, so duplicates can exist
        engine = build_engine(sqlite_url)
        try:
            async with engine.begin() as conn:
                await conn.execute(text(
                    "CREATE TABLE album (id INTEGER, title TEXT, artist TEXT, price NUMERIC)"
                ))
                await conn.execute(text(
                    "INSERT INTO album (id, title, artist, price) VALUES "
                    "(7, 'One', 'A', 1.00), (7, 'Two', 'B', 2.00)"
                ))
            store = DatabaseAlbumStore(engine)

            with pytest.raises(ConsistencyError) as exc_info:
                await store.get_by_id(7)

            assert isinstance(exc_info.value, StoreError)
            assert exc_info.value.context["row_count"] == 2
        finally:
            await engine.dispose()


class TestDatabaseStoreErrors:

    @pytest.mark.asyncio
    async def test_missing_table_wrapped_in_store_error(self, sqlite_url):
        engine = build_engine(sqlite_url)
        store = DatabaseAlbumStore(engine)
        try:
            with pytest.raises(StoreError) as exc_info:
                await store.get_all()
        finally:
            await engine.dispose()

        assert exc_info.value.operation == "get_all"
        assert "OperationalError" in exc_info.value.context["cause"]

    @pytest.mark.asyncio
    async def test_insert_failure_names_operation(self, sqlite_url, sample_album):
        engine = build_engine(sqlite_url)
        store = DatabaseAlbumStore(engine)
        try:
            with pytest.raises(StoreError) as exc_info:
                await store.insert(sample_album)
        finally:
            await engine.dispose()

        assert exc_info.value.operation == "insert"

    @pytest.mark.asyncio
    async def test_id_wider_than_driver_integer_wrapped(self, db_store):
        with pytest.raises(StoreError) as exc_info:
            await db_store.get_by_id(2 ** 70)

        assert exc_info.value.operation == "get_by_id"
        assert exc_info.value.context["album_id"] == 2 ** 70

    @pytest.mark.asyncio
    async def test_health_check(self, db_store):
        assert await db_store.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_unreachable(self, tmp_path):
        engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'albums.db'}")
        store = DatabaseAlbumStore(engine)
        try:
            assert await store.health_check() is False
        finally:
            await engine.dispose()


class TestDatabaseStoreCancellation:

    @pytest.mark.asyncio
    async def test_cancelled_query_releases_connection(self, sqlite_url, sample_album, monkeypatch):
        # One connection, no overflow: a leaked checkout blocks the next query
        engine = create_async_engine(
            sqlite_url,
            poolclass=AsyncAdaptedQueuePool,
            pool_size=1,
            max_overflow=0,
            pool_timeout=2,
        )
        store = DatabaseAlbumStore(engine)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            await store.insert(sample_album)

            original_execute = AsyncConnection.execute

            async def stalled_execute(self, *args, **kwargs):
                await asyncio.sleep(5)
                return await original_execute(self, *args, **kwargs)

            monkeypatch.setattr(AsyncConnection, "execute", stalled_execute)

            with pytest.raises(StoreError) as exc_info:
                await call_store("get_by_id", store.get_by_id(1), timeout=0.05)

            monkeypatch.undo()

            assert exc_info.value.operation == "get_by_id"
            assert engine.sync_engine.pool.checkedout() == 0
            albums = await asyncio.wait_for(store.get_all(), timeout=5)
            assert [a.title for a in albums] == ["Kind of Blue"]
        finally:
            await engine.dispose()
