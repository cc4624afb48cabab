"""
Album API: In-Memory Store Unit Tests
======================================

What we test:
    ✅ Sample catalogue is loaded with ids 1..3
    ✅ Inserts get fresh ids from the counter
    ✅ Lookup by id, and NotFoundError for unknown ids
    ✅ Concurrent inserts never lose updates
"""

import asyncio

import pytest

from album_api.exceptions import NotFoundError
from album_api.schemas.album import AlbumCreate
from album_api.services.memory_store import DEFAULT_SEED, MemoryAlbumStore


class TestMemoryStoreRead:

    @pytest.mark.asyncio
    async def test_default_seed_loaded_in_order(self, memory_store):
        albums = await memory_store.get_all()

        assert [a.id for a in albums] == ["1", "2", "3"]
        assert [a.title for a in albums] == [s.title for s in DEFAULT_SEED]

    @pytest.mark.asyncio
    async def test_empty_seed(self):
        store = MemoryAlbumStore(seed=[])
        assert await store.get_all() == []

    @pytest.mark.asyncio
    async def test_get_by_id(self, memory_store):
        album = await memory_store.get_by_id(2)

        assert album.id == "2"
        assert album.title == "Jeru"
        assert album.artist == "Gerry Mulligan"
        assert album.price == 17.99

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, memory_store):
        with pytest.raises(NotFoundError) as exc_info:
            await memory_store.get_by_id(404)
        assert exc_info.value.context["resource_id"] == "404"

    @pytest.mark.asyncio
    async def test_get_all_returns_a_copy(self, memory_store):
        albums = await memory_store.get_all()
        albums.clear()

        assert len(await memory_store.get_all()) == 3


class TestMemoryStoreInsert:

    @pytest.mark.asyncio
    async def test_insert_assigns_next_id(self, memory_store, sample_album):
        created = await memory_store.insert(sample_album)

        assert created.id == "4"
        assert created.title == "Kind of Blue"
        assert (await memory_store.get_by_id(4)) == created

    @pytest.mark.asyncio
    async def test_insert_appends_in_order(self, memory_store, sample_album):
        await memory_store.insert(sample_album)
        albums = await memory_store.get_all()

        assert albums[-1].title == "Kind of Blue"

    @pytest.mark.asyncio
    async def test_concurrent_inserts_get_distinct_ids(self):
        store = MemoryAlbumStore(seed=[])
        payloads = [
            AlbumCreate(title=f"Album {i}", artist=f"Artist {i}", price=float(i))
            for i in range(50)
        ]

        created = await asyncio.gather(*(store.insert(p) for p in payloads))

        ids = {album.id for album in created}
        assert len(ids) == 50
        stored = await store.get_all()
        assert len(stored) == 50
        assert {a.title for a in stored} == {p.title for p in payloads}

    @pytest.mark.asyncio
    async def test_health_check(self, memory_store):
        assert await memory_store.health_check() is True
