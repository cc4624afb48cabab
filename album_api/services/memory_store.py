"""
Album API: In-Memory Album Store
=================================

What:  AlbumStore implementation over a process-local ordered list.
How:   A single asyncio.Lock serializes every operation, so concurrent
       requests on the event loop never observe a half-applied insert and
       never lose one. Identifiers come from an internal counter.
Who:   Installed when settings.album_store is "memory"; also used by the
       HTTP tests.

Nothing is persisted: the list starts from the seed albums on every start.
"""

import asyncio
import itertools
import logging
from typing import Iterable, List, Optional

from album_api.exceptions import NotFoundError
from album_api.schemas.album import Album, AlbumCreate
from album_api.services.album_store import AlbumStore

logger = logging.getLogger(__name__)

# Sample catalogue loaded when no explicit seed is given
DEFAULT_SEED = (
    AlbumCreate(title="Blue Train", artist="John Coltrane", price=56.99),
    AlbumCreate(title="Jeru", artist="Gerry Mulligan", price=17.99),
    AlbumCreate(title="Sarah Vaughan and Clifford Brown", artist="Sarah Vaughan", price=39.99),
)


class MemoryAlbumStore(AlbumStore):
    """
    Album store held in memory.

    Args:
        seed: Albums inserted at construction, in order. Defaults to
              DEFAULT_SEED; pass an empty iterable for an empty store.
    """

    name = "memory"

    def __init__(self, seed: Optional[Iterable[AlbumCreate]] = None):
        self._albums: List[Album] = []
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()
        for album in DEFAULT_SEED if seed is None else seed:
            self._albums.append(self._assign_id(album))

    def _assign_id(self, album: AlbumCreate) -> Album:
        return Album(id=str(next(self._ids)), **album.model_dump())

    async def get_all(self) -> List[Album]:
        async with self._lock:
            return list(self._albums)

    async def get_by_id(self, album_id: int) -> Album:
        wanted = str(album_id)
        async with self._lock:
            for album in self._albums:
                if album.id == wanted:
                    return album
        raise NotFoundError(resource="album", resource_id=wanted)

    async def insert(self, album: AlbumCreate) -> Album:
        async with self._lock:
            stored = self._assign_id(album)
            self._albums.append(stored)
        logger.info("Inserted album %s (%s / %s)", stored.id, stored.title, stored.artist)
        return stored

    async def health_check(self) -> bool:
        return True
