"""
Album API: Abstract Album Store Interface
==========================================

What:  Abstract base class defining the capability set every album backend
       must provide.
How:   Concrete stores inherit from AlbumStore and implement its coroutines.
       Route handlers depend only on this interface; the lifespan in main.py
       decides which implementation is installed.
Who:   Implemented by DatabaseAlbumStore and MemoryAlbumStore; called by
       routes/albums.py and routes/health.py.

Implementations:
    - DatabaseAlbumStore: relational table `album` through a pooled AsyncEngine
    - MemoryAlbumStore:   process-local ordered list guarded by an asyncio.Lock

Deadlines:
    Callers await every operation under asyncio.wait_for with the configured
    request timeout. Implementations must therefore tolerate cancellation at
    any await point and release what they hold (connections, locks) on the
    way out.
"""

from abc import ABC, abstractmethod
from typing import List

from album_api.schemas.album import Album, AlbumCreate


class AlbumStore(ABC):
    """
    Abstract interface for album persistence.

    Contract:
        - get_all() returns every album, ordered by identifier
        - get_by_id() returns exactly one album or raises NotFoundError
        - insert() assigns the identifier and returns the persisted album
        - backend failures are raised as StoreError, never as driver exceptions
    """

    #: Short label reported by /health and in logs
    name: str = "abstract"

    @abstractmethod
    async def get_all(self) -> List[Album]:
        """
        Return all albums.

        Raises:
            StoreError: The backend failed.
        """
        ...

    @abstractmethod
    async def get_by_id(self, album_id: int) -> Album:
        """
        Return the album whose identifier equals `album_id`.

        Raises:
            NotFoundError: No album has that identifier.
            ConsistencyError: More than one album has that identifier.
            StoreError: The backend failed.
        """
        ...

    @abstractmethod
    async def insert(self, album: AlbumCreate) -> Album:
        """
        Persist a new album and return it with its assigned identifier.

        Raises:
            StoreError: The backend failed.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True if the backend is reachable. Never raises."""
        ...

    async def close(self) -> None:
        """Release backend resources. Called once at shutdown."""
        return None
