"""
Album API: Database-Backed Album Store
=======================================

What:  AlbumStore implementation over the relational table `album`.
How:   Each operation borrows a connection from the engine's pool inside an
       `async with` block, so the connection goes back to the pool on every
       exit path (success, error, or cancellation by the request deadline).
       Statements are SQLAlchemy expressions; values are always bound
       parameters.
Who:   Installed by the lifespan in main.py when settings.album_store is
       "database"; called by route handlers through the AlbumStore interface.

Statements:
    get_all    SELECT id, title, artist, price FROM album ORDER BY id
    get_by_id  SELECT id, title, artist, price FROM album WHERE id = :id
    insert     INSERT INTO album (title, artist, price) VALUES (:title, :artist, :price)
               RETURNING id, title, artist, price

Error Handling:
    SQLAlchemyError, and the OSError, OverflowError and ValueError a driver
    raises directly, are wrapped in StoreError naming the failed operation. NotFoundError and ConsistencyError pass through unchanged.
"""

import logging
from typing import Any, List, Mapping

from sqlalchemy import insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from album_api.database import dispose_engine
from album_api.exceptions import ConsistencyError, NotFoundError, StoreError
from album_api.models.album import AlbumRecord
from album_api.schemas.album import Album, AlbumCreate
from album_api.services.album_store import AlbumStore

logger = logging.getLogger(__name__)

_ALBUM_COLUMNS = (
    AlbumRecord.id,
    AlbumRecord.title,
    AlbumRecord.artist,
    AlbumRecord.price,
)

# Errors a driver can raise without SQLAlchemy wrapping them, e.g.
# OverflowError from sqlite3 for an int wider than 64 bits
_DRIVER_ERRORS = (SQLAlchemyError, OSError, OverflowError, ValueError)


def _row_to_album(row: Mapping[str, Any]) -> Album:
    """Map a result row to an Album by column name."""
    return Album(
        id=str(row["id"]),
        title=row["title"],
        artist=row["artist"],
        price=float(row["price"]),
    )


class DatabaseAlbumStore(AlbumStore):
    """
    Album store backed by a pooled AsyncEngine.

    The engine is owned by the store once installed: close() disposes it.
    """

    name = "database"

    def __init__(self, engine: AsyncEngine):
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def get_all(self) -> List[Album]:
        query = select(*_ALBUM_COLUMNS).order_by(AlbumRecord.id)
        try:
            async with self._engine.connect() as conn:
                # Server-side cursor; rows are mapped as they are fetched and
                # the cursor is closed when the stream is exhausted or fails
                result = await conn.stream(query)
                albums = [_row_to_album(row) async for row in result.mappings()]
        except _DRIVER_ERRORS as e:
            logger.error("Unable to query albums: %s", e)
            raise StoreError(
                message="Unable to query albums",
                operation="get_all",
                cause=e,
            ) from e

        logger.debug("Fetched %d albums", len(albums))
        return albums

    async def get_by_id(self, album_id: int) -> Album:
        query = select(*_ALBUM_COLUMNS).where(AlbumRecord.id == album_id)
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(query)
                rows = result.mappings().all()
        except _DRIVER_ERRORS as e:
            logger.error("Unable to query album %s: %s", album_id, e)
            raise StoreError(
                message="Unable to query album",
                operation="get_by_id",
                cause=e,
                context={"album_id": album_id},
            ) from e

        if not rows:
            raise NotFoundError(resource="album", resource_id=str(album_id))
        if len(rows) > 1:
            logger.error("Album id %s matched %d rows", album_id, len(rows))
            raise ConsistencyError(resource_id=str(album_id), row_count=len(rows))

        return _row_to_album(rows[0])

    async def insert(self, album: AlbumCreate) -> Album:
        # RETURNING: the caller sees the row as stored (price rounded to the
        # column scale), not the values it sent
        statement = (
            insert(AlbumRecord)
            .values(
                title=album.title,
                artist=album.artist,
                price=album.price,
            )
            .returning(*_ALBUM_COLUMNS)
        )
        try:
            # begin(): commit on success, rollback on error or cancellation
            async with self._engine.begin() as conn:
                result = await conn.execute(statement)
                row = result.mappings().one()
        except _DRIVER_ERRORS as e:
            logger.error("Unable to insert album: %s", e)
            raise StoreError(
                message="Unable to insert album",
                operation="insert",
                cause=e,
            ) from e

        created = _row_to_album(row)
        logger.info("Inserted album %s (%s / %s)", created.id, created.title, created.artist)
        return created

    async def health_check(self) -> bool:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except _DRIVER_ERRORS as e:
            logger.warning("Database health check failed: %s", e)
            return False

    async def close(self) -> None:
        await dispose_engine(self._engine)
        logger.info("Database connection pool closed")
