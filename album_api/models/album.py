"""
Album API: Album SQLAlchemy Model
==================================

What:  ORM mapping for the `album` table.
How:   Inherits from the shared DeclarativeBase; alembic reads this for migrations.
Who:   Used by DatabaseAlbumStore to build its statements.

Table:
    album(id PRIMARY KEY auto-generated, title, artist, price)

    Rows are created by inserts only; the service has no update or delete.
"""

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from album_api.database import Base

# Bounds of the 32-bit INTEGER id column; ids outside them cannot exist
ALBUM_ID_MIN = -(2 ** 31)
ALBUM_ID_MAX = 2 ** 31 - 1

# Length limit of the title and artist VARCHAR columns
ALBUM_TEXT_MAX_LENGTH = 255


class AlbumRecord(Base):
    """A record album as stored in the database."""

    __tablename__ = "album"

    # Server-assigned; exposed to clients as a string
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(String(ALBUM_TEXT_MAX_LENGTH), nullable=False)

    artist: Mapped[str] = mapped_column(String(ALBUM_TEXT_MAX_LENGTH), nullable=False)

    # asdecimal=False: read back as float to match the JSON number in the API
    price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<AlbumRecord(id={self.id}, title='{self.title}', artist='{self.artist}')>"
