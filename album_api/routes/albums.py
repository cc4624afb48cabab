"""
Album API: Album Route Handlers
================================

What:  GET /albums (list), GET /albums/{id} (detail), POST /albums (create).
How:   Each handler validates its input, makes exactly one store call under
       the request deadline, and returns the result. Errors raised here or by
       the store are turned into JSON responses by the global handlers in
       main.py.

Status codes:
    200  read succeeded
    201  album created; body is the persisted album with its new id
    400  album id is not an integer, or the JSON body is malformed
    404  no album with that id (including ids beyond the id column range)
    500  store failure or deadline exceeded
"""

import logging
import re
from typing import List

from fastapi import APIRouter, Depends

from album_api.dependencies import call_store, get_album_store
from album_api.exceptions import NotFoundError, ValidationError
from album_api.models.album import ALBUM_ID_MAX, ALBUM_ID_MIN
from album_api.schemas.album import Album, AlbumCreate, ErrorResponse
from album_api.services.album_store import AlbumStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/albums", tags=["Albums"])

_ALBUM_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_album_id(raw: str) -> int:
    """
    Parse the {id} path segment as an integer.

    Only an optional sign followed by ASCII digits is accepted; int() alone
    would also take "1_0", surrounding whitespace and non-ASCII digits.

    Raises:
        ValidationError: The segment is not a base-10 integer.
        NotFoundError: The integer is outside the id column's range, so no
                       album can have it.
    """
    if not _ALBUM_ID_PATTERN.fullmatch(raw):
        raise ValidationError(
            message="Invalid ID number",
            field="id",
            context={"value": raw},
        )

    album_id = int(raw)
    if not ALBUM_ID_MIN <= album_id <= ALBUM_ID_MAX:
        raise NotFoundError(resource="album", resource_id=raw)
    return album_id


@router.get(
    "",
    response_model=List[Album],
    responses={
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="List all albums",
)
async def list_albums(store: AlbumStore = Depends(get_album_store)) -> List[Album]:
    """Return every album, ordered by id."""
    return await call_store("get_all", store.get_all())


@router.get(
    "/{album_id}",
    response_model=Album,
    responses={
        400: {"description": "Invalid album id", "model": ErrorResponse},
        404: {"description": "Album not found", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Get a single album by ID",
)
async def get_album(
    album_id: str,
    store: AlbumStore = Depends(get_album_store),
) -> Album:
    """
    Locate the album whose id matches the path parameter.

    album_id is declared as a string and parsed here so that a non-numeric
    id yields 400 with our error body instead of FastAPI's 422.
    """
    parsed = parse_album_id(album_id)
    return await call_store("get_by_id", store.get_by_id(parsed))


@router.post(
    "",
    status_code=201,
    response_model=Album,
    responses={
        201: {"description": "Album created", "model": Album},
        400: {"description": "Invalid request body", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Add an album",
)
async def create_album(
    album: AlbumCreate,
    store: AlbumStore = Depends(get_album_store),
) -> Album:
    """
    Add an album from the JSON request body.

    A client-supplied id is ignored; the response carries the id the store
    assigned.
    """
    created = await call_store("insert", store.insert(album))
    logger.info("Album %s created", created.id)
    return created
