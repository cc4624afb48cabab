"""
Album API: Pydantic Request/Response Schemas
=============================================

What:  Pydantic models defining the HTTP contract of the album service.
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate the OpenAPI documentation.
Who:   Route handlers and stores (stores return Album, accept AlbumCreate).

Album JSON shape:
    {"id": string, "title": string, "artist": string, "price": number}
"""

from typing import Optional

from pydantic import BaseModel, Field

from album_api.models.album import ALBUM_TEXT_MAX_LENGTH


# ══════════════════════════════════════════════════════════════════════════
# Album Models
# ══════════════════════════════════════════════════════════════════════════


class AlbumCreate(BaseModel):
    """
    What:  Request body for POST /albums.

    Any "id" key in the body is dropped during validation: identifiers are
    assigned by the store, never by the client.

    title and artist are capped at the column width, so an oversize value is
    a 400 rather than a failed INSERT.
    """
    title: str = Field(max_length=ALBUM_TEXT_MAX_LENGTH, description="Album title")
    artist: str = Field(max_length=ALBUM_TEXT_MAX_LENGTH, description="Performing artist")
    price: float = Field(description="Price; non-negative by convention, not enforced")

    model_config = {
        "extra": "ignore",
        "json_schema_extra": {
            "examples": [
                {"title": "Kind of Blue", "artist": "Miles Davis", "price": 29.99},
            ]
        },
    }


class Album(BaseModel):
    """
    What:  A stored album, as returned by every read and by POST /albums.
    """
    id: str = Field(description="Server-assigned identifier")
    title: str = Field(description="Album title")
    artist: str = Field(description="Performing artist")
    price: float = Field(description="Price")


# ══════════════════════════════════════════════════════════════════════════
# Service Models
# ══════════════════════════════════════════════════════════════════════════


class PingResponse(BaseModel):
    """Fixed liveness payload returned by GET /ping."""
    message: str = Field(default="ok")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and store status.
    Who:   Returned by GET /health for monitoring probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Active store backend: database, memory")
    store_status: str = Field(description="Store reachability: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "not_found",
            "message": "album with ID '42' was not found",
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
