"""
Album API: Process Entry Point
===============================

Usage:
    python -m album_api

Serves album_api.main:app with uvicorn on settings.backend_host and
settings.backend_port. Startup fails (non-zero exit) when the store cannot be
initialized.
"""

import uvicorn

from album_api.config import settings


def main() -> None:
    uvicorn.run(
        "album_api.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
