"""
Album API: Application Package
===============================

HTTP service exposing a record album catalogue.

Layers:

    ┌──────────────────────────────────────────┐
    │          Routes (HTTP handlers)          │  ← parse input, map errors to status
    ├──────────────────────────────────────────┤
    │          AlbumStore (interface)          │  ← get_all / get_by_id / insert
    ├─────────────────────┬────────────────────┤
    │ DatabaseAlbumStore  │ MemoryAlbumStore   │
    │ (SQLAlchemy pool)   │ (locked list)      │
    └─────────────────────┴────────────────────┘
"""

__version__ = "1.0.0"
