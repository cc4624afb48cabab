"""
Album API: Store Layer
=======================

Store Inventory:
    - AlbumStore (abstract):  get_all / get_by_id / insert / health_check
    - DatabaseAlbumStore:     table `album` through a pooled AsyncEngine
    - MemoryAlbumStore:       process-local list guarded by an asyncio.Lock

Route handlers depend on AlbumStore only; main.py chooses the backend from
settings.album_store.
"""
