import logging
from typing import Optional, Union
from pathlib import Path

from sqlalchemy.engine import Engine

from .cache import Cache
from .db_cache import DatabaseCacheStore
from .file_cache import FileCacheStore
from kvcache.config import CACHE_BACKEND, CACHE_DIR, KEY_HASH_CACHE_CAPACITY

logger = logging.getLogger(__name__)

_cache_singleton: Optional[Cache] = None


def build_cache(backend: str, engine: Optional[Engine] = None,
                cache_dir: Union[str, Path] = CACHE_DIR) -> Cache:
    """
    Construct a cache backend by name:
      - "database" -> DatabaseCacheStore on `engine` (the shared app engine if omitted)
      - "file"     -> FileCacheStore rooted at `cache_dir`

    Unknown names fall back to the database backend.
    """
    backend = (backend or "").lower()
    if backend == "file":
        logger.info("Using file cache backend at %s", cache_dir)
        return FileCacheStore(cache_dir, key_cache_capacity=KEY_HASH_CACHE_CAPACITY)

    if backend != "database":
        logger.warning("Unknown cache backend %r; falling back to database", backend)
    if engine is None:
        from kvcache.database import engine as app_engine
        engine = app_engine
    logger.info("Using database cache backend (%s)", engine.url.render_as_string(hide_password=True))
    return DatabaseCacheStore(engine)


def get_cache() -> Cache:
    """
    Returns a process-wide cache instance chosen by CACHE_BACKEND.

    Keeps callers unaware of the underlying storage and lets the backend be
    flipped through environment variables.
    """
    global _cache_singleton
    if _cache_singleton is None:
        _cache_singleton = build_cache(CACHE_BACKEND, cache_dir=CACHE_DIR)
    return _cache_singleton
