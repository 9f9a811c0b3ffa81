# tests/conftest.py
import pytest
from sqlalchemy import create_engine

import kvcache.models.cache_entry  # noqa: F401  registers the cache table on Base.metadata
from kvcache.database import Base
from kvcache.services.db_cache import DatabaseCacheStore
from kvcache.services.file_cache import FileCacheStore


@pytest.fixture
def engine(tmp_path):
    """A throwaway SQLite database with the cache schema created."""
    eng = create_engine(f"sqlite:///{tmp_path / 'cache.db'}", future=True)
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture
def db_cache(engine):
    return DatabaseCacheStore(engine)


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "filecache"


@pytest.fixture
def file_cache(cache_dir):
    return FileCacheStore(cache_dir)
