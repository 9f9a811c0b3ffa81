# kvcache/services/file_cache.py

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from kvcache.config import KEY_HASH_CACHE_CAPACITY
from kvcache.errors import CacheBadRequestError
from kvcache.schemas.cache_entry import CacheEntry
from .cache import Cache
from .keys import KeyHashCache, sanitize_type

logger = logging.getLogger(__name__)

_SCALARS = (str, int, float, bool)


class FileCacheStore(Cache):
    """
    Cache backend on a directory tree: <root>/<sanitized type>/<md5 of key>.

    Only scalar payloads are accepted; they are written as text and read back
    as strings. Files carry no expiry, so store() ignores `expiry` and gc() has
    nothing to do.
    """

    def __init__(self, root: Union[str, Path], key_cache_capacity: int = KEY_HASH_CACHE_CAPACITY) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self._keys = KeyHashCache(capacity=key_cache_capacity)

    def get_all(self, key: str, types: Optional[List[str]] = None, prefix: str = "") -> Dict[str, CacheEntry]:
        """
        Read every requested type for `key`.

        All types are validated before any file is read: a type that has no
        alphanumeric characters (after prefixing) fails the whole call with
        CacheBadRequestError rather than being skipped.
        """
        if not key:
            raise CacheBadRequestError("No key received by filecache")
        if not types:
            raise CacheBadRequestError("No types received by filecache")
        for type in types:
            sanitize_type(prefix + type)

        result: Dict[str, CacheEntry] = {}
        for type in types:
            filename = self.get_filename(prefix + type, key)
            if filename.is_file():
                result[type] = self._entry(prefix + type, key, filename)
        return result

    def get(self, type: Optional[str] = None, key: Optional[str] = None) -> Optional[CacheEntry]:
        self._require(type, key)
        filename = self.get_filename(type, key)
        if not filename.is_file():
            return None
        return self._entry(type, key, filename)

    def size(self, type: Optional[str] = None) -> int:
        if not type:
            raise CacheBadRequestError("Empty type received by filecache")
        typedir = self.root / sanitize_type(type)
        if not typedir.is_dir():
            return 0
        return sum(1 for path in typedir.iterdir() if path.is_file())

    def delete(self, type: Optional[str] = None, key: Optional[str] = None) -> bool:
        self._require(type, key)
        filename = self.get_filename(type, key)
        if not filename.exists():
            return True
        filename.unlink()
        return not filename.exists()

    def gc(self, type: Optional[str] = None) -> bool:
        # Does not currently support expiry.
        return True

    def store(self, type: str, key: str, data: Any, expiry: Optional[int] = None) -> str:
        self._require(type, key)
        if not isinstance(data, _SCALARS):
            raise CacheBadRequestError(
                f"You can only write scalar data to files, got {data.__class__.__name__}"
            )
        filename = self.get_filename(type, key)
        filename.parent.mkdir(parents=True, exist_ok=True)
        filename.write_bytes(str(data).encode("utf-8"))
        logger.debug("Stored cache file %s", filename)
        return filename.name

    def get_filename(self, type: str, key: str) -> Path:
        """Full path of the file holding (type, key)."""
        return self.root / sanitize_type(type) / self._keys.get(key)

    def _require(self, type: Optional[str], key: Optional[str]) -> None:
        if not type or not key:
            raise CacheBadRequestError("Empty type or key received by filecache")

    def _entry(self, type: str, key: str, filename: Path) -> CacheEntry:
        return CacheEntry(id=filename.name, type=type, key=key, data=filename.read_bytes().decode("utf-8"))
