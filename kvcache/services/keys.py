from collections import OrderedDict
from typing import Optional
import hashlib
import re

from kvcache.errors import CacheBadRequestError

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def hash_key(key: str) -> str:
    """Fixed-width, deterministic file name for a cache key."""
    return hashlib.md5(key.encode("utf-8")).hexdigest()


def sanitize_type(type: str) -> str:
    """
    Reduce a cache type to [A-Za-z0-9] so it is safe to use as a directory name.
    Raises CacheBadRequestError if nothing usable is left.
    """
    cleaned = _NON_ALNUM.sub("", type or "")
    if not cleaned:
        raise CacheBadRequestError(f"Cache type {type!r} has no alphanumeric characters")
    return cleaned


class KeyHashCache:
    """
    Bounded LRU memo of key -> hash_key(key), owned by a single store instance.
    Least recently used hashes are evicted once `capacity` is reached.
    """
    def __init__(self, capacity: int = 10_000):
        self.capacity = max(1, capacity)
        self._data: "OrderedDict[str, str]" = OrderedDict()

    def get(self, key: str) -> str:
        digest: Optional[str] = self._data.pop(key, None)
        if digest is None:
            digest = hash_key(key)
            if len(self._data) >= self.capacity:
                self._data.popitem(last=False)  # Evict LRU
        # Move to MRU
        self._data[key] = digest
        return digest

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data
