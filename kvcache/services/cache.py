from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from kvcache.schemas.cache_entry import CacheEntry


class Cache(ABC):
    """Typed key-value cache interface so callers can swap backends (database, files) without changing code."""

    @abstractmethod
    def get_all(self, key: str, types: Optional[List[str]] = None, prefix: str = "") -> Dict[str, CacheEntry]:
        """
        Fetch every requested type stored under a single key.

        `prefix` is prepended to each type for the lookup and stripped again in the
        returned mapping. Missing or expired types are left out of the result.
        """
        ...

    @abstractmethod
    def get(self, type: Optional[str] = None, key: Optional[str] = None) -> Optional[CacheEntry]:
        """Return the entry for (type, key), or None when it is missing or expired."""
        ...

    @abstractmethod
    def size(self, type: Optional[str] = None) -> int:
        ...

    @abstractmethod
    def delete(self, type: Optional[str] = None, key: Optional[str] = None) -> bool:
        """Delete matching entries. Omitted fields act as wildcards; deleting nothing still succeeds."""
        ...

    @abstractmethod
    def gc(self, type: Optional[str] = None) -> bool:
        """Delete all expired entries, optionally restricted to one type."""
        ...

    @abstractmethod
    def store(self, type: str, key: str, data: Any, expiry: Optional[int] = None) -> Union[int, str]:
        """Store `data` under (type, key), replacing any previous entry, and return its identifier."""
        ...
