# kvcache/errors.py


class CacheError(Exception):
    """Base exception for the cache layer."""


class CacheBadRequestError(CacheError):
    """The caller supplied structurally invalid input (missing type/key, unsupported payload)."""


class CacheDataCorruptionError(CacheError):
    """A stored payload could not be deserialized."""
