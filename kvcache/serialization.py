# kvcache/serialization.py
import json
from typing import Any

from kvcache.errors import CacheBadRequestError, CacheDataCorruptionError


def _check_round_trip(value: Any) -> None:
    """Reject values JSON would silently reshape: non-str mapping keys, tuples."""
    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise CacheBadRequestError(
                    f"Mapping key {k!r} of type {k.__class__.__name__} would not survive serialization; use str keys"
                )
            _check_round_trip(v)
    elif isinstance(value, tuple):
        raise CacheBadRequestError("Tuples would be read back as lists; store a list instead")
    elif isinstance(value, list):
        for item in value:
            _check_round_trip(item)


def dumps(value: Any) -> bytes:
    """Encode a payload for the blob column. Dicts, lists, bools, ints, floats, strings and None survive a round trip."""
    _check_round_trip(value)
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as ex:
        raise CacheBadRequestError(f"Payload of type {type(value).__name__} is not serializable: {ex}") from ex


def loads(blob: bytes) -> Any:
    if isinstance(blob, memoryview):
        blob = blob.tobytes()
    try:
        return json.loads(blob.decode("utf-8") if isinstance(blob, (bytes, bytearray)) else blob)
    except (UnicodeDecodeError, ValueError, TypeError) as ex:
        raise CacheDataCorruptionError(str(ex)) from ex
