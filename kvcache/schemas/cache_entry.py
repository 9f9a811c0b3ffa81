# schemas/cache_entry.py

import time
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class CacheEntry(BaseModel):
    """One cached (type, key) -> data record, as returned by every cache backend."""

    id: Optional[Union[int, str]] = Field(None, description="Backend identifier: a row id or a file name.")
    type: str = Field(..., description="Category namespace of the entry.")
    key: str = Field(..., description="Identifier of the entity within its type.")
    data: Any = Field(None, description="Deserialized payload.")
    expires: Optional[int] = Field(None, description="Unix timestamp of expiry; None when the backend has no expiry.")

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.expires is None:
            return False
        now = time.time() if now is None else now
        return self.expires <= now
