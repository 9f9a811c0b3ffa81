# models/cache_entry.py

from sqlalchemy import Column, Integer, String, LargeBinary, UniqueConstraint, Index
from kvcache.database import Base


class CacheRecord(Base):
    __tablename__ = "cache"
    __table_args__ = (
        # One row per (type, key); writes upsert against this constraint
        UniqueConstraint("type", "key", name="uq_cache_type_key"),
        # gc() scans by expiry
        Index("ix_cache_expires", "expires"),
    )

    # Auto-assigned identifier returned by store()
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Category namespace of the entry
    type = Column(String(64), nullable=False)

    # Identifier of the entity within its type
    key = Column(String(255), nullable=False)

    # Serialized payload
    data = Column(LargeBinary, nullable=False)

    # Absolute unix timestamp after which the entry is treated as absent
    expires = Column(Integer, nullable=False)
