# kvcache/services/db_cache.py

import logging
import time
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import delete, func, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection, Engine

from kvcache.config import CACHE_TTL_SECONDS
from kvcache.errors import CacheDataCorruptionError
from kvcache.models.cache_entry import CacheRecord
from kvcache.schemas.cache_entry import CacheEntry
from kvcache.serialization import dumps, loads
from .cache import Cache

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE ... RETURNING
_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class DatabaseCacheStore(Cache):
    """
    Cache backend on a single relational table (see models.cache_entry.CacheRecord).

    Payloads of any JSON-compatible type are serialized into a blob column.
    Expired rows are deleted lazily whenever a read comes across them, and in
    bulk by gc(). Rows whose payload no longer deserializes are logged,
    deleted and reported as misses.

    The engine is owned by the caller; every operation checks out its own
    connection and commits before returning.
    """

    def __init__(self, engine: Engine, logger: Optional[logging.Logger] = None,
                 default_ttl: int = CACHE_TTL_SECONDS) -> None:
        self._engine = engine
        self._logger = logger or logging.getLogger(__name__)
        self.default_ttl = default_ttl
        self._table = CacheRecord.__table__

    def get_all(self, key: str, types: Optional[List[str]] = None, prefix: str = "") -> Dict[str, CacheEntry]:
        t = self._table
        stmt = select(t).where(t.c.key == key)
        if types:
            stmt = stmt.where(t.c.type.in_([prefix + type for type in types]))

        with self._engine.connect() as conn:
            rows = conn.execute(stmt.order_by(t.c.id)).mappings().all()

        now = time.time()
        result: Dict[str, CacheEntry] = {}
        for row in rows:
            entry = self._live_entry(row, now)
            if entry is None:
                continue
            returntype = row["type"]
            if prefix and returntype.startswith(prefix):
                returntype = returntype[len(prefix):]
            result[returntype] = entry
        return result

    def get(self, type: Optional[str] = None, key: Optional[str] = None) -> Optional[CacheEntry]:
        t = self._table
        stmt = select(t)
        conditions = self._conditions(type, key)
        if conditions:
            stmt = stmt.where(*conditions)

        with self._engine.connect() as conn:
            row = conn.execute(stmt.order_by(t.c.id).limit(1)).mappings().first()

        if row is None:
            return None
        return self._live_entry(row, time.time())

    def size(self, type: Optional[str] = None) -> int:
        t = self._table
        stmt = select(func.count(t.c.id)).where(t.c.expires > int(time.time()))
        if type:
            stmt = stmt.where(t.c.type == type)
        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one() or 0)

    def delete(self, type: Optional[str] = None, key: Optional[str] = None) -> bool:
        stmt = delete(self._table)
        conditions = self._conditions(type, key)
        if conditions:
            stmt = stmt.where(*conditions)
        with self._engine.begin() as conn:
            conn.execute(stmt)
        return True

    def gc(self, type: Optional[str] = None) -> bool:
        t = self._table
        stmt = delete(t).where(t.c.expires <= int(time.time()))
        if type:
            stmt = stmt.where(t.c.type == type)
        with self._engine.begin() as conn:
            deleted = conn.execute(stmt).rowcount
        logger.info("Cache gc removed %s expired rows (type=%s)", deleted, type)
        return True

    def store(self, type: str, key: str, data: Any, expiry: Optional[int] = None) -> int:
        if expiry is None:
            expiry = int(time.time()) + self.default_ttl
        values = {
            "type": type,
            "key": key,
            "data": dumps(data),
            "expires": int(expiry),
        }
        with self._engine.begin() as conn:
            return self._upsert(conn, values)

    def _upsert(self, conn: Connection, values: Dict[str, Any]) -> int:
        """
        Insert-or-replace on (type, key) in a single statement where the dialect
        supports it; otherwise delete then insert inside the caller's transaction.
        """
        t = self._table
        dialect_insert = _UPSERT_INSERTS.get(conn.dialect.name)
        if dialect_insert is not None:
            stmt = dialect_insert(t).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=[t.c.type, t.c.key],
                set_={"data": stmt.excluded.data, "expires": stmt.excluded.expires},
            ).returning(t.c.id)
            return conn.execute(stmt).scalar_one()

        conn.execute(delete(t).where(t.c.type == values["type"], t.c.key == values["key"]))
        result = conn.execute(insert(t).values(**values))
        return result.inserted_primary_key[0]

    def _conditions(self, type: Optional[str], key: Optional[str]) -> list:
        t = self._table
        conditions = []
        if type:
            conditions.append(t.c.type == type)
        if key:
            conditions.append(t.c.key == key)
        return conditions

    def _delete_row(self, id: int) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(self._table).where(self._table.c.id == id))

    def _live_entry(self, row: Mapping[str, Any], now: float) -> Optional[CacheEntry]:
        """Turn a row into an entry, deleting it instead if it is expired or corrupt."""
        if row["expires"] <= now:
            logger.debug("Dropping expired cache record type=%s key=%s", row["type"], row["key"])
            self._delete_row(row["id"])
            return None

        try:
            data = loads(row["data"])
        except CacheDataCorruptionError as ex:
            # Data corruption. Delete the cached record.
            self._logger.error(
                "Error unserializing cache record with type %s and key %s, error: %s",
                row["type"], row["key"], ex,
            )
            self._delete_row(row["id"])
            return None

        return CacheEntry(id=row["id"], type=row["type"], key=row["key"], data=data, expires=row["expires"])
