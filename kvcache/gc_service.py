# kvcache/gc_service.py

import asyncio
import logging
from contextlib import suppress
from typing import Iterable, List, Optional

from kvcache.config import GC_INTERVAL_SECONDS
from kvcache.services.cache import Cache

logger = logging.getLogger(__name__)


class GarbageCollectionService:
    """Periodic background worker that purges expired cache entries."""

    def __init__(self, cache: Cache, interval_seconds: int | None = None,
                 types: Optional[Iterable[str]] = None) -> None:
        # types: restrict collection to these cache types; None collects everything in one pass
        self.cache = cache
        self.interval_seconds = interval_seconds or GC_INTERVAL_SECONDS
        self.types: List[Optional[str]] = list(types) if types else [None]
        self._task: asyncio.Task | None = None
        self._stop = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None

    async def start(self) -> None:
        """Start the background worker task."""
        if self._task is not None:
            return  # Already started
        self._stop.clear()
        logger.info("Starting cache gc worker (interval=%s sec, types=%s)...", self.interval_seconds, self.types)
        self._task = asyncio.create_task(self._run(), name="cache-gc-worker")

    async def stop(self) -> None:
        """Signal the worker to stop and wait for it to finish."""
        logger.info("Stopping cache gc worker...")
        self._stop.set()
        if self._task:
            try:
                await asyncio.wait_for(self._task, timeout=5)
            except asyncio.TimeoutError:
                logger.warning("Cache gc worker did not stop in time; cancelling...")
                self._task.cancel()
                with suppress(asyncio.CancelledError):
                    await self._task
            finally:
                self._task = None
        logger.info("Cache gc worker stopped.")

    async def _run(self) -> None:
        """Main loop: run a gc cycle periodically until stop is requested."""
        try:
            while not self._stop.is_set():
                try:
                    await asyncio.to_thread(self.collect)
                except Exception:
                    logger.exception("Cache gc cycle failed with an exception.")
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=self.interval_seconds)
                except asyncio.TimeoutError:
                    pass
        finally:
            logger.info("Cache gc loop exiting.")

    def collect(self) -> bool:
        """One synchronous gc cycle over every configured type. Returns True if all passes succeeded."""
        ok = True
        for type in self.types:
            if not self.cache.gc(type):
                logger.warning("Cache gc reported failure for type=%s", type)
                ok = False
        return ok
