"""Background task that reclaims expired artifacts."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from resume_delivery.storage.artifact_store import ArtifactStore

logger = logging.getLogger(__name__)


class ExpiryReaper:
    """Sleeps until the next artifact expiry, then sweeps the store."""

    def __init__(self, store: ArtifactStore, max_interval: float = 1.0, min_interval: float = 0.05):
        self.store = store
        self.max_interval = max_interval
        self.min_interval = min_interval
        self._task: asyncio.Task | None = None

    def next_delay(self) -> float:
        remaining = self.store.seconds_until_next_expiry()
        if remaining is None:
            return self.max_interval
        return min(max(remaining, self.min_interval), self.max_interval)

    async def run(self) -> None:
        while True:
            try:
                removed = self.store.sweep()
            except Exception:
                logger.error("Artifact sweep failed", exc_info=True)
            else:
                if removed:
                    logger.info("Reaped %d expired artifact(s)", removed)
            await asyncio.sleep(self.next_delay())

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="artifact-reaper")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
