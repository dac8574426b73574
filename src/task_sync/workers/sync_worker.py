"""Sync worker: runs sync cycles on a fixed interval, one at a time."""
from __future__ import annotations

import asyncio
import logging

from task_sync.application.dto.sync import SyncError, SyncResult
from task_sync.application.ports.clock import Clock, system_clock
from task_sync.application.ports.transport import BatchTransport
from task_sync.application.uow import UoWFactory
from task_sync.config import Settings, settings
from task_sync.services.sync_service import run_sync_cycle

logger = logging.getLogger(__name__)


class SyncWorker:
    """Owns the recurring sync task and serializes cycles behind one lock.

    On-demand callers of ``run_once`` wait for a running cycle to finish;
    scheduled ticks skip instead.
    """

    def __init__(
        self,
        uow_factory: UoWFactory,
        transport: BatchTransport,
        *,
        interval: float,
        batch_size: int,
        max_retries: int,
        clock: Clock = system_clock,
    ) -> None:
        self._uow_factory = uow_factory
        self._transport = transport
        self._interval = interval
        self._batch_size = batch_size
        self._max_retries = max_retries
        self._clock = clock
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self.last_result: SyncResult | None = None

    @classmethod
    def from_settings(
        cls,
        cfg: Settings,
        uow_factory: UoWFactory,
        transport: BatchTransport,
    ) -> SyncWorker:
        return cls(
            uow_factory,
            transport,
            interval=cfg.SYNC_INTERVAL_SECONDS,
            batch_size=cfg.SYNC_BATCH_SIZE,
            max_retries=cfg.SYNC_RETRY_ATTEMPTS,
        )

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> SyncResult:
        async with self._lock:
            async with self._uow_factory() as uow:
                result = await run_sync_cycle(
                    uow,
                    self._transport,
                    batch_size=self._batch_size,
                    max_retries=self._max_retries,
                    clock=self._clock,
                )
        self.last_result = result
        return result

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="sync-worker")
        logger.info(
            "Sync worker started (interval=%.1fs, batch=%d, max_retries=%d)",
            self._interval,
            self._batch_size,
            self._max_retries,
        )

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Sync worker stopped")

    async def _loop(self) -> None:
        while True:
            await self._tick()
            await asyncio.sleep(self._interval)

    async def _tick(self) -> None:
        if self._lock.locked():
            logger.info("Previous sync cycle still running, skipping this run")
            return
        try:
            result = await self.run_once()
        except Exception as exc:
            logger.exception("Sync cycle failed")
            self.last_result = SyncResult(
                success=False,
                synced_items=0,
                failed_items=0,
                errors=[SyncError.storage(exc, self._clock.now())],
            )
            return
        logger.info(
            "Sync completed: %d synced, %d failed",
            result.synced_items,
            result.failed_items,
        )


async def run_sync_worker() -> None:
    from task_sync.infrastructure.db.session import AsyncSessionLocal, create_schema, engine
    from task_sync.infrastructure.db.uow import make_uow_factory
    from task_sync.infrastructure.transport.factory import build_transport

    await create_schema()
    transport = build_transport(settings)
    worker = SyncWorker.from_settings(settings, make_uow_factory(AsyncSessionLocal), transport)
    await worker.start()
    try:
        await asyncio.Event().wait()
    finally:
        await worker.stop()
        await transport.aclose()
        await engine.dispose()


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(run_sync_worker())


if __name__ == "__main__":
    main()
