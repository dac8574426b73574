from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterator, Sequence
from uuid import UUID

from task_sync.application.dto.sync import SyncError, SyncResult
from task_sync.application.exceptions import TransportError
from task_sync.application.ports.clock import Clock, as_utc, system_clock
from task_sync.application.ports.transport import BatchTransport, ItemOutcome
from task_sync.application.uow import UnitOfWork
from task_sync.domain.entities.queue_item import QueueItem
from task_sync.domain.entities.task import Task, TaskVersion
from task_sync.domain.value_objects.enums import Operation, QueueStatus, SyncErrorKind
from task_sync.services.conflict_resolver import resolve

logger = logging.getLogger(__name__)


async def enqueue_mutation(
    task_id: UUID,
    operation: Operation,
    payload: dict[str, Any],
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> UUID:
    """Append a mutation to the outbox. The caller commits the unit of work."""
    item_id = await uow.outbox.enqueue(task_id, operation, payload, clock.now())
    logger.debug("Queued %s for task %s (item %s)", operation, task_id, item_id)
    return item_id


def _batches(
    items: Sequence[QueueItem],
    size: int,
    blocked: set[UUID],
) -> Iterator[list[QueueItem]]:
    """Yield consecutive batches, skipping items of tasks blocked so far.

    Batches are built lazily, so a task blocked while one batch is applied
    is already excluded from the next one.
    """
    batch: list[QueueItem] = []
    for item in items:
        if item.task_id in blocked:
            continue
        batch.append(item)
        if len(batch) == size:
            yield batch
            batch = []
    if batch:
        yield batch


async def run_sync_cycle(
    uow: UnitOfWork,
    transport: BatchTransport,
    *,
    batch_size: int,
    max_retries: int,
    clock: Clock = system_clock,
) -> SyncResult:
    """Push every pending outbox item to the remote authority once.

    Once an item of a task fails, the task is blocked for the rest of the
    cycle: its later items stay pending, untouched and uncounted, so that
    they are never applied remotely ahead of the failed one. A permanently
    failed item leaves the pending set, which releases its task on the
    next cycle.

    Connectivity and processing errors end up in the result. Storage errors
    propagate; batches committed before the error stay committed.
    """
    if not await transport.probe_reachability():
        logger.warning("Remote unreachable, sync aborted")
        return SyncResult(
            success=False,
            synced_items=0,
            failed_items=0,
            errors=[SyncError.connectivity(clock.now())],
        )

    items = await uow.outbox.pending_items()
    if not items:
        logger.info("Nothing to sync")
        return SyncResult(success=True, synced_items=0, failed_items=0)

    logger.info("Syncing %d pending items (batch=%d)", len(items), batch_size)
    synced = 0
    failed = 0
    errors: list[SyncError] = []
    blocked: set[UUID] = set()

    for batch in _batches(items, batch_size, blocked):
        try:
            outcomes = await transport.send_batch(batch)
            if len(outcomes) != len(batch):
                raise TransportError(
                    f"Expected {len(batch)} outcomes, got {len(outcomes)}"
                )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Batch of %d items failed: %s", len(batch), exc)
            message = str(exc) or exc.__class__.__name__
            for item in batch:
                errors.append(
                    await _fail_item(
                        uow, item, message, SyncErrorKind.BATCH_TRANSPORT,
                        max_retries=max_retries, clock=clock,
                    )
                )
                blocked.add(item.task_id)
            failed += len(batch)
        else:
            for item, outcome in zip(batch, outcomes):
                if item.task_id in blocked:
                    # Sent alongside an earlier failed item; replayed after it.
                    continue
                if outcome.ok:
                    await _apply_success(uow, item, outcome, clock)
                    synced += 1
                else:
                    errors.append(
                        await _fail_item(
                            uow, item, outcome.error or "Unknown error",
                            SyncErrorKind.ITEM_PROCESSING,
                            max_retries=max_retries, clock=clock,
                        )
                    )
                    blocked.add(item.task_id)
                    failed += 1
        await uow.commit()

    deferred = len(items) - synced - failed
    if deferred:
        logger.info(
            "Deferred %d items of %d blocked tasks to the next cycle",
            deferred, len(blocked),
        )
    logger.info("Sync cycle finished: %d synced, %d failed", synced, failed)
    return SyncResult(
        success=failed == 0,
        synced_items=synced,
        failed_items=failed,
        errors=errors,
    )


async def _apply_success(
    uow: UnitOfWork,
    item: QueueItem,
    outcome: ItemOutcome,
    clock: Clock,
) -> None:
    now = clock.now()
    task = await uow.tasks.get(item.task_id, include_deleted=True)
    remote = outcome.remote

    # A task missing locally still has its queue item retired.
    if task is not None:
        if (
            remote is not None
            and item.operation != Operation.DELETE
            and remote.differs_from(item.payload)
        ):
            await _persist_winner(uow, task, remote, outcome.server_id, now)
        else:
            await uow.tasks_w.mark_synced(task.id, outcome.server_id, now)

    await uow.outbox.mark_synced(item.id, now)


async def _persist_winner(
    uow: UnitOfWork,
    task: Task,
    remote: TaskVersion,
    server_id: str | None,
    now: datetime,
) -> None:
    winner = resolve(TaskVersion.from_task(task), remote)
    server_id = server_id or remote.server_id
    if winner is remote:
        # last_synced_at must not trail the updated_at we just adopted.
        await uow.tasks_w.apply_remote(
            task.id,
            remote.fields,
            remote.updated_at,
            server_id,
            max(now, as_utc(remote.updated_at)),
        )
    else:
        await uow.tasks_w.mark_synced(task.id, server_id, now)


async def _fail_item(
    uow: UnitOfWork,
    item: QueueItem,
    message: str,
    kind: SyncErrorKind,
    *,
    max_retries: int,
    clock: Clock,
) -> SyncError:
    retry_count, permanent = await uow.outbox.record_failure(
        item.id, message, max_retries=max_retries,
    )
    await uow.tasks_w.mark_error(item.task_id)
    if permanent:
        logger.error(
            "Task %s %s failed permanently after %d retries: %s",
            item.task_id, item.operation, retry_count, message,
        )
    else:
        logger.warning(
            "Task %s %s will retry later (%d/%d): %s",
            item.task_id, item.operation, retry_count, max_retries, message,
        )
    return SyncError(
        kind=kind,
        operation=item.operation,
        error=message,
        timestamp=clock.now(),
        task_id=item.task_id,
        queue_item_id=item.id,
        permanent=permanent,
    )


async def outbox_counts(uow: UnitOfWork) -> dict[QueueStatus, int]:
    return await uow.outbox.count_by_status()


async def list_failed_items(uow: UnitOfWork, limit: int = 100) -> list[QueueItem]:
    """Permanently failed items, kept for manual inspection."""
    return await uow.outbox.list_failed(limit)
