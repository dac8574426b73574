"""Shared test fixtures."""
from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator, Callable, Sequence
from uuid import UUID

import pytest

from task_sync.application.ports.transport import ItemOutcome
from task_sync.application.uow import UoWFactory
from task_sync.domain.entities.queue_item import QueueItem
from task_sync.domain.entities.task import SYNCABLE_FIELDS, Task
from task_sync.domain.value_objects.enums import Operation, QueueStatus, SyncStatus

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Advances by `step` on every call so successive timestamps are strictly ordered."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(seconds=1)) -> None:
        self._current = start
        self._step = step

    def now(self) -> datetime:
        value = self._current
        self._current += self._step
        return value


@dataclass
class FakeTaskReader:
    _store: dict[UUID, Task] = field(default_factory=dict)

    async def get(self, task_id: UUID, *, include_deleted: bool = False) -> Task | None:
        task = self._store.get(task_id)
        if task is None or (task.is_deleted and not include_deleted):
            return None
        return task

    async def list_active(self) -> list[Task]:
        return [t for t in self._store.values() if not t.is_deleted]


@dataclass
class FakeTaskWriter:
    _reader: FakeTaskReader

    async def create(self, task: Task) -> Task:
        self._reader._store[task.id] = task
        return task

    async def update(self, task_id: UUID, fields: dict[str, Any], updated_at: datetime) -> Task | None:
        task = await self._reader.get(task_id)
        if task is None:
            return None
        task = replace(task, **fields, updated_at=updated_at, sync_status=SyncStatus.PENDING)
        self._reader._store[task_id] = task
        return task

    async def soft_delete(self, task_id: UUID, updated_at: datetime) -> bool:
        task = await self._reader.get(task_id)
        if task is None:
            return False
        self._reader._store[task_id] = replace(
            task, is_deleted=True, updated_at=updated_at, sync_status=SyncStatus.PENDING,
        )
        return True

    async def mark_synced(self, task_id: UUID, server_id: str | None, synced_at: datetime) -> None:
        task = self._reader._store.get(task_id)
        if task is None:
            return
        self._reader._store[task_id] = replace(
            task,
            sync_status=SyncStatus.SYNCED,
            server_id=server_id if server_id is not None else task.server_id,
            last_synced_at=synced_at,
        )

    async def mark_error(self, task_id: UUID) -> None:
        task = self._reader._store.get(task_id)
        if task is not None:
            self._reader._store[task_id] = replace(task, sync_status=SyncStatus.ERROR)

    async def apply_remote(
        self,
        task_id: UUID,
        fields: dict[str, Any],
        updated_at: datetime,
        server_id: str | None,
        synced_at: datetime,
    ) -> None:
        task = self._reader._store.get(task_id)
        if task is None:
            return
        self._reader._store[task_id] = replace(
            task,
            **{k: v for k, v in fields.items() if k in SYNCABLE_FIELDS},
            updated_at=updated_at,
            sync_status=SyncStatus.SYNCED,
            server_id=server_id if server_id is not None else task.server_id,
            last_synced_at=synced_at,
        )


@dataclass
class FakeOutbox:
    _items: dict[UUID, QueueItem] = field(default_factory=dict)

    def get(self, item_id: UUID) -> QueueItem:
        return self._items[item_id]

    def by_operation(self, operation: str) -> list[QueueItem]:
        return [i for i in self._items.values() if i.operation == operation]

    async def enqueue(
        self,
        task_id: UUID,
        operation: Operation,
        payload: dict[str, Any],
        created_at: datetime,
    ) -> UUID:
        item = QueueItem(
            id=uuid.uuid4(),
            task_id=task_id,
            operation=operation.value,
            payload=dict(payload),
            created_at=created_at,
            status=QueueStatus.PENDING,
            retry_count=0,
            error_message=None,
            synced_at=None,
        )
        self._items[item.id] = item
        return item.id

    async def pending_items(self) -> list[QueueItem]:
        pending = [i for i in self._items.values() if i.status == QueueStatus.PENDING]
        return sorted(pending, key=lambda i: (i.created_at, i.id))

    async def mark_synced(self, item_id: UUID, synced_at: datetime) -> None:
        item = self._items[item_id]
        if item.status == QueueStatus.PENDING:
            self._items[item_id] = replace(item, status=QueueStatus.SYNCED, synced_at=synced_at)

    async def record_failure(self, item_id: UUID, error: str, *, max_retries: int) -> tuple[int, bool]:
        item = self._items[item_id]
        if item.status != QueueStatus.PENDING:
            return item.retry_count, item.status == QueueStatus.FAILED
        retry_count = item.retry_count + 1
        status = QueueStatus.FAILED if retry_count >= max_retries else QueueStatus.PENDING
        self._items[item_id] = replace(
            item, retry_count=retry_count, error_message=error, status=status,
        )
        return retry_count, status == QueueStatus.FAILED

    async def count_by_status(self) -> dict[QueueStatus, int]:
        counts = {status: 0 for status in QueueStatus}
        for item in self._items.values():
            counts[QueueStatus(item.status)] += 1
        return counts

    async def list_failed(self, limit: int = 100) -> list[QueueItem]:
        failed = [i for i in self._items.values() if i.status == QueueStatus.FAILED]
        return sorted(failed, key=lambda i: (i.created_at, i.id))[:limit]


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    tasks: FakeTaskReader = field(default_factory=FakeTaskReader)
    tasks_w: FakeTaskWriter | None = None
    outbox: FakeOutbox = field(default_factory=FakeOutbox)
    commits: int = 0

    def __post_init__(self) -> None:
        if self.tasks_w is None:
            self.tasks_w = FakeTaskWriter(self.tasks)

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass


def fake_uow_factory(uow: FakeUoW) -> UoWFactory:
    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUoW]:
        yield uow

    return _factory


@dataclass
class FakeTransport:
    """Records every call; acknowledges everything unless told otherwise."""
    reachable: bool = True
    outcome: Callable[[QueueItem], ItemOutcome] | None = None
    raise_error: Exception | None = None
    probes: int = 0
    calls: list[list[QueueItem]] = field(default_factory=list)

    async def probe_reachability(self) -> bool:
        self.probes += 1
        return self.reachable

    async def send_batch(self, items: Sequence[QueueItem]) -> list[ItemOutcome]:
        self.calls.append(list(items))
        if self.raise_error is not None:
            raise self.raise_error
        if self.outcome is None:
            return [ItemOutcome.success(server_id=f"srv-{item.task_id}") for item in items]
        return [self.outcome(item) for item in items]


def always_error(message: str = "rejected by server") -> Callable[[QueueItem], ItemOutcome]:
    return lambda _item: ItemOutcome.failure(message)


@pytest.fixture
def uow() -> FakeUoW:
    return FakeUoW()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
