from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from task_sync.domain.entities.queue_item import QueueItem
from task_sync.domain.entities.task import TaskVersion


@dataclass(frozen=True, slots=True)
class ItemOutcome:
    """Per-item result of a batch push."""

    ok: bool
    server_id: str | None = None
    error: str | None = None
    remote: TaskVersion | None = None

    @classmethod
    def success(
        cls,
        server_id: str | None = None,
        remote: TaskVersion | None = None,
    ) -> ItemOutcome:
        return cls(ok=True, server_id=server_id, remote=remote)

    @classmethod
    def failure(cls, error: str) -> ItemOutcome:
        return cls(ok=False, error=error)


class BatchTransport(Protocol):
    async def probe_reachability(self) -> bool:
        """Return True when the remote authority answers. Never raises."""
        ...

    async def send_batch(self, items: Sequence[QueueItem]) -> list[ItemOutcome]:
        """Push items in order; return one outcome per item, in the same order.

        Raises when the call as a whole fails.
        """
        ...
