from __future__ import annotations

from typing import Sequence

from task_sync.application.ports.transport import ItemOutcome
from task_sync.domain.entities.queue_item import QueueItem


class LoopbackTransport:
    """Acknowledges every item in-process; for development without a remote."""

    async def probe_reachability(self) -> bool:
        return True

    async def send_batch(self, items: Sequence[QueueItem]) -> list[ItemOutcome]:
        return [ItemOutcome.success(server_id=str(item.task_id)) for item in items]

    async def aclose(self) -> None:
        pass
