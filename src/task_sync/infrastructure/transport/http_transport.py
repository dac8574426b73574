from __future__ import annotations

import logging
from typing import Sequence

import httpx

from task_sync.application.ports.clock import Clock, system_clock
from task_sync.application.ports.transport import ItemOutcome
from task_sync.domain.entities.queue_item import QueueItem
from task_sync.infrastructure.transport.serializer import parse_outcomes, serialize_batch

logger = logging.getLogger(__name__)


class HttpBatchTransport:
    """Implements application.ports.transport.BatchTransport over HTTP."""

    def __init__(
        self,
        base_url: str,
        *,
        probe_timeout: float = 5.0,
        request_timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self._probe_timeout = probe_timeout
        self._clock = clock
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=request_timeout,
        )

    async def probe_reachability(self) -> bool:
        try:
            response = await self._client.get("/health", timeout=self._probe_timeout)
            response.raise_for_status()
        except Exception as exc:  # noqa: BLE001
            logger.info("Reachability probe failed: %s", exc)
            return False
        return True

    async def send_batch(self, items: Sequence[QueueItem]) -> list[ItemOutcome]:
        logger.debug("Sending batch of %d items", len(items))
        response = await self._client.post(
            "/sync/batch",
            content=serialize_batch(items, self._clock.now()),
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()
        return parse_outcomes(items, response.json())

    async def aclose(self) -> None:
        await self._client.aclose()
