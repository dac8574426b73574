from __future__ import annotations

from task_sync.config import Settings
from task_sync.infrastructure.transport.http_transport import HttpBatchTransport
from task_sync.infrastructure.transport.loopback import LoopbackTransport


def build_transport(settings: Settings) -> HttpBatchTransport | LoopbackTransport:
    if settings.SYNC_TRANSPORT == "loopback":
        return LoopbackTransport()
    return HttpBatchTransport(
        settings.API_BASE_URL,
        probe_timeout=settings.SYNC_PROBE_TIMEOUT,
        request_timeout=settings.SYNC_REQUEST_TIMEOUT,
    )
