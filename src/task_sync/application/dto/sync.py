from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from task_sync.domain.value_objects.enums import SyncErrorKind


@dataclass(frozen=True, slots=True)
class SyncError:
    kind: SyncErrorKind
    operation: str
    error: str
    timestamp: datetime
    task_id: UUID | None = None
    queue_item_id: UUID | None = None
    permanent: bool = False

    @classmethod
    def connectivity(cls, timestamp: datetime) -> SyncError:
        return cls(
            kind=SyncErrorKind.CONNECTIVITY,
            operation="connectivity",
            error="No internet connection",
            timestamp=timestamp,
        )

    @classmethod
    def storage(cls, exc: BaseException, timestamp: datetime) -> SyncError:
        return cls(
            kind=SyncErrorKind.STORAGE,
            operation="sync",
            error=str(exc) or exc.__class__.__name__,
            timestamp=timestamp,
        )


@dataclass(frozen=True, slots=True)
class SyncResult:
    success: bool
    synced_items: int
    failed_items: int
    errors: list[SyncError] = field(default_factory=list)
