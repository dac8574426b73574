from __future__ import annotations

from enum import StrEnum


class Operation(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class QueueStatus(StrEnum):
    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"


class SyncStatus(StrEnum):
    PENDING = "pending"
    SYNCED = "synced"
    ERROR = "error"


class SyncErrorKind(StrEnum):
    CONNECTIVITY = "connectivity"
    BATCH_TRANSPORT = "batch_transport"
    ITEM_PROCESSING = "item_processing"
    STORAGE = "storage"
