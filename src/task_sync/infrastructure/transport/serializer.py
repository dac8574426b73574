"""Wire format of the remote batch endpoint."""
from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from task_sync.application.ports.transport import ItemOutcome
from task_sync.domain.entities.queue_item import QueueItem
from task_sync.domain.entities.task import SYNCABLE_FIELDS, TaskVersion

logger = logging.getLogger(__name__)


class _Encoder(json.JSONEncoder):
    def default(self, o: object) -> Any:
        if isinstance(o, UUID):
            return str(o)
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


def serialize_batch(items: Sequence[QueueItem], client_timestamp: datetime) -> str:
    envelope = {
        "items": [
            {
                "id": item.id,
                "task_id": item.task_id,
                "operation": item.operation,
                "data": item.payload,
                "created_at": item.created_at,
                "retry_count": item.retry_count,
            }
            for item in items
        ],
        "client_timestamp": client_timestamp,
    }
    return json.dumps(envelope, cls=_Encoder)


def _remote_version(data: dict[str, Any], server_id: str | None) -> TaskVersion | None:
    try:
        updated_at = datetime.fromisoformat(data["updated_at"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Ignoring resolved_data without a valid updated_at: %r", data)
        return None
    return TaskVersion(
        fields={name: data[name] for name in SYNCABLE_FIELDS if name in data},
        updated_at=updated_at,
        server_id=data.get("server_id") or server_id,
    )


def parse_outcomes(items: Sequence[QueueItem], body: dict[str, Any]) -> list[ItemOutcome]:
    """Match processed_items to the sent items by client_id, keeping send order."""
    by_client_id = {
        str(entry["client_id"]): entry for entry in body.get("processed_items", [])
    }
    outcomes: list[ItemOutcome] = []
    for item in items:
        entry = by_client_id.get(str(item.id))
        if entry is None:
            outcomes.append(ItemOutcome.failure("No outcome returned for item"))
            continue
        if entry.get("status") != "success":
            outcomes.append(ItemOutcome.failure(entry.get("error") or "Unknown error"))
            continue
        server_id = entry.get("server_id")
        server_id = str(server_id) if server_id is not None else None
        resolved = entry.get("resolved_data")
        remote = None
        if isinstance(resolved, dict) and resolved:
            remote = _remote_version(resolved, server_id)
        outcomes.append(ItemOutcome.success(server_id=server_id, remote=remote))
    return outcomes
