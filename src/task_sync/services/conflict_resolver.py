"""Last-write-wins merge of a local and a remote task version."""
from __future__ import annotations

import logging

from task_sync.application.ports.clock import as_utc
from task_sync.domain.entities.task import TaskVersion

logger = logging.getLogger(__name__)


def resolve(local: TaskVersion, remote: TaskVersion) -> TaskVersion:
    """Return the winning version; persisting it is the caller's job.

    Equal timestamps go to the remote side. The tie-break is arbitrary and kept
    only so both ends agree on the same winner.
    """
    local_ts = as_utc(local.updated_at)
    remote_ts = as_utc(remote.updated_at)

    if local_ts > remote_ts:
        logger.info("Conflict resolved: local version wins (local newer)")
        return local
    if remote_ts > local_ts:
        logger.info("Conflict resolved: remote version wins (remote newer)")
        return remote
    logger.info("Conflict resolved: equal timestamps, defaulted to remote")
    return remote
