"""Entrypoint: python -m task_sync"""
from __future__ import annotations

import uvicorn

from task_sync.config import settings


def main() -> None:
    uvicorn.run(
        "task_sync.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
