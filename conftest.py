"""Root conftest: test settings must be in the environment before any module imports."""
from __future__ import annotations

import os

_TEST_ENV = {
    "DATABASE_URL": "sqlite+aiosqlite://",
    "SYNC_ENABLED": "false",
    "SYNC_TRANSPORT": "loopback",
}

for key, value in _TEST_ENV.items():
    os.environ.setdefault(key, value)
