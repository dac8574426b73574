from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from task_sync.config import settings
from task_sync.infrastructure.db import models  # noqa: F401
from task_sync.infrastructure.db.base import Base

engine = create_async_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DB_ECHO,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def create_schema(bind: AsyncEngine = engine) -> None:
    """Create missing tables. Existing tables are left as they are."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
