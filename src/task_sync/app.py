from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from task_sync.api.v1.routers import health, sync, tasks
from task_sync.application.exceptions import NotFoundError, ValidationError
from task_sync.config import settings
from task_sync.infrastructure.db.session import AsyncSessionLocal, create_schema, engine
from task_sync.infrastructure.db.uow import make_uow_factory
from task_sync.infrastructure.transport.factory import build_transport
from task_sync.workers.sync_worker import SyncWorker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    await create_schema()
    logger.info("Database schema ready")

    transport = build_transport(settings)
    worker = SyncWorker.from_settings(settings, make_uow_factory(AsyncSessionLocal), transport)
    app.state.sync_worker = worker
    if settings.SYNC_ENABLED:
        await worker.start()

    yield

    await worker.stop()
    await transport.aclose()
    await engine.dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Task Sync Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(tasks.router)
    app.include_router(sync.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})
