"""FastAPI application entrypoint."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mustdo.api import projects, reminders, search, settings as settings_api, tasks, views
from mustdo.core.config import settings
from mustdo.core.logging_setup import setup_logging
from mustdo.db.session import init_db, new_session
from mustdo.scheduler import run_reminder_poller

PREFIX = "/api"

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    setup_logging(settings.log_level, settings.log_dir)
    init_db()

    poller = None
    if settings.poller_enabled:
        poller = asyncio.create_task(
            run_reminder_poller(
                new_session,
                interval_seconds=settings.poll_interval_sec,
                tz=settings.tz,
            )
        )
    try:
        yield
    finally:
        if poller is not None:
            poller.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await poller
            logger.info("reminder poller stopped")


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)

# CORS: Vite dev server (1420) + Tauri webview origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:1420",
        "http://127.0.0.1:1420",
        "tauri://localhost",  # Tauri 2 webview origin when loading dev URL
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tasks.router, prefix=PREFIX)
app.include_router(projects.router, prefix=PREFIX)
app.include_router(reminders.router, prefix=PREFIX)
app.include_router(views.router, prefix=PREFIX)
app.include_router(search.router, prefix=PREFIX)
app.include_router(settings_api.router, prefix=PREFIX)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
