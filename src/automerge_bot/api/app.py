"""FastAPI application setup."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from automerge_bot import __version__
from automerge_bot.api.models import APIResponse
from automerge_bot.api.routes import health, repos, sync

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from automerge_bot.scheduler import Scheduler

logger = logging.getLogger("automerge_bot.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Starts the polling loop in the background when enabled and stops it
    on shutdown.
    """
    scheduler: Scheduler = app.state.scheduler
    stop_event = asyncio.Event()
    poller: asyncio.Task[None] | None = None

    # Startup
    if app.state.poll:
        poller = asyncio.create_task(scheduler.run_forever(stop_event))

    yield

    # Shutdown
    stop_event.set()
    if poller is not None:
        await poller
    scheduler.close()


def create_app(scheduler: Scheduler, poll: bool = True) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        scheduler: Scheduler driving the configured repositories.
        poll: Run the polling loop in the background while the app is up.
    """
    app = FastAPI(
        title="automerge-bot API",
        description="Status and control for the automerge bot",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.scheduler = scheduler
    app.state.poll = poll

    @app.exception_handler(Exception)
    async def unexpected_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled API error: %s", exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error="Internal server error").model_dump(),
        )

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(repos.router, prefix="/api/v1")
    app.include_router(sync.router, prefix="/api/v1")

    return app
