"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from automerge_bot.scheduler import Scheduler


def get_scheduler(request: Request) -> Scheduler:
    """Dependency that provides the Scheduler attached to the app."""
    scheduler: Scheduler | None = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        raise RuntimeError("Scheduler not initialized. Pass one to create_app().")
    return scheduler


# Type alias for dependency injection
SchedulerDep = Annotated[Scheduler, Depends(get_scheduler)]
