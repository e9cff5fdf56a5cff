"""Pydantic models for REST API."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

from automerge_bot.automerger import CycleResult

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
    version: str


class CycleResultResponse(BaseModel):
    """Outcome of the latest cycle for one repository."""

    repo: str
    action: str
    pull_number: int | None = None
    state: str | None = None
    reason: str | None = None
    checked_at: datetime | None = None


class RepoStatusResponse(BaseModel):
    """Latest results for every configured repository."""

    last_run_at: datetime | None
    interval: float
    repos: list[CycleResultResponse]


def cycle_result_to_response(result: CycleResult) -> CycleResultResponse:
    """Convert a CycleResult to CycleResultResponse."""
    return CycleResultResponse(
        repo=result.repo,
        action=result.action.value,
        pull_number=result.pull_number,
        state=result.state.value if result.state else None,
        reason=result.reason.value if result.reason else None,
        checked_at=result.checked_at,
    )
