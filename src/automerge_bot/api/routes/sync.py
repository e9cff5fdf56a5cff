"""Sync endpoint for running a cycle on demand."""

from fastapi import APIRouter

from automerge_bot.api.dependencies import SchedulerDep
from automerge_bot.api.models import (
    APIResponse,
    CycleResultResponse,
    cycle_result_to_response,
)

router = APIRouter(tags=["sync"])


@router.post("/sync", response_model=APIResponse[list[CycleResultResponse]])
async def sync_repos(scheduler: SchedulerDep) -> APIResponse[list[CycleResultResponse]]:
    """Run one cycle for every repository now and return the results."""
    results = await scheduler.run_once()
    return APIResponse(data=[cycle_result_to_response(r) for r in results])
