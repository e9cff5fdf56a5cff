"""Latest cycle results per repository."""

from fastapi import APIRouter

from automerge_bot.api.dependencies import SchedulerDep
from automerge_bot.api.models import (
    APIResponse,
    CycleResultResponse,
    RepoStatusResponse,
    cycle_result_to_response,
)

router = APIRouter(tags=["repos"])


@router.get("/repos", response_model=APIResponse[RepoStatusResponse])
def list_repos(scheduler: SchedulerDep) -> APIResponse[RepoStatusResponse]:
    """List configured repositories with the outcome of their latest cycle."""
    repos = []
    for repo in scheduler.repos:
        result = scheduler.last_results.get(repo)
        if result is None:
            repos.append(CycleResultResponse(repo=repo, action="pending"))
        else:
            repos.append(cycle_result_to_response(result))
    return APIResponse(
        data=RepoStatusResponse(
            last_run_at=scheduler.last_run_at,
            interval=scheduler.interval,
            repos=repos,
        )
    )
