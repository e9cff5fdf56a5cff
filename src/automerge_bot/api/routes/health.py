"""Health check endpoint."""

from fastapi import APIRouter

from automerge_bot import __version__
from automerge_bot.api.models import APIResponse, HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=APIResponse[HealthResponse])
def health() -> APIResponse[HealthResponse]:
    """Report that the service is up."""
    return APIResponse(data=HealthResponse(status="ok", version=__version__))
