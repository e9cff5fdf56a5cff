"""REST API for automerge-bot."""

from automerge_bot.api.app import create_app
from automerge_bot.api.models import (
    APIResponse,
    CycleResultResponse,
    HealthResponse,
    RepoStatusResponse,
)

__all__ = [
    "APIResponse",
    "CycleResultResponse",
    "HealthResponse",
    "RepoStatusResponse",
    "create_app",
]
