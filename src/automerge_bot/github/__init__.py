"""GitHub - Transport and repository-status client for the REST API."""

from automerge_bot.github.client import GithubClient
from automerge_bot.github.exceptions import (
    GithubError,
    GithubRequestError,
    GithubResponseError,
)
from automerge_bot.github.models import (
    Branch,
    BranchProtection,
    CheckRun,
    CheckRunSummary,
    CheckState,
    CheckSummary,
    Label,
    LabelRemovalReason,
    MergeState,
    MergeStatus,
    Pull,
    StatusItem,
    StatusSummary,
)

__all__ = [
    "Branch",
    "BranchProtection",
    "CheckRun",
    "CheckRunSummary",
    "CheckState",
    "CheckSummary",
    "GithubClient",
    "GithubError",
    "GithubRequestError",
    "GithubResponseError",
    "Label",
    "LabelRemovalReason",
    "MergeState",
    "MergeStatus",
    "Pull",
    "StatusItem",
    "StatusSummary",
]
