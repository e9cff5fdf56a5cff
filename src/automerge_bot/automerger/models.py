"""Data models for the Automerger module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from automerge_bot.github.models import LabelRemovalReason, MergeState


class Action(str, Enum):
    """What a repository cycle did."""

    IDLE = "idle"
    MERGED = "merged"
    MERGE_FAILED = "merge_failed"
    BRANCH_UPDATED = "branch_updated"
    LABEL_REMOVED = "label_removed"
    WAITING = "waiting"
    ERROR = "error"


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one polling cycle for one repository.

    Results are reported, never read back by the next cycle.

    Attributes:
        repo: Repository API base URL.
        action: What was done.
        pull_number: The selected pull request, None when idle.
        state: Merge state the pull request was classified as.
        reason: Label removal reason, when labels were removed.
        checked_at: When the cycle finished.
    """

    repo: str
    action: Action
    pull_number: int | None = None
    state: MergeState | None = None
    reason: LabelRemovalReason | None = None
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
