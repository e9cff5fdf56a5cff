"""Automerger - Per-repository decision loop for labeled pull requests."""

from automerge_bot.automerger.automerger import (
    Automerger,
    classify_merge_status,
    select_pull,
)
from automerge_bot.automerger.models import Action, CycleResult

__all__ = [
    "Action",
    "Automerger",
    "CycleResult",
    "classify_merge_status",
    "select_pull",
]
