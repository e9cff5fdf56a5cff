"""Data models for GitHub API responses.

Every record is a snapshot decoded fresh from the API on each polling cycle;
none of them is cached across cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MergeState(str, Enum):
    """Classification of why a pull request can or cannot currently be merged."""

    CLEAN = "clean"
    BEHIND = "behind"
    BLOCKED = "blocked"
    UNSTABLE = "unstable"
    WAITING = "waiting"
    UNMERGEABLE = "unmergeable"
    BAD = "bad"


class LabelRemovalReason(str, Enum):
    """Why the automerge label was removed; selects the comment posted."""

    DEFAULT = "default"
    STATUS_CHECKS = "status_checks"
    MERGE_CONFLICTS = "merge_conflicts"
    OUTSTANDING_REVIEWS = "outstanding_reviews"
    OPTIONAL_CHECKS = "optional_checks"


class CheckState(str, Enum):
    """Reduced state of a single check-run or commit status."""

    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"


# Check-run conclusions that count as a failed check
FAILURE_CONCLUSIONS = frozenset({"failure", "action_required", "cancelled", "timed_out"})


@dataclass(frozen=True)
class Label:
    """Issue/pull request label."""

    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Label:
        return cls(name=data["name"])


@dataclass(frozen=True)
class Branch:
    """Branch reference of a pull request (head or base)."""

    ref: str
    sha: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Branch:
        return cls(ref=data["ref"], sha=data["sha"])


@dataclass(frozen=True)
class Pull:
    """Pull request data.

    Attributes:
        id: The pull request id.
        number: The pull request number.
        title: The pull request title.
        url: API url of the pull request.
        labels: Labels attached to the pull request.
        base: The branch the pull request is merged into.
        head: The branch the pull request originates from.
    """

    id: int
    number: int
    title: str
    url: str
    labels: tuple[Label, ...]
    base: Branch
    head: Branch

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Pull:
        return cls(
            id=data["id"],
            number=data["number"],
            title=data["title"],
            url=data["url"],
            labels=tuple(Label.from_api(label) for label in data.get("labels") or []),
            base=Branch.from_api(data["base"]),
            head=Branch.from_api(data["head"]),
        )

    def has_label(self, name: str) -> bool:
        """Whether the pull request carries a label with this name."""
        return any(label.name == name for label in self.labels)


@dataclass(frozen=True)
class MergeStatus:
    """Mergeability of a pull request as computed by the host.

    `mergeable` is None while the host is still computing it; a missing
    `mergeable_state` stays None and classifies as BAD.
    """

    number: int
    mergeable: bool | None
    mergeable_state: str | None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> MergeStatus:
        return cls(
            number=data["number"],
            mergeable=data.get("mergeable"),
            mergeable_state=data.get("mergeable_state"),
        )


@dataclass(frozen=True)
class BranchProtection:
    """Protection settings of a branch."""

    name: str
    protected: bool
    required_contexts: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> BranchProtection:
        protected = bool(data.get("protected", False))
        contexts: list[str] = []
        if protected:
            protection = data.get("protection") or {}
            required = protection.get("required_status_checks") or {}
            contexts = required.get("contexts") or []
        return cls(name=data["name"], protected=protected, required_contexts=tuple(contexts))


@dataclass(frozen=True)
class CheckRun:
    """A single check-run on a commit."""

    name: str
    status: str
    conclusion: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> CheckRun:
        return cls(name=data["name"], status=data["status"], conclusion=data.get("conclusion"))

    def check_state(self) -> CheckState:
        if self.conclusion in FAILURE_CONCLUSIONS:
            return CheckState.FAILURE
        if self.status == "completed":
            return CheckState.SUCCESS
        return CheckState.PENDING


@dataclass(frozen=True)
class StatusItem:
    """A single commit status reported by an external system."""

    context: str
    state: str
    description: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> StatusItem:
        return cls(
            context=data["context"],
            state=data["state"],
            description=data.get("description"),
        )

    def check_state(self) -> CheckState:
        if self.state in ("failure", "error"):
            return CheckState.FAILURE
        if self.state == "pending":
            return CheckState.PENDING
        return CheckState.SUCCESS


@dataclass(frozen=True)
class CheckRunSummary:
    """Check-runs of a commit."""

    total_count: int
    check_runs: tuple[CheckRun, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> CheckRunSummary:
        runs = tuple(CheckRun.from_api(run) for run in data.get("check_runs") or [])
        return cls(total_count=data.get("total_count", len(runs)), check_runs=runs)

    def states(self) -> dict[str, CheckState]:
        """Map check-run names to their reduced state."""
        return {run.name: run.check_state() for run in self.check_runs}


@dataclass(frozen=True)
class StatusSummary:
    """Combined commit status roll-up."""

    state: str
    total_count: int
    statuses: tuple[StatusItem, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> StatusSummary:
        statuses = tuple(StatusItem.from_api(item) for item in data.get("statuses") or [])
        return cls(
            state=data["state"],
            total_count=data.get("total_count", len(statuses)),
            statuses=statuses,
        )

    def states(self) -> dict[str, CheckState]:
        """Map status contexts to their reduced state."""
        return {item.context: item.check_state() for item in self.statuses}


CheckSummary = CheckRunSummary | StatusSummary
