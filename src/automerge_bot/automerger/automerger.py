"""Automerger - Drives one repository's labeled pull requests toward merge."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from automerge_bot.automerger.models import Action, CycleResult
from automerge_bot.github import (
    GithubClient,
    GithubError,
    LabelRemovalReason,
    MergeState,
    MergeStatus,
    Pull,
)
from automerge_bot.labels import LabelService
from automerge_bot.logging import log_failure
from automerge_bot.status import StatusService

if TYPE_CHECKING:
    from automerge_bot.config import AutomergeConfig

logger = logging.getLogger("automerge_bot.automerger")

# Host mergeable_state values; anything unlisted is BAD
_MERGEABLE_STATES = {
    "behind": MergeState.BEHIND,
    "clean": MergeState.CLEAN,
    "blocked": MergeState.BLOCKED,
    "has_hooks": MergeState.WAITING,
    "unstable": MergeState.UNSTABLE,
    "unknown": MergeState.WAITING,
}


def select_pull(pulls: Sequence[Pull], label: str, priority_label: str) -> Pull | None:
    """Pick the pull request to work on this cycle.

    The host lists pull requests newest first, so the oldest match is the
    last one. Priority-labeled pull requests win over plain automerge ones.

    Args:
        pulls: Open pull requests in host order.
        label: Automerge label name.
        priority_label: Priority automerge label name.

    Returns:
        The selected pull request, or None if nothing is labeled.
    """
    for name in (priority_label, label):
        matches = [pull for pull in pulls if pull.has_label(name)]
        if matches:
            return matches[-1]
    return None


def classify_merge_status(status: MergeStatus) -> MergeState:
    """Map the host's merge status onto a MergeState."""
    if status.mergeable is None:
        return MergeState.WAITING
    if status.mergeable is False:
        return MergeState.UNMERGEABLE
    return _MERGEABLE_STATES.get(status.mergeable_state, MergeState.BAD)


class Automerger:
    """Processes at most one pull request of a repository per cycle.

    Handling a single pull request at a time keeps the number of CI runs a
    cycle can trigger bounded. Nothing is remembered between cycles: every
    run starts again from the labels and merge status reported by the host.
    """

    def __init__(
        self,
        config: AutomergeConfig,
        repo: str,
        client: GithubClient | None = None,
    ) -> None:
        """Initialize the Automerger.

        Args:
            config: Startup configuration.
            repo: Repository API base URL.
            client: GitHub client to use, created from config when omitted.
        """
        self.config = config
        self.repo = repo
        self.client = client or GithubClient(repo, config.token, timeout=config.timeout)
        self.labels = LabelService(self.client, config.label, config.priority_label)
        self.status = StatusService(self.client, self.labels)

    def close(self) -> None:
        """Close the underlying GitHub client."""
        self.client.close()

    def get_oldest_labeled_request(self) -> Pull | None:
        """Return the oldest (priority first) labeled pull request, if any."""
        try:
            pulls = self.client.list_pulls()
        except GithubError as e:
            log_failure(logger, e, f"Unable to list pull requests for {self.repo}")
            return None
        return select_pull(pulls, self.config.label, self.config.priority_label)

    def get_review_status(self, pull: Pull) -> MergeState:
        """Classify the current mergeability of a pull request."""
        try:
            status = self.client.get_merge_status(pull.number)
        except GithubError as e:
            log_failure(logger, e, f"Unable to get merge status for PR #{pull.number}")
            return MergeState.BAD
        logger.info(
            "Mergeable state of PR #%d is %s (mergeable=%s)",
            pull.number,
            status.mergeable_state,
            status.mergeable,
        )
        return classify_merge_status(status)

    def merge(self, pull: Pull) -> Action:
        """Merge the pull request and delete its branch.

        A failed merge removes the labels so the same pull request is not
        retried forever.
        """
        try:
            self.client.merge_pull(pull.number, pull.title, self.config.merge_type.value)
        except GithubError as e:
            log_failure(logger, e, f"Failed to merge PR #{pull.number}")
            self.remove_labels(pull)
            return Action.MERGE_FAILED

        logger.info("Successfully merged PR #%d: %s", pull.number, pull.title)
        self._delete_branch(pull)
        return Action.MERGED

    def _delete_branch(self, pull: Pull) -> None:
        try:
            self.client.delete_branch(pull.head.ref)
        except GithubError as e:
            log_failure(logger, e, f"Unable to delete branch {pull.head.ref}")
            return
        logger.info("Deleted branch %s", pull.head.ref)

    def update_branch(self, pull: Pull) -> bool:
        """Bring the source branch up to date with the target branch."""
        try:
            self.client.update_branch(pull.head.ref, pull.base.ref)
        except GithubError as e:
            log_failure(logger, e, f"Unable to update branch {pull.head.ref}")
            return False
        logger.info("Updated branch %s from %s", pull.head.ref, pull.base.ref)
        return True

    def handle_unstable_status(self, pull: Pull) -> tuple[Action, LabelRemovalReason | None]:
        """Merge right away when optional checks are ignored, otherwise inspect them."""
        if self.config.optional_statuses:
            action = self.merge(pull)
            return action, _merge_reason(action)
        return _removal(self.status.remove_label_or_wait(pull))

    def assess_status_and_checks(self, pull: Pull) -> LabelRemovalReason | None:
        """Evaluate required checks of a BLOCKED pull request."""
        return self.status.assess_status_and_checks(pull)

    def remove_labels(
        self, pull: Pull, reason: LabelRemovalReason = LabelRemovalReason.DEFAULT
    ) -> bool:
        """Remove the automerge labels and comment with the reason."""
        return self.labels.remove_labels(pull, reason)

    def run_cycle(self) -> CycleResult:
        """Run one polling cycle for the repository.

        Unexpected errors are logged and reported, never raised, so one
        repository cannot take down the others.
        """
        try:
            return self._run_cycle()
        except Exception:
            logger.exception("Unexpected error while processing %s", self.repo)
            return CycleResult(repo=self.repo, action=Action.ERROR)

    def _run_cycle(self) -> CycleResult:
        pull = self.get_oldest_labeled_request()
        if pull is None:
            logger.debug("No labeled pull requests in %s", self.repo)
            return CycleResult(repo=self.repo, action=Action.IDLE)

        state = self.get_review_status(pull)
        logger.info("PR #%d (%s) is %s", pull.number, pull.title, state.value)

        action, reason = self._dispatch(pull, state)
        return CycleResult(
            repo=self.repo,
            action=action,
            pull_number=pull.number,
            state=state,
            reason=reason,
        )

    def _dispatch(
        self, pull: Pull, state: MergeState
    ) -> tuple[Action, LabelRemovalReason | None]:
        if state == MergeState.CLEAN:
            action = self.merge(pull)
            return action, _merge_reason(action)
        if state == MergeState.BEHIND:
            updated = self.update_branch(pull)
            return (Action.BRANCH_UPDATED if updated else Action.ERROR), None
        if state == MergeState.BLOCKED:
            return _removal(self.assess_status_and_checks(pull))
        if state == MergeState.UNSTABLE:
            return self.handle_unstable_status(pull)
        if state == MergeState.UNMERGEABLE:
            self.remove_labels(pull, LabelRemovalReason.MERGE_CONFLICTS)
            return Action.LABEL_REMOVED, LabelRemovalReason.MERGE_CONFLICTS
        if state == MergeState.BAD:
            self.remove_labels(pull)
            return Action.LABEL_REMOVED, LabelRemovalReason.DEFAULT
        return Action.WAITING, None


def _removal(reason: LabelRemovalReason | None) -> tuple[Action, LabelRemovalReason | None]:
    if reason is None:
        return Action.WAITING, None
    return Action.LABEL_REMOVED, reason


def _merge_reason(action: Action) -> LabelRemovalReason | None:
    return LabelRemovalReason.DEFAULT if action == Action.MERGE_FAILED else None
