"""StatusService - Decides what to do with BLOCKED and UNSTABLE pull requests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from automerge_bot.github import CheckState, GithubError, LabelRemovalReason
from automerge_bot.logging import log_failure
from automerge_bot.status.evaluator import reduce_states, required_check_states

if TYPE_CHECKING:
    from automerge_bot.github import CheckRunSummary, GithubClient, Pull, StatusSummary
    from automerge_bot.labels import LabelService

logger = logging.getLogger("automerge_bot.status")


class StatusService:
    """Evaluates status checks and check-runs of a pull request's head commit.

    Both entry points return the reason the labels were removed, or None when
    nothing was done and the pull request is left for the next cycle.
    """

    def __init__(self, client: GithubClient, labels: LabelService) -> None:
        self.client = client
        self.labels = labels

    def assess_status_and_checks(self, pull: Pull) -> LabelRemovalReason | None:
        """Handle a BLOCKED pull request.

        If every required check passed, the host still blocks the merge for
        some other reason, assumed to be outstanding reviews. This is not
        verified against the review state.

        Args:
            pull: The blocked pull request.

        Returns:
            The removal reason, or None if the pull request keeps waiting.
        """
        try:
            protection = self.client.get_branch_protection(pull.base.ref)
        except GithubError as e:
            log_failure(logger, e, "There was a problem getting the branch protections")
            return None

        required = list(protection.required_contexts) if protection.protected else []
        if not required:
            logger.info("Branch %s has no required checks", pull.base.ref)
            return self._remove(pull, LabelRemovalReason.OUTSTANDING_REVIEWS)

        summaries = self._fetch_summaries(pull)
        if summaries is None:
            return None
        check_runs, statuses = summaries

        states = required_check_states(required, check_runs, statuses)
        logger.info("Required checks for PR #%d: %s", pull.number, _format(states))

        verdict = reduce_states(states.values())
        if verdict == CheckState.SUCCESS:
            return self._remove(pull, LabelRemovalReason.OUTSTANDING_REVIEWS)
        if verdict == CheckState.FAILURE:
            return self._remove(pull, LabelRemovalReason.STATUS_CHECKS)
        return None

    def remove_label_or_wait(self, pull: Pull) -> LabelRemovalReason | None:
        """Handle an UNSTABLE pull request.

        Looks at every check-run and status, required or not, and removes the
        labels if any of them failed.

        Args:
            pull: The unstable pull request.

        Returns:
            OPTIONAL_CHECKS if the labels were removed, otherwise None.
        """
        summaries = self._fetch_summaries(pull)
        if summaries is None:
            return None
        check_runs, statuses = summaries

        states = [run.check_state() for run in check_runs.check_runs]
        states += [item.check_state() for item in statuses.statuses]
        if reduce_states(states) == CheckState.FAILURE:
            return self._remove(pull, LabelRemovalReason.OPTIONAL_CHECKS)
        logger.info("PR #%d has no failing optional checks, waiting", pull.number)
        return None

    def _fetch_summaries(self, pull: Pull) -> tuple[CheckRunSummary, StatusSummary] | None:
        try:
            check_runs = self.client.get_check_runs(pull.head.sha)
            statuses = self.client.get_status(pull.head.sha)
        except GithubError as e:
            log_failure(logger, e, f"Unable to get checks for {pull.head.sha}")
            return None
        return check_runs, statuses

    def _remove(self, pull: Pull, reason: LabelRemovalReason) -> LabelRemovalReason:
        self.labels.remove_labels(pull, reason)
        return reason


def _format(states: dict[str, CheckState]) -> str:
    return ", ".join(f"{name}={state.value}" for name, state in states.items())
