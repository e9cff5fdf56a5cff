"""LabelService - Removes automerge labels and posts the diagnostic comment."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from automerge_bot.github import GithubError, LabelRemovalReason
from automerge_bot.labels.comments import comment_for
from automerge_bot.logging import log_failure

if TYPE_CHECKING:
    from automerge_bot.github import GithubClient, Pull

logger = logging.getLogger("automerge_bot.labels")


class LabelService:
    """Removes the automerge and priority labels from pull requests.

    Removing the labels is the bot's only way of telling a human that
    something needs attention, so every removal is followed by a comment
    explaining the likely cause.
    """

    def __init__(self, client: GithubClient, label: str, priority_label: str) -> None:
        """Initialize the service.

        Args:
            client: GitHub client of the repository.
            label: Automerge label name.
            priority_label: Priority automerge label name.
        """
        self.client = client
        self.label = label
        self.priority_label = priority_label

    @property
    def managed_labels(self) -> list[str]:
        """Labels removed from a pull request, without duplicates."""
        return list(dict.fromkeys([self.label, self.priority_label]))

    def remove_labels(
        self, pull: Pull, reason: LabelRemovalReason = LabelRemovalReason.DEFAULT
    ) -> bool:
        """Remove the automerge and priority labels if present, then comment.

        A comment is only posted when at least one label was actually removed.

        Args:
            pull: The pull request to remove labels from.
            reason: Why the labels are removed; selects the comment text.

        Returns:
            True if at least one label was removed.
        """
        try:
            current = {label.name for label in self.client.get_issue_labels(pull.number)}
        except GithubError as e:
            log_failure(logger, e, f"Unable to get labels for PR #{pull.number}")
            return False

        removed = False
        for name in self.managed_labels:
            if name in current and self._remove_label(pull, name):
                removed = True

        if removed:
            self._post_comment(pull, reason)
        else:
            logger.debug("PR #%d carries no automerge labels, nothing removed", pull.number)
        return removed

    def _remove_label(self, pull: Pull, name: str) -> bool:
        try:
            self.client.remove_issue_label(pull.number, name)
        except GithubError as e:
            log_failure(logger, e, f"Unable to remove label {name}")
            return False
        logger.info("Removed label %s from PR #%d: %s", name, pull.number, pull.title)
        return True

    def _post_comment(self, pull: Pull, reason: LabelRemovalReason) -> None:
        try:
            self.client.post_comment(pull.number, comment_for(reason))
        except GithubError as e:
            log_failure(logger, e, "Unable to post comment")
            return
        logger.info("Commented on PR #%d (%s): %s", pull.number, reason.value, pull.title)
