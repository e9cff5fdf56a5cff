"""Labels - Removes automerge labels and explains why on the pull request."""

from automerge_bot.labels.comments import COMMENTS, comment_for
from automerge_bot.labels.service import LabelService

__all__ = [
    "COMMENTS",
    "LabelService",
    "comment_for",
]
