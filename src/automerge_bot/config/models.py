"""Data models for configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from automerge_bot.config.exceptions import ConfigError

DEFAULT_LABEL = "Automerge"
DEFAULT_PRIORITY_LABEL = "Priority Automerge"
DEFAULT_INTERVAL = 60.0

# v3 JSON API plus the check-runs preview
ACCEPT_HEADER = "application/vnd.github.v3+json, application/vnd.github.antiope-preview+json"


class MergeType(str, Enum):
    """Merge strategy passed to the host's merge endpoint."""

    MERGE = "merge"
    SQUASH = "squash"
    REBASE = "rebase"

    @classmethod
    def parse(cls, value: str) -> MergeType:
        """Parse a merge strategy name.

        Raises:
            ConfigError: If the value is not merge, squash or rebase.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ConfigError(f"Invalid merge type '{value}', expected one of: {allowed}") from None


@dataclass(frozen=True)
class AutomergeConfig:
    """Immutable configuration built once at startup.

    Attributes:
        token: Credential sent as a bearer token.
        repos: Repository API base URLs (e.g. https://api.github.com/repos/owner/name).
        label: Name of the label opting a pull request into automerge.
        priority_label: Name of the label giving a pull request precedence.
        merge_type: Merge strategy for the merge endpoint.
        optional_statuses: Merge UNSTABLE pull requests without looking at optional checks.
        interval: Seconds between polling cycles.
        timeout: Per-request timeout in seconds.
    """

    token: str = field(repr=False)
    repos: tuple[str, ...]
    label: str = DEFAULT_LABEL
    priority_label: str = DEFAULT_PRIORITY_LABEL
    merge_type: MergeType = MergeType.SQUASH
    optional_statuses: bool = False
    interval: float = DEFAULT_INTERVAL
    timeout: float = 30.0
