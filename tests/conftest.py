"""Shared pytest fixtures and configuration."""

from collections.abc import Callable

import pytest

from automerge_bot.config import AutomergeConfig, MergeType
from automerge_bot.github import Branch, Label, Pull


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def config() -> AutomergeConfig:
    """Configuration for a single fake repository."""
    return AutomergeConfig(
        token="test-token",
        repos=("http://foo.test/repos/owner/repo",),
        label="Automerge",
        priority_label="Priority Automerge",
        merge_type=MergeType.SQUASH,
    )


@pytest.fixture
def make_pull() -> Callable[..., Pull]:
    """Factory for pull requests."""

    def _make(number: int = 1, labels: tuple[str, ...] = ("Automerge",), **kwargs) -> Pull:
        return Pull(
            id=kwargs.get("id", number * 100),
            number=number,
            title=kwargs.get("title", f"Test PR {number}"),
            url=f"http://foo.test/repos/owner/repo/pulls/{number}",
            labels=tuple(Label(name) for name in labels),
            base=Branch(ref=kwargs.get("base_ref", "main"), sha="base-sha"),
            head=Branch(ref=kwargs.get("head_ref", f"feature-{number}"), sha=f"sha-{number}"),
        )

    return _make
