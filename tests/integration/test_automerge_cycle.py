"""Integration tests running full cycles against a fake GitHub host.

These tests use httpx.MockTransport so the real client, services and
state machine interact through actual HTTP requests and JSON payloads.
"""

import json
from urllib.parse import unquote

import httpx
import pytest

from automerge_bot.automerger import Action, Automerger
from automerge_bot.config import AutomergeConfig, MergeType
from automerge_bot.github import GithubClient, LabelRemovalReason, MergeState
from automerge_bot.labels import COMMENTS
from automerge_bot.scheduler import Scheduler

REPO = "http://foo.test/repos/owner/repo"
PREFIX = "/repos/owner/repo"


class FakeGithub:
    """In-memory stand-in for one repository on the host."""

    def __init__(self) -> None:
        self.pulls: list[dict] = []
        self.merge_status: dict[int, dict] = {}
        self.protection: dict[str, dict] = {}
        self.check_runs: dict[str, list[dict]] = {}
        self.statuses: dict[str, list[dict]] = {}
        self.merge_response = 200
        self.requests: list[tuple[str, str, dict | None]] = []
        self.comments: list[tuple[int, str]] = []

    def add_pull(self, number: int, labels: list[str], mergeable, state: str) -> None:
        self.pulls.append(
            {
                "id": number * 100,
                "number": number,
                "title": f"PR {number}",
                "url": f"{REPO}/pulls/{number}",
                "labels": [{"name": name} for name in labels],
                "base": {"ref": "main", "sha": "base-sha"},
                "head": {"ref": f"feature-{number}", "sha": f"sha-{number}"},
            }
        )
        self.merge_status[number] = {
            "number": number,
            "mergeable": mergeable,
            "mergeable_state": state,
        }

    def labels_of(self, number: int) -> list[str]:
        pull = next(p for p in self.pulls if p["number"] == number)
        return [label["name"] for label in pull["labels"]]

    def paths(self, method: str) -> list[str]:
        return [path for m, path, _ in self.requests if m == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = unquote(request.url.path).removeprefix(PREFIX)
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))
        parts = path.strip("/").split("/")

        if request.method == "GET" and path == "/pulls":
            return httpx.Response(200, json=self.pulls)
        if request.method == "GET" and parts[0] == "pulls" and len(parts) == 2:
            return httpx.Response(200, json=self.merge_status[int(parts[1])])
        if request.method == "PUT" and parts[0] == "pulls" and parts[2:] == ["merge"]:
            if self.merge_response != 200:
                return httpx.Response(self.merge_response, text="Pull Request is not mergeable")
            return httpx.Response(200, json={"merged": True})
        if request.method == "GET" and parts[0] == "branches":
            name = "/".join(parts[1:])
            protection = self.protection.get(name)
            if protection is None:
                return httpx.Response(200, json={"name": name, "protected": False})
            return httpx.Response(200, json=protection)
        if request.method == "GET" and parts[0] == "commits" and parts[2] == "check-runs":
            runs = self.check_runs.get(parts[1], [])
            return httpx.Response(200, json={"total_count": len(runs), "check_runs": runs})
        if request.method == "GET" and parts[0] == "commits" and parts[2] == "status":
            items = self.statuses.get(parts[1], [])
            return httpx.Response(
                200, json={"state": "pending", "total_count": len(items), "statuses": items}
            )
        if request.method == "POST" and path == "/merges":
            return httpx.Response(201, json={"sha": "merged-sha"})
        if request.method == "DELETE" and parts[:3] == ["git", "refs", "heads"]:
            return httpx.Response(204)
        if parts[0] == "issues" and parts[2] == "labels":
            number = int(parts[1])
            pull = next(p for p in self.pulls if p["number"] == number)
            if request.method == "GET":
                return httpx.Response(200, json=pull["labels"])
            pull["labels"] = [lab for lab in pull["labels"] if lab["name"] != parts[3]]
            return httpx.Response(200, json=pull["labels"])
        if request.method == "POST" and parts[0] == "issues" and parts[2] == "comments":
            self.comments.append((int(parts[1]), body["body"]))
            return httpx.Response(201, json={"id": 1})
        return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture
def fake() -> FakeGithub:
    """Create an empty fake repository."""
    return FakeGithub()


@pytest.fixture
def automerger(fake: FakeGithub) -> Automerger:
    """Create an Automerger talking to the fake repository."""
    config = AutomergeConfig(token="test-token", repos=(REPO,), merge_type=MergeType.REBASE)
    github = GithubClient(REPO, config.token)
    github._client = httpx.Client(
        base_url=REPO,
        headers={"Authorization": f"Bearer {config.token}"},
        transport=httpx.MockTransport(fake.handler),
    )
    merger = Automerger(config, REPO, client=github)
    yield merger
    merger.close()


def _protect(fake: FakeGithub, contexts: list[str]) -> None:
    fake.protection["main"] = {
        "name": "main",
        "protected": True,
        "protection": {"required_status_checks": {"contexts": contexts}},
    }


@pytest.mark.integration
class TestAutomergeCycle:
    """Full cycles through client, services and state machine."""

    def test_clean_pull_merged_and_branch_deleted(
        self, automerger: Automerger, fake: FakeGithub
    ) -> None:
        """The oldest labeled pull request is merged and its branch removed."""
        fake.add_pull(2, ["Automerge"], True, "clean")
        fake.add_pull(1, ["Automerge"], True, "clean")

        result = automerger.run_cycle()

        assert result.action == Action.MERGED
        assert result.pull_number == 1
        merges = [(p, b) for m, p, b in fake.requests if m == "PUT"]
        assert merges == [("/pulls/1/merge", {"commit_title": "PR 1", "merge_method": "rebase"})]
        assert fake.paths("DELETE") == ["/git/refs/heads/feature-1"]

    def test_priority_pull_handled_first(self, automerger: Automerger, fake: FakeGithub) -> None:
        """A priority label outranks an older plain automerge label."""
        fake.add_pull(3, ["Priority Automerge"], True, "behind")
        fake.add_pull(1, ["Automerge"], True, "clean")

        result = automerger.run_cycle()

        assert result.action == Action.BRANCH_UPDATED
        assert result.pull_number == 3
        posts = [(p, b) for m, p, b in fake.requests if m == "POST"]
        assert posts == [
            ("/merges", {"base": "feature-3", "head": "main", "commit_message": "Update branch"})
        ]
        assert fake.paths("PUT") == []

    def test_blocked_by_failing_required_check(
        self, automerger: Automerger, fake: FakeGithub
    ) -> None:
        """A failing required check removes the label with an explanation."""
        fake.add_pull(5, ["Automerge", "bug"], True, "blocked")
        _protect(fake, ["Foo-CI", "Status-Check"])
        fake.check_runs["sha-5"] = [{"name": "Foo-CI", "status": "completed", "conclusion": "success"}]
        fake.statuses["sha-5"] = [{"context": "Status-Check", "state": "failure"}]

        result = automerger.run_cycle()

        assert result.state == MergeState.BLOCKED
        assert result.reason == LabelRemovalReason.STATUS_CHECKS
        assert fake.labels_of(5) == ["bug"]
        assert fake.comments == [(5, COMMENTS[LabelRemovalReason.STATUS_CHECKS])]

    def test_blocked_with_pending_check_waits(
        self, automerger: Automerger, fake: FakeGithub
    ) -> None:
        """Pending required checks leave everything untouched."""
        fake.add_pull(5, ["Automerge"], True, "blocked")
        _protect(fake, ["Foo-CI"])
        fake.check_runs["sha-5"] = [{"name": "Foo-CI", "status": "queued", "conclusion": None}]

        result = automerger.run_cycle()

        assert result.action == Action.WAITING
        assert fake.labels_of(5) == ["Automerge"]
        assert fake.comments == []

    def test_blocked_on_unprotected_branch(
        self, automerger: Automerger, fake: FakeGithub
    ) -> None:
        """Blocked without required checks means reviews are outstanding."""
        fake.add_pull(6, ["Automerge"], True, "blocked")

        result = automerger.run_cycle()

        assert result.reason == LabelRemovalReason.OUTSTANDING_REVIEWS
        assert not any(path.startswith("/commits/") for path in fake.paths("GET"))
        assert fake.comments == [(6, COMMENTS[LabelRemovalReason.OUTSTANDING_REVIEWS])]

    def test_failed_merge_removes_label_once(
        self, automerger: Automerger, fake: FakeGithub
    ) -> None:
        """A rejected merge removes the label once and keeps the branch."""
        fake.add_pull(4, ["Automerge"], True, "clean")
        fake.merge_response = 405

        result = automerger.run_cycle()

        assert result.action == Action.MERGE_FAILED
        assert fake.paths("DELETE") == ["/issues/4/labels/Automerge"]
        assert fake.comments == [(4, COMMENTS[LabelRemovalReason.DEFAULT])]

        # The next cycle no longer sees a labeled pull request
        assert automerger.run_cycle().action == Action.IDLE

    def test_conflicts_remove_both_labels(self, automerger: Automerger, fake: FakeGithub) -> None:
        """Unmergeable pull requests lose both labels."""
        fake.add_pull(8, ["Priority Automerge", "Automerge"], False, "dirty")

        result = automerger.run_cycle()

        assert result.reason == LabelRemovalReason.MERGE_CONFLICTS
        assert fake.labels_of(8) == []
        assert len(fake.comments) == 1

    def test_unstable_with_failing_optional_check(
        self, automerger: Automerger, fake: FakeGithub
    ) -> None:
        """A failing optional check removes the label on an UNSTABLE pull request."""
        fake.add_pull(9, ["Automerge"], True, "unstable")
        fake.check_runs["sha-9"] = [
            {"name": "coverage", "status": "completed", "conclusion": "timed_out"}
        ]

        result = automerger.run_cycle()

        assert result.reason == LabelRemovalReason.OPTIONAL_CHECKS
        assert fake.comments == [(9, COMMENTS[LabelRemovalReason.OPTIONAL_CHECKS])]

    def test_host_error_takes_no_action(self, automerger: Automerger, fake: FakeGithub) -> None:
        """A failing listing endpoint leaves the repository idle."""
        def broken(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="Server Error")

        automerger.client._client = httpx.Client(
            base_url=REPO, transport=httpx.MockTransport(broken)
        )

        assert automerger.run_cycle().action == Action.IDLE


@pytest.mark.integration
class TestSchedulerCycle:
    """Scheduler driving real automergers."""

    @pytest.mark.asyncio
    async def test_run_once_over_repository(
        self, automerger: Automerger, fake: FakeGithub
    ) -> None:
        """One scheduled cycle merges the ready pull request."""
        fake.add_pull(1, ["Automerge"], True, "clean")
        scheduler = Scheduler([automerger])

        results = await scheduler.run_once()

        assert [r.action for r in results] == [Action.MERGED]
        assert scheduler.last_results[REPO].pull_number == 1
