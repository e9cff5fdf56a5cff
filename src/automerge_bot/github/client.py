"""GithubClient - Repository-scoped client for the GitHub REST API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx

from automerge_bot.config.models import ACCEPT_HEADER
from automerge_bot.github.exceptions import GithubRequestError, GithubResponseError
from automerge_bot.github.models import (
    BranchProtection,
    CheckRunSummary,
    Label,
    MergeStatus,
    Pull,
    StatusSummary,
)
from automerge_bot.logging import sanitize_for_log

logger = logging.getLogger("automerge_bot.github")

T = TypeVar("T")


class GithubClient:
    """Client bound to a single repository of the GitHub REST API.

    Every operation either returns a decoded record or raises a GithubError;
    there is no retry beyond the next polling cycle.
    """

    def __init__(self, base_url: str, token: str, timeout: float = 30.0) -> None:
        """Initialize the client.

        Args:
            base_url: Repository API root, e.g. https://api.github.com/repos/owner/name
            token: Credential sent as a bearer token
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._client: httpx.Client | None = None

    def __repr__(self) -> str:
        return f"GithubClient(base_url={self.base_url!r})"

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the repository."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": ACCEPT_HEADER,
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> GithubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> httpx.Response:
        """Send a request and fail on anything but a 2xx answer.

        Raises:
            GithubRequestError: On transport failure or a non-2xx status
        """
        logger.debug("%s %s%s", method, self.base_url, path)
        try:
            if json is None:
                response = self.client.request(method, path)
            else:
                response = self.client.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise GithubRequestError(method, path, None, sanitize_for_log(str(e))) from e

        if not 200 <= response.status_code < 300:
            raise GithubRequestError(
                method, path, response.status_code, sanitize_for_log(response.text)
            )
        return response

    def _get(self, path: str, decode: Callable[[Any], T]) -> T:
        response = self._request("GET", path)
        try:
            return decode(response.json())
        except (KeyError, TypeError, ValueError) as e:
            raise GithubResponseError(f"Unexpected response from GET {path}: {e!r}") from e

    def list_pulls(self) -> list[Pull]:
        """List open pull requests in the host's default order (newest first)."""
        return self._get("/pulls", lambda data: [Pull.from_api(item) for item in data])

    def get_merge_status(self, number: int) -> MergeStatus:
        """Get the mergeability of a pull request."""
        return self._get(f"/pulls/{number}", MergeStatus.from_api)

    def get_branch_protection(self, ref: str) -> BranchProtection:
        """Get protection settings (and required checks) of a branch."""
        return self._get(f"/branches/{quote(ref, safe='')}", BranchProtection.from_api)

    def get_check_runs(self, sha: str) -> CheckRunSummary:
        """Get the check-runs reported for a commit."""
        return self._get(f"/commits/{sha}/check-runs", CheckRunSummary.from_api)

    def get_status(self, sha: str) -> StatusSummary:
        """Get the combined status of a commit."""
        return self._get(f"/commits/{sha}/status", StatusSummary.from_api)

    def merge_pull(self, number: int, title: str, merge_method: str) -> None:
        """Merge a pull request.

        Args:
            number: The pull request number
            title: Commit title for the merge
            merge_method: merge, squash or rebase
        """
        self._request(
            "PUT",
            f"/pulls/{number}/merge",
            json={"commit_title": title, "merge_method": merge_method},
        )

    def update_branch(self, branch: str, upstream: str) -> None:
        """Merge `upstream` into `branch` (the "Update branch" button).

        Args:
            branch: Branch receiving the changes (pull request source)
            upstream: Branch providing the changes (pull request target)
        """
        self._request(
            "POST",
            "/merges",
            json={"base": branch, "head": upstream, "commit_message": "Update branch"},
        )

    def delete_branch(self, ref: str) -> None:
        """Delete a branch reference."""
        self._request("DELETE", f"/git/refs/heads/{quote(ref, safe='/')}")

    def get_issue_labels(self, number: int) -> list[Label]:
        """Get the labels currently attached to an issue or pull request."""
        return self._get(
            f"/issues/{number}/labels", lambda data: [Label.from_api(item) for item in data]
        )

    def remove_issue_label(self, number: int, name: str) -> None:
        """Remove a label from an issue or pull request."""
        self._request("DELETE", f"/issues/{number}/labels/{quote(name, safe='')}")

    def post_comment(self, number: int, body: str) -> None:
        """Comment on an issue or pull request."""
        self._request("POST", f"/issues/{number}/comments", json={"body": body})
