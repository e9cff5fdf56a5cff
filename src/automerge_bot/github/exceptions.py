"""Custom exceptions for the GitHub client."""

from __future__ import annotations


class GithubError(Exception):
    """Base exception for GitHub client errors."""


class GithubRequestError(GithubError):
    """A request failed in transport or the host answered with a non-2xx status."""

    def __init__(self, method: str, path: str, status_code: int | None, detail: str) -> None:
        self.method = method
        self.path = path
        self.status_code = status_code
        self.detail = detail
        status = status_code if status_code is not None else "transport error"
        super().__init__(f"{method} {path} failed: {status} - {detail}")


class GithubResponseError(GithubError):
    """A response body could not be decoded into the expected shape."""
