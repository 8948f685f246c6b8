"""GitHub REST API client for tags and releases."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any

import httpx

from autorelease.exceptions import GitHubError, TagExistsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PublishedRelease:
    """A release as created on GitHub."""

    tag_name: str
    title: str
    body: str
    is_latest: bool
    html_url: str | None = None


class GitHubClient:
    """Synchronous client for the GitHub REST API v3.

    Args:
        token: Token authorizing tag and release creation
        repository: Target repository as ``owner/repo``
        api_url: API base URL (override for GitHub Enterprise)
        timeout: Request timeout in seconds
        transport: Optional httpx transport, used by tests
    """

    def __init__(
        self,
        token: str,
        repository: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.repository = repository
        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "autorelease",
            },
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        url = f"/repos/{self.repository}/{endpoint.lstrip('/')}"
        logger.debug("%s %s", method, url)
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise GitHubError(f"GitHub request {method} {url} failed: {e}") from e

    @staticmethod
    def _error(response: httpx.Response, action: str) -> GitHubError:
        try:
            data = response.json()
        except ValueError:
            data = None
        message = data.get("message", response.text) if isinstance(data, dict) else response.text
        return GitHubError(
            f"Failed to {action}: HTTP {response.status_code}: {message}",
            status_code=response.status_code,
        )

    def tag_exists(self, tag: str) -> bool:
        """Whether ``refs/tags/<tag>`` exists on the remote."""
        response = self._request("GET", f"git/ref/tags/{tag}")
        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        raise self._error(response, f"look up tag {tag}")

    @staticmethod
    def _is_already_exists(response: httpx.Response) -> bool:
        if response.status_code != 422:
            return False
        try:
            data = response.json()
        except ValueError:
            return False
        errors = data.get("errors", []) if isinstance(data, dict) else []
        return any(isinstance(e, dict) and e.get("code") == "already_exists" for e in errors)

    def create_release(
        self,
        tag: str,
        target: str,
        title: str,
        body: str,
        *,
        make_latest: bool = True,
    ) -> PublishedRelease:
        """Create tag ``tag`` at commit ``target`` together with its release.

        Raises:
            TagExistsError: If a release for the tag was created concurrently
            GitHubError: On any other failure
        """
        payload = {
            "tag_name": tag,
            "target_commitish": target,
            "name": title,
            "body": body,
            "draft": False,
            "prerelease": False,
            "make_latest": "true" if make_latest else "false",
        }
        response = self._request("POST", "releases", json=payload)
        if self._is_already_exists(response):
            raise TagExistsError(f"Release {tag} already exists", status_code=422)
        if response.status_code != 201:
            raise self._error(response, f"create release {tag}")

        data = response.json()
        return PublishedRelease(
            tag_name=data.get("tag_name", tag),
            title=data.get("name") or title,
            body=data.get("body") or body,
            is_latest=make_latest,
            html_url=data.get("html_url"),
        )
