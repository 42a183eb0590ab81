"""Async GitHub REST client used for repository lookups and batch edits."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Mapping, Protocol

import aiohttp

from .config import API, DEFAULT_PER_PAGE, RATE_LIMIT_PATTERN, USER_AGENT, VALIDATION_PATTERN

log = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ValidationFailed(GitHubAPIError):
    """GitHub understood the request but refused it (e.g. an ineligible assignee)."""


class RateLimitExceeded(GitHubAPIError):
    pass


class GitHubAPI(Protocol):
    """The subset of the GitHub API the resolver and orchestrator rely on.

    List methods return one page; an empty list means there are no more pages.
    """

    async def get_repo(self, owner: str, name: str) -> dict[str, Any]:
        ...

    async def list_org_repos(self, owner: str, page: int) -> list[dict[str, Any]]:
        ...

    async def list_labels(self, owner: str, name: str, page: int) -> list[dict[str, Any]]:
        ...

    async def list_issues(
        self, owner: str, name: str, page: int, *, assignee: str = "none", state: str = "open",
    ) -> list[dict[str, Any]]:
        ...

    async def edit_issue(self, owner: str, name: str, number: int, *, assignee: str) -> dict[str, Any]:
        ...

    async def create_label(self, owner: str, name: str, label_name: str, color: str) -> dict[str, Any]:
        ...

    async def create_milestone(
        self, owner: str, name: str, title: str, description: str | None = None,
    ) -> dict[str, Any]:
        ...


def check_response(status: int, payload: Any, headers: Mapping[str, str] | None = None) -> None:
    """Raise the matching GitHubAPIError for an unsuccessful response."""
    if status < 400:
        return
    headers = headers or {}
    if isinstance(payload, dict):
        message = str(payload.get("message") or "")
    else:
        message = str(payload or "")
    message = message or f"HTTP {status}"

    if RATE_LIMIT_PATTERN.search(message) or (
        status in (403, 429) and headers.get("X-RateLimit-Remaining") == "0"
    ):
        reset = headers.get("X-RateLimit-Reset")
        log.warning("GitHub rate limit exceeded (reset at epoch=%s): %s", reset, message)
        raise RateLimitExceeded(message, status)
    if status == 422 or VALIDATION_PATTERN.search(message):
        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            message = f"{message}: {errors}"
        raise ValidationFailed(message, status)
    raise GitHubAPIError(f"GitHub API error {status}: {message[:500]}", status)


class AsyncGitHubClient:
    """aiohttp-backed implementation of GitHubAPI.

    One session is opened lazily and shared by every concurrent call; close it
    with ``await client.close()`` or use the client as an async context manager.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str = API,
        per_page: int = DEFAULT_PER_PAGE,
        timeout: float = 30.0,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.per_page = per_page
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "AsyncGitHubClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            headers = {
                "Accept": "application/vnd.github+json",
                "User-Agent": USER_AGENT,
                "X-GitHub-Api-Version": "2022-11-28",
            }
            if self.token:
                headers["Authorization"] = f"token {self.token}"
            self._session = aiohttp.ClientSession(
                headers=headers, timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"
        log.debug("%s %s params=%s", method, path, params)
        try:
            async with session.request(method, url, params=params, json=body) as resp:
                text = await resp.text()
                try:
                    payload = json.loads(text) if text else None
                except ValueError:
                    payload = text
                check_response(resp.status, payload, resp.headers)
                return payload
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise GitHubAPIError(f"{method} {path} failed: {exc}") from exc

    async def _get_page(self, path: str, page: int, **params: Any) -> list[dict[str, Any]]:
        params.update(page=page, per_page=self.per_page)
        data = await self._request("GET", path, params=params)
        if not isinstance(data, list):
            raise GitHubAPIError(f"Expected list for paginated endpoint {path}, got {type(data).__name__}")
        return data

    # ── Repositories ─────────────────────────────────────────────

    async def get_repo(self, owner: str, name: str) -> dict[str, Any]:
        return await self._request("GET", f"/repos/{owner}/{name}")

    async def list_org_repos(self, owner: str, page: int) -> list[dict[str, Any]]:
        return await self._get_page(f"/orgs/{owner}/repos", page)

    # ── Labels & milestones ──────────────────────────────────────

    async def list_labels(self, owner: str, name: str, page: int) -> list[dict[str, Any]]:
        return await self._get_page(f"/repos/{owner}/{name}/labels", page)

    async def create_label(self, owner: str, name: str, label_name: str, color: str) -> dict[str, Any]:
        return await self._request(
            "POST", f"/repos/{owner}/{name}/labels", body={"name": label_name, "color": color},
        )

    async def create_milestone(
        self, owner: str, name: str, title: str, description: str | None = None,
    ) -> dict[str, Any]:
        body = {"title": title}
        if description:
            body["description"] = description
        return await self._request("POST", f"/repos/{owner}/{name}/milestones", body=body)

    # ── Issues ───────────────────────────────────────────────────

    async def list_issues(
        self, owner: str, name: str, page: int, *, assignee: str = "none", state: str = "open",
    ) -> list[dict[str, Any]]:
        return await self._get_page(
            f"/repos/{owner}/{name}/issues", page, assignee=assignee, state=state,
        )

    async def edit_issue(self, owner: str, name: str, number: int, *, assignee: str) -> dict[str, Any]:
        return await self._request(
            "PATCH", f"/repos/{owner}/{name}/issues/{number}", body={"assignee": assignee},
        )
