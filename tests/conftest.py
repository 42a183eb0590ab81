from __future__ import annotations

from typing import Any

import pytest

from repo_manager.github_client import GitHubAPIError


def repo_record(owner: str, name: str) -> dict[str, Any]:
    return {"name": name, "full_name": f"{owner}/{name}", "owner": {"login": owner}}


def issue_record(number: int, *, state: str = "open", assignee: str | None = None) -> dict[str, Any]:
    return {
        "number": number,
        "title": f"Issue {number}",
        "state": state,
        "assignee": {"login": assignee} if assignee else None,
    }


def paged(items: list, size: int) -> list[list]:
    return [items[i:i + size] for i in range(0, len(items), size)]


class FakeGitHub:
    """In-memory GitHubAPI.

    ``org_pages`` / ``label_pages`` / ``issue_pages`` hold the non-empty pages;
    anything past the last page comes back empty. ``errors`` maps a call key to
    the exception that call should raise.
    """

    def __init__(self):
        self.repos: dict[str, dict[str, Any]] = {}
        self.org_pages: dict[str, list[list[dict]]] = {}
        self.label_pages: dict[str, list[list[dict]]] = {}
        self.issue_pages: dict[str, list[list[dict]]] = {}
        self.errors: dict[tuple, Exception] = {}
        self.calls: list[tuple] = []

    def _call(self, *key):
        self.calls.append(key)
        if key in self.errors:
            raise self.errors[key]

    @staticmethod
    def _page(pages: list[list[dict]], page: int) -> list[dict]:
        return list(pages[page - 1]) if page <= len(pages) else []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def get_repo(self, owner, name):
        self._call("get_repo", owner, name)
        key = f"{owner}/{name}"
        if key not in self.repos:
            raise GitHubAPIError("Not Found", 404)
        return self.repos[key]

    async def list_org_repos(self, owner, page):
        self._call("list_org_repos", owner, page)
        return self._page(self.org_pages.get(owner, []), page)

    async def list_labels(self, owner, name, page):
        self._call("list_labels", f"{owner}/{name}", page)
        return self._page(self.label_pages.get(f"{owner}/{name}", []), page)

    async def list_issues(self, owner, name, page, *, assignee="none", state="open"):
        self._call("list_issues", f"{owner}/{name}", page)
        return self._page(self.issue_pages.get(f"{owner}/{name}", []), page)

    async def edit_issue(self, owner, name, number, *, assignee):
        self._call("edit_issue", f"{owner}/{name}", number)
        return {"number": number, "assignee": {"login": assignee}}

    async def create_label(self, owner, name, label_name, color):
        self._call("create_label", f"{owner}/{name}", label_name)
        return {"name": label_name, "color": color}

    async def create_milestone(self, owner, name, title, description=None):
        self._call("create_milestone", f"{owner}/{name}")
        return {"title": title, "description": description}


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()
