from __future__ import annotations

from typing import Iterable

from .github_client import GitHubAPI
from .models import BatchResult, Repository
from .orchestrator import BatchOrchestrator
from .resolver import RepoResolver


class RepoManager:
    """Resolve a set of repository specs and act on all of them.

    Every command resolves its specs first; an InvalidRepoSpec or a failed
    lookup stops the command before any repository is modified.
    """

    def __init__(
        self,
        client: GitHubAPI,
        *,
        resolver: RepoResolver | None = None,
        orchestrator: BatchOrchestrator | None = None,
    ):
        self.client = client
        self.resolver = resolver or RepoResolver(client)
        self.orchestrator = orchestrator or BatchOrchestrator(client)

    async def list_repos(self, specs: Iterable[str]) -> list[Repository]:
        return await self.resolver.resolve(specs)

    async def list_labels(self, specs: Iterable[str]) -> list[Repository]:
        repos = await self.resolver.resolve(specs)
        return await self.orchestrator.load_labels(repos)

    async def add_labels(
        self, specs: Iterable[str], labels: dict[str, str],
    ) -> tuple[list[Repository], BatchResult]:
        repos = await self.resolver.resolve(specs)
        result = await self.orchestrator.run(repos, self.orchestrator.add_labels(labels))
        return repos, result

    async def add_milestone(
        self, specs: Iterable[str], title: str, description: str | None = None,
    ) -> tuple[list[Repository], BatchResult]:
        repos = await self.resolver.resolve(specs)
        result = await self.orchestrator.run(repos, self.orchestrator.add_milestone(title, description))
        return repos, result

    async def assign_all(self, specs: Iterable[str], assignee: str) -> tuple[list[Repository], BatchResult]:
        repos = await self.resolver.resolve(specs)
        result = await self.orchestrator.run(repos, self.orchestrator.assign_issues(assignee))
        return repos, result
