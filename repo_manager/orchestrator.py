"""Fan-out of batch operations over resolved repositories."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable

from .concurrency import settle_all
from .github_client import GitHubAPI, GitHubAPIError, RateLimitExceeded, ValidationFailed
from .models import BatchResult, Issue, IssueOutcome, Label, RepoState, RepoStats, Repository
from .pagination import collect

log = logging.getLogger(__name__)

UnitOfWork = Callable[[Repository], Awaitable[RepoStats]]

HALTED_MESSAGE = "not attempted: GitHub rate limit exceeded"


class BatchOrchestrator:
    """Run one unit of work per repository and aggregate the outcome.

    Units run concurrently without a cap. A unit that raises GitHubAPIError
    marks its repository as failed and leaves the others alone. Once any call
    hits the rate limit the orchestrator halts: work that has not sent its
    request yet is skipped, requests already in flight finish normally. The
    issue attempts of one repository are all sent together, so the halt mostly
    reaches repositories, label calls and pages that start later.
    """

    def __init__(self, client: GitHubAPI):
        self.client = client
        self._halted = asyncio.Event()

    @property
    def halted(self) -> bool:
        return self._halted.is_set()

    def _halt(self, exc: RateLimitExceeded) -> None:
        if not self.halted:
            log.warning("Rate limit exceeded, skipping remaining requests: %s", exc)
        self._halted.set()

    async def run(self, repos: Iterable[Repository], unit: UnitOfWork) -> BatchResult:
        repos = list(repos)
        stats = await asyncio.gather(*(self._run_one(repo, unit) for repo in repos))
        return BatchResult.from_stats({repo.full_name: s for repo, s in zip(repos, stats)})

    async def _run_one(self, repo: Repository, unit: UnitOfWork) -> RepoStats:
        if self.halted:
            repo.error = HALTED_MESSAGE
            repo.state = RepoState.REPORTED
            return repo.stats()
        try:
            await unit(repo)
        except GitHubAPIError as exc:
            if isinstance(exc, RateLimitExceeded):
                self._halt(exc)
            log.error("%s: %s", repo.full_name, exc)
            repo.error = str(exc)
        repo.state = RepoState.REPORTED
        return repo.stats()

    async def load_labels(self, repos: Iterable[Repository]) -> list[Repository]:
        """Attach every label (all pages) to each repository.

        Unlike the batch operations this is all-or-nothing: the first failure
        is raised once every listing has settled.
        """

        async def _load(repo: Repository) -> Repository:
            records = await collect(lambda page: self.client.list_labels(repo.owner, repo.name, page))
            repo.labels = [Label.from_api(r) for r in records]
            return repo

        return await settle_all(_load(repo) for repo in repos)

    # ── Units of work ────────────────────────────────────────────

    def add_labels(self, labels: dict[str, str]) -> UnitOfWork:
        """Create each ``{name: color}`` label; any rejection fails the repository."""

        async def _add_labels(repo: Repository) -> RepoStats:
            results = await asyncio.gather(
                *(
                    self.client.create_label(repo.owner, repo.name, name, color)
                    for name, color in labels.items()
                ),
                return_exceptions=True,
            )
            errors = [r for r in results if isinstance(r, BaseException)]
            repo.successes += len(results) - len(errors)
            repo.failures += len(errors)
            for exc in errors:
                if isinstance(exc, RateLimitExceeded):
                    self._halt(exc)
            if errors:
                raise errors[0]
            return repo.stats()

        return _add_labels

    def add_milestone(self, title: str, description: str | None = None) -> UnitOfWork:
        async def _add_milestone(repo: Repository) -> RepoStats:
            try:
                await self.client.create_milestone(repo.owner, repo.name, title, description)
            except GitHubAPIError:
                repo.failures += 1
                raise
            repo.successes += 1
            return repo.stats()

        return _add_milestone

    def assign_issues(self, assignee: str) -> UnitOfWork:
        """Assign every open, unassigned issue of a repository to ``assignee``.

        The unit returns only after every assignment attempt has settled.
        """

        async def _assign_issues(repo: Repository) -> RepoStats:
            records = await collect(
                lambda page: self.client.list_issues(
                    repo.owner, repo.name, page, assignee="none", state="open",
                )
            )
            repo.issues = [i for i in map(Issue.from_api, records) if i.eligible]
            repo.state = RepoState.ISSUES_FETCHED
            log.debug("%s: found %d unassigned issues", repo.full_name, len(repo.issues))

            await asyncio.gather(*(self._assign_issue(repo, issue, assignee) for issue in repo.issues))
            repo.state = RepoState.ALL_ISSUES_SETTLED
            return repo.stats()

        return _assign_issues

    async def _assign_issue(self, repo: Repository, issue: Issue, assignee: str) -> None:
        if self.halted:
            repo.record(issue.number, IssueOutcome.SKIPPED)
            return
        try:
            await self.client.edit_issue(repo.owner, repo.name, issue.number, assignee=assignee)
        except ValidationFailed as exc:
            log.debug("%s#%d: %s rejected as assignee: %s", repo.full_name, issue.number, assignee, exc)
            repo.record(issue.number, IssueOutcome.FAILED)
        except RateLimitExceeded as exc:
            self._halt(exc)
            repo.record(issue.number, IssueOutcome.FAILED)
        except GitHubAPIError as exc:
            # Transport and server errors count as failures too, not as successes.
            log.warning("%s#%d: assignment failed: %s", repo.full_name, issue.number, exc)
            repo.record(issue.number, IssueOutcome.FAILED)
        else:
            repo.record(issue.number, IssueOutcome.ASSIGNED)
