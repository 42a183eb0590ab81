"""Turns repository identifiers into concrete repository records."""

from __future__ import annotations

import logging
from typing import Iterable

from .concurrency import settle_all
from .github_client import GitHubAPI
from .models import Repository
from .pagination import collect
from .repo_spec import RepoSpec, filter_by_pattern, parse_repo_spec

log = logging.getLogger(__name__)


class RepoResolver:
    """Resolve ``owner/name`` and ``owner/regex`` strings against GitHub."""

    def __init__(self, client: GitHubAPI):
        self.client = client

    async def resolve(self, raw_specs: Iterable[str]) -> list[Repository]:
        """Resolve every spec concurrently and concatenate the results.

        All specs are parsed before any request is sent, so a malformed one
        raises InvalidRepoSpec without touching the network. If any lookup or
        listing fails, the first failure (in spec order) is raised after the
        others have settled. A repository matched by several specs is returned
        once, at its first position.
        """
        specs = [parse_repo_spec(raw) for raw in raw_specs]
        groups = await settle_all(self._resolve_spec(spec) for spec in specs)

        repos: list[Repository] = []
        seen: set[str] = set()
        for spec, group in zip(specs, groups):
            log.debug("%s resolved to %d repositories", spec, len(group))
            for repo in group:
                if repo.full_name in seen:
                    continue
                seen.add(repo.full_name)
                repos.append(repo)
        return repos

    async def _resolve_spec(self, spec: RepoSpec) -> list[Repository]:
        if not spec.is_pattern:
            data = await self.client.get_repo(spec.owner, spec.target)
            return [Repository.from_api(data, owner=spec.owner)]

        # Match by name against everything the owner has.
        listing = await collect(lambda page: self.client.list_org_repos(spec.owner, page))
        return [Repository.from_api(r, owner=spec.owner) for r in filter_by_pattern(listing, spec.target)]
