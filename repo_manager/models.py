from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RepoState(str, Enum):
    PENDING = "pending"
    ISSUES_FETCHED = "issues_fetched"
    ALL_ISSUES_SETTLED = "all_issues_settled"
    REPORTED = "reported"


class IssueOutcome(str, Enum):
    ASSIGNED = "assigned"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Label:
    name: str
    color: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Label":
        return cls(name=data.get("name", ""), color=data.get("color", ""))


@dataclass(frozen=True)
class Issue:
    number: int
    title: str = ""
    state: str = "open"
    assignee: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Issue":
        assignee = data.get("assignee") or {}
        return cls(
            number=int(data["number"]),
            title=data.get("title") or "",
            state=data.get("state") or "open",
            assignee=assignee.get("login"),
        )

    @property
    def eligible(self) -> bool:
        """Only open issues nobody is assigned to can be bulk-assigned."""
        return self.state == "open" and not self.assignee


@dataclass(frozen=True)
class RepoStats:
    successes: int = 0
    failures: int = 0
    skipped: int = 0
    error: str | None = None


@dataclass
class Repository:
    """A resolved repository plus whatever a batch run accumulates on it.

    Counters are only touched by the unit of work running for this repository.
    """

    owner: str
    name: str
    data: dict[str, Any] = field(default_factory=dict, repr=False)
    labels: list[Label] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)
    successes: int = 0
    failures: int = 0
    skipped: int = 0
    state: RepoState = RepoState.PENDING
    outcomes: dict[int, IssueOutcome] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any], owner: str | None = None) -> "Repository":
        login = (data.get("owner") or {}).get("login") or owner or ""
        return cls(owner=login, name=data.get("name", ""), data=data)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def record(self, number: int, outcome: IssueOutcome) -> None:
        self.outcomes[number] = outcome
        if outcome is IssueOutcome.ASSIGNED:
            self.successes += 1
        elif outcome is IssueOutcome.FAILED:
            self.failures += 1
        else:
            self.skipped += 1

    def stats(self) -> RepoStats:
        return RepoStats(
            successes=self.successes,
            failures=self.failures,
            skipped=self.skipped,
            error=self.error,
        )


@dataclass(frozen=True)
class BatchResult:
    per_repository: dict[str, RepoStats]
    total_successes: int
    total_failures: int
    total_skipped: int = 0

    @classmethod
    def from_stats(cls, per_repository: dict[str, RepoStats]) -> "BatchResult":
        stats = per_repository.values()
        return cls(
            per_repository=dict(per_repository),
            total_successes=sum(s.successes for s in stats),
            total_failures=sum(s.failures for s in stats),
            total_skipped=sum(s.skipped for s in stats),
        )

    @property
    def failed_repositories(self) -> list[str]:
        return [key for key, s in self.per_repository.items() if s.error]

    @property
    def ok(self) -> bool:
        return not self.total_failures and not self.failed_repositories
