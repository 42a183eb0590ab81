"""Rich terminal output for repository listings and batch results."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import BatchResult, IssueOutcome, Repository

console = Console()


def display_repositories(repos: list[Repository], verbose: bool = False):
    if not repos:
        console.print("[yellow]No repositories matched[/yellow]")
        return
    for repo in repos:
        if verbose:
            console.print(Panel.fit(repo.full_name, box=box.ROUNDED))
            console.print_json(data=repo.data)
        else:
            console.print(repo.name)


def display_labels(repos: list[Repository], group: bool = False):
    """Print label names, optionally grouped and indented under each repository."""
    for repo in repos:
        if group:
            console.print(Text(repo.name, style="bold cyan"))
        for label in repo.labels:
            name = Text(label.name, style=f"#{label.color}" if label.color else "")
            console.print(Text("\t") + name if group else name)


def repo_banner(repo: Repository, index: int, total: int) -> str:
    """``=  owner/repo (i/n)  =`` framed by rows of ``=`` of the same width."""
    title = f"=  {repo.full_name} ({index}/{total})  ="
    rule = "=" * len(title)
    return f"{rule}\n{title}\n{rule}"


def display_assignment_report(repos: list[Repository], assignee: str):
    """Per-repository, per-issue log of an assign-all run."""
    for index, repo in enumerate(repos, 1):
        console.print(repo_banner(repo, index, len(repos)), markup=False, highlight=False)
        if repo.error and not repo.outcomes:
            console.print(Text(repo.error, style="red"))
            continue
        console.print(f"Found {len(repo.issues)} unassigned issues.")
        for number, outcome in sorted(repo.outcomes.items()):
            if outcome is IssueOutcome.ASSIGNED:
                console.print(f"#{number}: assigned to {assignee}", style="green", markup=False)
            elif outcome is IssueOutcome.FAILED:
                console.print(f"#{number}: fail", style="red", markup=False)
            else:
                console.print(f"#{number}: skipped", style="yellow", markup=False)
        console.print(f"> {repo.successes} successes and {repo.failures} failures.\n")


def display_batch_result(result: BatchResult, title: str = "Batch Results"):
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Repository", style="cyan")
    table.add_column("OK", style="green", justify="right")
    table.add_column("Failed", style="red", justify="right")
    table.add_column("Skipped", style="yellow", justify="right")
    table.add_column("Error", max_width=60)

    for key, stats in result.per_repository.items():
        table.add_row(
            key,
            str(stats.successes),
            str(stats.failures),
            str(stats.skipped),
            Text(stats.error or "", style="red"),
        )

    console.print()
    console.print(table)
    summary = f"Done: {result.total_successes} successes and {result.total_failures} failures."
    if result.total_skipped:
        summary += f" {result.total_skipped} skipped."
    console.print(summary, style="bold green" if result.ok else "bold red")
