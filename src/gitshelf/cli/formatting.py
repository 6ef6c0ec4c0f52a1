"""Rich formatting helpers for the gitshelf CLI.

Provides functions that format shelf views for terminal display.
Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from gitshelf.models.objects import CommitInfo, RepositorySummary
    from gitshelf.models.stats import StatsReport
    from gitshelf.models.views import BlobView, TreeView
    from gitshelf.operations.history import LogPage


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_repositories(repos: list[RepositorySummary], console: Console) -> None:
    """Display the registered repositories."""
    if not repos:
        console.print("[dim]No repositories.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Name", style="green")
    table.add_column("Bare", width=4)
    table.add_column("Description")

    for repo in repos:
        table.add_row(
            escape(repo.name),
            "yes" if repo.is_bare else "",
            escape(repo.description or ""),
        )

    console.print(table)


def format_names(names: list[str], console: Console, empty: str = "Nothing found.") -> None:
    """Display a plain list of names, one per line."""
    if not names:
        console.print(f"[dim]{empty}[/dim]")
        return
    for name in names:
        console.print(escape(name), highlight=False)


def format_log(page: LogPage, console: Console) -> None:
    """Display one page of the commit log in compact table format."""
    if not page.commits:
        console.print("[dim]No commits.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Hash", style="yellow", width=8)
    table.add_column("Time", style="dim")
    table.add_column("Author", style="cyan")
    table.add_column("Message")

    for commit in page.commits:
        table.add_row(
            commit.short_oid,
            commit.committer.time.strftime("%Y-%m-%d %H:%M"),
            escape(commit.author.name),
            escape(commit.summary),
        )

    console.print(table)

    nav = []
    if page.has_previous:
        nav.append(f"previous: --page {page.page - 1}")
    if page.has_next:
        nav.append(f"next: --page {page.page + 1}")
    footer = f"Page {page.page}"
    if nav:
        footer += f" ({', '.join(nav)})"
    console.print(f"[dim]{footer}[/dim]")


def format_commit(commit: CommitInfo, console: Console) -> None:
    """Display a commit with full details."""
    console.print(f"[yellow]commit {commit.oid}[/yellow]")
    if commit.is_merge:
        console.print(f"Merge:  {' '.join(oid[:8] for oid in commit.parent_oids)}")
    console.print(f"Author: {escape(commit.author.identity)}")
    console.print(f"Date:   {commit.author.time.strftime('%Y-%m-%d %H:%M:%S %z')}")
    console.print()
    for line in commit.message.rstrip("\n").split("\n"):
        console.print(f"    {escape(line)}", highlight=False)


def format_tree(view: TreeView, console: Console) -> None:
    """Display a directory listing, trees first."""
    if not view.entries:
        console.print("[dim]Empty tree.[/dim]")
        return

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Mode", style="dim")
    table.add_column("Kind", width=4)
    table.add_column("Hash", style="yellow", width=8)
    table.add_column("Path")

    ordered = sorted(view.entries, key=lambda e: (not e.is_tree, e.name))
    for entry in ordered:
        path = escape(entry.path)
        table.add_row(
            f"{entry.mode:06o}",
            str(entry.kind),
            entry.oid[:8],
            f"[bold blue]{path}/[/bold blue]" if entry.is_tree else path,
        )

    console.print(table)


def format_blob(view: BlobView, console: Console) -> None:
    """Display blob contents, or a placeholder for binary data."""
    if view.blob.is_binary:
        console.print(f"[dim]Binary file {escape(view.path)} ({view.blob.size} bytes)[/dim]")
        return
    console.print(Text(view.blob.text), end="", soft_wrap=True)


def format_patch(text: str, console: Console) -> None:
    """Display patch text with colors."""
    for line in text.split("\n"):
        if line.startswith("+++") or line.startswith("---"):
            console.print(Text(line, style="bold"), soft_wrap=True)
        elif line.startswith("+"):
            console.print(Text(line, style="green"), soft_wrap=True)
        elif line.startswith("-"):
            console.print(Text(line, style="red"), soft_wrap=True)
        elif line.startswith("@@"):
            console.print(Text(line, style="cyan"), soft_wrap=True)
        else:
            console.print(Text(line), soft_wrap=True)


def format_stats(report: StatsReport, console: Console, top: int = 10) -> None:
    """Display branch statistics and the most active authors."""
    console.print(f"On [green]{escape(report.ref)}[/green] ([yellow]{report.tip_oid[:8]}[/yellow])")
    console.print(f"  Commits: {report.commit_count}")
    console.print(f"  Merges:  {report.merge_count}")
    console.print(f"  Authors: {report.author_count}")
    console.print(
        f"  Span:    {report.first_commit_at.strftime('%Y-%m-%d')} .. "
        f"{report.last_commit_at.strftime('%Y-%m-%d')}"
    )

    if report.authors:
        console.print()
        table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
        table.add_column("Commits", justify="right", style="green")
        table.add_column("Author")
        for author in report.top_authors(top):
            table.add_row(str(author.commits), escape(author.identity))
        console.print(table)


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
