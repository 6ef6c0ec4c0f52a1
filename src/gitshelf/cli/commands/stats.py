"""gitshelf stats -- show branch statistics."""

from __future__ import annotations

import click

from gitshelf.cli.formatting import format_stats


@click.command()
@click.argument("repo")
@click.argument("ref", required=False, default=None)
@click.option("-n", "--top", default=10, type=int, help="Number of authors to list.")
@click.pass_context
def stats(ctx: click.Context, repo: str, ref: str | None, top: int) -> None:
    """Show commit and author statistics for REF of REPO."""
    from gitshelf.cli import _shelf_session

    with _shelf_session(ctx) as (shelf, console):
        format_stats(shelf.stats(repo, ref), console, top=top)
