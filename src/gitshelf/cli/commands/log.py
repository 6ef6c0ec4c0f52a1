"""gitshelf log -- show one page of commit history."""

from __future__ import annotations

import click

from gitshelf.cli.formatting import format_log


@click.command()
@click.argument("repo")
@click.argument("ref", required=False, default=None)
@click.option("-p", "--page", default=1, type=click.IntRange(min=1), help="1-based page number.")
@click.pass_context
def log(ctx: click.Context, repo: str, ref: str | None, page: int) -> None:
    """Show commit history of REPO from REF backward.

    REF defaults to master, or the first branch when there is no master.
    """
    from gitshelf.cli import _shelf_session

    with _shelf_session(ctx) as (shelf, console):
        format_log(shelf.log(repo, ref, page), console)
