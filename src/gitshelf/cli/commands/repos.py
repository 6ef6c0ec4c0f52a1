"""gitshelf repos / branches -- list repositories and their branches."""

from __future__ import annotations

import click

from gitshelf.cli.formatting import format_names, format_repositories


@click.command()
@click.pass_context
def repos(ctx: click.Context) -> None:
    """List the repositories found under the root directory."""
    from gitshelf.cli import _shelf_session

    with _shelf_session(ctx) as (shelf, console):
        format_repositories(shelf.repositories(), console)


@click.command()
@click.argument("repo")
@click.option("--tags", "show_tags", is_flag=True, help="List tags instead of branches.")
@click.pass_context
def branches(ctx: click.Context, repo: str, show_tags: bool) -> None:
    """List the branches (or tags) of REPO."""
    from gitshelf.cli import _shelf_session

    with _shelf_session(ctx) as (shelf, console):
        if show_tags:
            with shelf.registry.find(repo) as handle:
                format_names(handle.tags(), console, empty="No tags.")
        else:
            format_names(shelf.branches(repo), console, empty="No branches.")
