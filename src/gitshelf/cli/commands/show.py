"""gitshelf show / tag / patch -- inspect single commits."""

from __future__ import annotations

import click

from gitshelf.cli.formatting import format_commit, format_patch


@click.command()
@click.argument("repo")
@click.argument("ref")
@click.pass_context
def show(ctx: click.Context, repo: str, ref: str) -> None:
    """Show the commit REF (branch, tag or object id) of REPO."""
    from gitshelf.cli import _shelf_session

    with _shelf_session(ctx) as (shelf, console):
        format_commit(shelf.commit(repo, ref).commit, console)


@click.command()
@click.argument("repo")
@click.argument("tag_name")
@click.pass_context
def tag(ctx: click.Context, repo: str, tag_name: str) -> None:
    """Show the commit tagged TAG_NAME in REPO."""
    from gitshelf.cli import _shelf_session

    with _shelf_session(ctx) as (shelf, console):
        format_commit(shelf.tag(repo, tag_name).commit, console)


@click.command()
@click.argument("repo")
@click.argument("ref")
@click.option("--raw", "raw_output", is_flag=True, help="Print the patch without colors.")
@click.pass_context
def patch(ctx: click.Context, repo: str, ref: str, raw_output: bool) -> None:
    """Show commit REF of REPO as a patch against its first parent."""
    from gitshelf.cli import _shelf_session

    with _shelf_session(ctx) as (shelf, console):
        view = shelf.patch(repo, ref)
        if raw_output:
            click.echo(view.text, nl=False)
        else:
            format_patch(view.text, console)
