"""gitshelf tree / blob -- browse files at a commit."""

from __future__ import annotations

import click

from gitshelf.cli.formatting import format_blob, format_tree


@click.command()
@click.argument("repo")
@click.argument("ref")
@click.argument("path", required=False, default="")
@click.pass_context
def tree(ctx: click.Context, repo: str, ref: str, path: str) -> None:
    """List directory PATH (default: root) of REPO at REF."""
    from gitshelf.cli import _shelf_session

    with _shelf_session(ctx) as (shelf, console):
        format_tree(shelf.tree(repo, ref, path), console)


@click.command()
@click.argument("repo")
@click.argument("ref")
@click.argument("path")
@click.option("--raw", "raw_output", is_flag=True, help="Write the blob bytes to stdout unchanged.")
@click.pass_context
def blob(ctx: click.Context, repo: str, ref: str, path: str, raw_output: bool) -> None:
    """Show file PATH of REPO at REF."""
    from gitshelf.cli import _shelf_session

    with _shelf_session(ctx) as (shelf, console):
        if raw_output:
            click.get_binary_stream("stdout").write(shelf.raw(repo, ref, path).data)
        else:
            format_blob(shelf.blob(repo, ref, path), console)
