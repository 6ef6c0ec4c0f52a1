"""gitshelf CLI -- browse git repositories from the terminal.

This module is NEVER imported from gitshelf/__init__.py.
It is only loaded via the ``gitshelf`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

import click

from gitshelf.cli.formatting import format_error, get_console
from gitshelf.exceptions import ShelfError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rich.console import Console

    from gitshelf.shelf import Shelf


@click.group()
@click.option(
    "--root",
    default=".",
    envvar="GITSHELF_ROOT",
    type=click.Path(file_okay=False),
    help="Directory holding the repositories to browse.",
)
@click.option(
    "--page-size",
    default=10,
    envvar="GITSHELF_PAGE_SIZE",
    type=click.IntRange(min=1),
    help="Commits per log page.",
)
@click.option(
    "--stats-db",
    default=None,
    envvar="GITSHELF_STATS_DB",
    help="SQLite file caching branch statistics (disabled if omitted).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, root: str, page_size: int, stats_db: str | None, verbose: bool) -> None:
    """gitshelf: read-only browsing of git repositories."""
    if verbose:
        from rich.console import Console
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )

    ctx.ensure_object(dict)
    ctx.obj["root"] = root
    ctx.obj["page_size"] = page_size
    ctx.obj["stats_db"] = stats_db


def _get_shelf(ctx: click.Context) -> Shelf:
    """Build a Shelf from the options stored on the Click context."""
    from gitshelf.models.config import ShelfConfig
    from gitshelf.registry import init_registry
    from gitshelf.shelf import Shelf

    config = ShelfConfig(
        repos_root=ctx.obj["root"],
        page_size=ctx.obj["page_size"],
        stats_db_path=ctx.obj["stats_db"],
    )
    registry = init_registry(config)
    return Shelf.open(config, registry=registry)


@contextmanager
def _shelf_session(ctx: click.Context) -> Iterator[tuple[Shelf, Console]]:
    """Context manager that opens a Shelf, yields (shelf, console), and handles cleanup.

    Ensures the shelf is closed on exit and reports lookup failures as
    CLI errors with exit status 1.
    """
    console = get_console()
    try:
        shelf = _get_shelf(ctx)
        try:
            yield shelf, console
        finally:
            shelf.close()
    except (ShelfError, ValueError) as e:
        format_error(str(e), console)
        raise SystemExit(1) from None


# Register subcommands after cli group is defined
from gitshelf.cli.commands.repos import branches, repos  # noqa: E402
from gitshelf.cli.commands.log import log  # noqa: E402
from gitshelf.cli.commands.show import patch, show, tag  # noqa: E402
from gitshelf.cli.commands.tree import blob, tree  # noqa: E402
from gitshelf.cli.commands.stats import stats  # noqa: E402

cli.add_command(repos)
cli.add_command(branches)
cli.add_command(log)
cli.add_command(show)
cli.add_command(tag)
cli.add_command(patch)
cli.add_command(tree)
cli.add_command(blob)
cli.add_command(stats)
