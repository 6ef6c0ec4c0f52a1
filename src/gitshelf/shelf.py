"""Shelf -- the browsing facade over a set of repositories.

Ties together the registry, the history/tree/diff/stats operations and
the optional stats cache into the views a front end renders. Every
view carries a cache key derived only from object ids (plus a page
number or ref name where needed), which callers can use as a
conditional-request validator.

Each call opens the repository it needs and closes it before
returning, so a Shelf can serve concurrent callers as long as the
stats cache is not shared across threads.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitshelf.engine.hashing import cache_key
from gitshelf.exceptions import EmptyRepositoryError, PathNotFoundError
from gitshelf.models.config import ShelfConfig
from gitshelf.models.objects import EntryKind
from gitshelf.models.views import BlobView, CommitView, FeedView, PatchView, RawBlob, TreeView
from gitshelf.operations.diff import DiffRenderer
from gitshelf.operations.history import HistoryPaginator
from gitshelf.operations.stats import BranchStats
from gitshelf.registry import RepoRegistry
from gitshelf.storage.engine import create_session_factory, create_shelf_engine, init_db
from gitshelf.storage.sqlite import SqliteStatsRepository

if TYPE_CHECKING:
    from sqlalchemy import Engine
    from sqlalchemy.orm import Session

    from gitshelf.handle import RepoHandle
    from gitshelf.models.objects import BlobInfo, RepositorySummary, TreeEntry
    from gitshelf.models.stats import StatsReport
    from gitshelf.operations.history import LogPage
    from gitshelf.storage.repositories import StatsRepository

logger = logging.getLogger(__name__)

BINARY_CONTENT_TYPE = "application/octet-stream"
TEXT_CONTENT_TYPE = "text/plain"


def default_branch(handle: RepoHandle, preferred: str = "master") -> str | None:
    """Pick the branch a repository's pages show by default.

    *preferred* if it exists, otherwise the first branch in adapter
    order, otherwise None (no branches at all).
    """
    branches = handle.branches()
    if preferred in branches:
        return preferred
    return branches[0] if branches else None


class Shelf:
    """Browsing entry point over a registry of repositories.

    Create a shelf via :meth:`Shelf.open` (discovers repositories from
    the config) or directly from a populated registry (testing / DI).

    Example::

        with Shelf.open(ShelfConfig(repos_root="/srv/git")) as shelf:
            page = shelf.log("linux", page=2)
            for commit in page.commits:
                print(commit)
    """

    def __init__(
        self,
        registry: RepoRegistry,
        config: ShelfConfig | None = None,
        *,
        stats_repo: StatsRepository | None = None,
        engine: Engine | None = None,
        session: Session | None = None,
    ) -> None:
        self._registry = registry
        self._config = config or ShelfConfig()
        self._stats_repo = stats_repo
        self._stats = BranchStats(stats_repo)
        self._engine = engine
        self._session = session
        self._closed = False

    @classmethod
    def open(cls, config: ShelfConfig | None = None, *, registry: RepoRegistry | None = None) -> Shelf:
        """Build a shelf from *config*.

        Args:
            config: Settings. Defaults created if *None*.
            registry: A populated registry to serve. When omitted, a new
                one is discovered from ``config.repos_root``.

        Returns:
            A ready-to-use ``Shelf``.
        """
        if config is None:
            config = ShelfConfig()
        if registry is None:
            registry = RepoRegistry()
            registry.discover(config.repos_root, include_hidden=config.include_hidden)

        engine = session = stats_repo = None
        if config.stats_db_path is not None:
            engine = create_shelf_engine(config.stats_db_path)
            init_db(engine)
            session = create_session_factory(engine)()
            stats_repo = SqliteStatsRepository(session)

        return cls(registry, config, stats_repo=stats_repo, engine=engine, session=session)

    @property
    def config(self) -> ShelfConfig:
        return self._config

    @property
    def registry(self) -> RepoRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ref_or_default(self, handle: RepoHandle, ref: str | None) -> str:
        if ref is not None:
            return ref
        branch = default_branch(handle, self._config.default_branch)
        if branch is None:
            raise EmptyRepositoryError(handle.name)
        return branch

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def repositories(self) -> list[RepositorySummary]:
        return self._registry.list()

    def branches(self, repo: str) -> list[str]:
        with self._registry.find(repo) as handle:
            return handle.branches()

    def log(self, repo: str, ref: str | None = None, page: int = 1) -> LogPage:
        """One page of commits for *ref* (default branch when omitted).

        Raises:
            EmptyRepositoryError: If *ref* is omitted and there are no branches.
            ValueError: If *page* is less than 1.
        """
        with self._registry.find(repo) as handle:
            ref = self._ref_or_default(handle, ref)
            return HistoryPaginator(handle, self._config.page_size).page(ref, page)

    def feed(self, repo: str, ref: str | None = None, limit: int | None = None) -> FeedView:
        """Most recent commits for *ref*, as used for the atom feed."""
        with self._registry.find(repo) as handle:
            ref = self._ref_or_default(handle, ref)
            commits = handle.commits(ref, limit if limit is not None else self._config.page_size)
        key = cache_key(commits[0].oid, "atom", ref) if commits else None
        return FeedView(repo=repo, ref=ref, commits=commits, cache_key=key)

    def commit(self, repo: str, ref_or_id: str) -> CommitView:
        with self._registry.find(repo) as handle:
            commit = handle.commit(ref_or_id)
        return CommitView(commit=commit, cache_key=cache_key(commit.oid))

    def tag(self, repo: str, tag_name: str) -> CommitView:
        with self._registry.find(repo) as handle:
            commit = handle.commit_by_tag(tag_name)
        return CommitView(commit=commit, cache_key=cache_key(commit.oid, "tag"))

    def tree(self, repo: str, ref: str, path: str = "") -> TreeView:
        """Directory listing of *path* in the tree of *ref*.

        Raises:
            PathNotFoundError: If *path* does not exist or names a blob.
        """
        with self._registry.find(repo) as handle:
            root, entry = handle.resolve_path(ref, path)
            if entry.kind is EntryKind.BLOB:
                raise PathNotFoundError(entry.path, root.oid)
            prefix = f"{entry.path}/" if entry.path else ""
            entries = [child.at(prefix) for child in handle.lookup(entry.oid)]
        return TreeView(
            ref=ref,
            path=entry.path,
            entry=entry,
            entries=entries,
            cache_key=cache_key(entry.oid, entry.path),
        )

    def _read_blob(self, repo: str, ref: str, path: str) -> tuple[TreeEntry, TreeEntry, BlobInfo]:
        with self._registry.find(repo) as handle:
            root, entry = handle.resolve_path(ref, path)
            if entry.kind is EntryKind.TREE:
                raise PathNotFoundError(entry.path, root.oid)
            return root, entry, handle.find_blob(entry.oid)

    def blob(self, repo: str, ref: str, path: str) -> BlobView:
        """Contents of the blob at *path* in the tree of *ref*.

        Raises:
            PathNotFoundError: If *path* does not exist or names a tree.
        """
        root, entry, blob = self._read_blob(repo, ref, path)
        return BlobView(
            ref=ref,
            path=entry.path,
            entry=entry,
            blob=blob,
            cache_key=cache_key(blob.oid, root.oid),
        )

    def raw(self, repo: str, ref: str, path: str) -> RawBlob:
        """Raw bytes of a blob with the content type to serve them as."""
        root, _entry, blob = self._read_blob(repo, ref, path)
        content_type = BINARY_CONTENT_TYPE if blob.is_binary else TEXT_CONTENT_TYPE
        return RawBlob(
            data=blob.data,
            content_type=content_type,
            cache_key=cache_key(blob.oid, root.oid, "raw"),
        )

    def patch(self, repo: str, ref_or_id: str) -> PatchView:
        """The commit as a ``format-patch`` style mailbox message."""
        with self._registry.find(repo) as handle:
            commit = handle.commit(ref_or_id)
            text = DiffRenderer(handle.adapter).format_patch(commit)
        return PatchView(commit=commit, text=text, cache_key=cache_key(commit.oid, "patch"))

    def stats(self, repo: str, ref: str | None = None) -> StatsReport:
        """Branch statistics, served from the stats cache when possible."""
        with self._registry.find(repo) as handle:
            ref = self._ref_or_default(handle, ref)
            report = self._stats.compute(handle, ref, repo)
        if self._session is not None:
            self._session.commit()
        return report

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the stats cache session and dispose its engine."""
        if self._closed:
            return
        self._closed = True
        if self._session is not None:
            self._session.close()
        if self._engine is not None:
            self._engine.dispose()

    def __enter__(self) -> Shelf:
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object) -> None:
        self.close()

    def __repr__(self) -> str:
        if self._closed:
            return f"Shelf(repos={len(self._registry)}, closed=True)"
        return f"Shelf(repos={len(self._registry)}, stats_cache={self._stats_repo is not None})"
