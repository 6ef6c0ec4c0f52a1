"""RepoHandle: one open repository.

A handle wraps an object-graph adapter for the duration of a request
and exposes ref resolution, history, tree/blob lookup and cache keys on
top of it. The branch/tag index is the only state it keeps and is
filled lazily on first use.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitshelf.engine.hashing import cache_key
from gitshelf.models.objects import RefInfo, RefKind, TreeEntry
from gitshelf.operations.history import walk_history
from gitshelf.operations.tree_path import resolve_path, split_path

if TYPE_CHECKING:
    from gitshelf.models.objects import BlobInfo, CommitInfo, RepositorySummary
    from gitshelf.storage.adapter import ObjectGraphAdapter

logger = logging.getLogger(__name__)


class RepoHandle:
    """Read-only access to one repository's object graph.

    Use as a context manager to release the adapter when done::

        with registry.find("linux") as repo:
            head = repo.commit("master")
    """

    def __init__(self, summary: RepositorySummary, adapter: ObjectGraphAdapter) -> None:
        self._summary = summary
        self._adapter = adapter
        self._branches: list[str] | None = None
        self._tags: list[str] | None = None

    @property
    def name(self) -> str:
        return self._summary.name

    @property
    def summary(self) -> RepositorySummary:
        return self._summary

    @property
    def adapter(self) -> ObjectGraphAdapter:
        return self._adapter

    # ------------------------------------------------------------------
    # Refs
    # ------------------------------------------------------------------

    def branches(self) -> list[str]:
        """Branch names in adapter order."""
        if self._branches is None:
            self._branches = self._adapter.list_branches()
        return list(self._branches)

    def tags(self) -> list[str]:
        """Tag names in adapter order."""
        if self._tags is None:
            self._tags = self._adapter.list_tags()
        return list(self._tags)

    def refs(self) -> list[RefInfo]:
        """Branches then tags, each with the commit it resolves to."""
        result = [
            RefInfo(name=name, kind=RefKind.BRANCH, target_oid=self._adapter.resolve_ref(name))
            for name in self.branches()
        ]
        result.extend(
            RefInfo(name=name, kind=RefKind.TAG, target_oid=self._adapter.resolve_tag(name))
            for name in self.tags()
        )
        return result

    def refresh(self) -> None:
        """Drop the cached branch/tag index."""
        logger.debug("Refreshing ref index of %s", self.name)
        self._branches = None
        self._tags = None

    def branch_exists(self, name: str) -> bool:
        return name in self.branches()

    def resolve(self, ref_or_id: str) -> str:
        """Resolve a ref or object id to a commit oid."""
        return self._adapter.resolve_ref(ref_or_id)

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

    def commit(self, ref_or_id: str) -> CommitInfo:
        """Load the commit a ref or object id names.

        Raises:
            InvalidRefError: If the ref does not resolve.
            ObjectNotFoundError: If it resolves but no commit backs it.
        """
        return self._adapter.read_commit(self.resolve(ref_or_id))

    def commit_by_tag(self, tag_name: str) -> CommitInfo:
        """Load the commit a tag points at, peeling annotated tags.

        Raises:
            TagNotFoundError: If no such tag exists.
            ObjectNotFoundError: If the tagged commit is missing.
        """
        return self._adapter.read_commit(self._adapter.resolve_tag(tag_name))

    def commits(self, ref: str, limit: int | None = None, skip: int = 0) -> list[CommitInfo]:
        """A most-recent-first window of *ref*'s history. See walk_history()."""
        return walk_history(self._adapter, ref, limit, skip)

    def parents(self, commit: CommitInfo) -> list[CommitInfo]:
        return self._adapter.parents(commit)

    # ------------------------------------------------------------------
    # Trees and blobs
    # ------------------------------------------------------------------

    def find_tree(self, ref_or_id: str) -> TreeEntry:
        """Root tree entry of the commit *ref_or_id* names."""
        commit = self.commit(ref_or_id)
        return TreeEntry.root(self._adapter.root_tree(commit))

    def lookup(self, tree_oid: str) -> list[TreeEntry]:
        """Direct entries of a tree, in tree order."""
        return self._adapter.entries(tree_oid)

    def find_blob(self, oid: str) -> BlobInfo:
        return self._adapter.read_blob(oid)

    def resolve_path(self, ref_or_id: str, path: str) -> tuple[TreeEntry, TreeEntry]:
        """Resolve *path* in the tree of *ref_or_id*.

        Returns:
            ``(root, entry)``: the commit's root tree entry and the entry
            at *path* (the root itself for an empty path).

        Raises:
            PathNotFoundError: If *path* does not exist in that tree.
        """
        root = self.find_tree(ref_or_id)
        entry = resolve_path(self._adapter, root.oid, split_path(path))
        return root, entry

    def diff(self, old: CommitInfo | None, new: CommitInfo) -> str:
        return self._adapter.diff(old, new)

    # ------------------------------------------------------------------
    # Cache keys and lifecycle
    # ------------------------------------------------------------------

    def cache_key(self, *parts: str | int) -> str:
        return cache_key(*parts)

    def close(self) -> None:
        self._adapter.close()

    def __enter__(self) -> RepoHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"RepoHandle(name='{self.name}', adapter={self._adapter!r})"
