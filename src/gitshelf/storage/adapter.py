"""Abstract object-graph adapter for gitshelf.

Defines the primitive queries the browsing engine needs from a
repository's object graph. No dulwich imports here -- pure abstract
contract.

The concrete implementation is in dulwich_graph.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from gitshelf.models.objects import BlobInfo, CommitInfo, TreeEntry


class ObjectGraphAdapter(ABC):
    """Read-only primitive queries over one repository's object graph."""

    @abstractmethod
    def resolve_ref(self, ref: str) -> str:
        """Resolve a branch, tag, full ref name or object id to a commit oid.

        Raises InvalidRefError if the ref does not resolve.
        """
        ...

    @abstractmethod
    def resolve_tag(self, tag_name: str) -> str:
        """Resolve a tag name to the commit oid it (eventually) points at.

        Raises TagNotFoundError if no such tag exists.
        """
        ...

    @abstractmethod
    def read_commit(self, oid: str) -> CommitInfo:
        """Load a commit. Raises ObjectNotFoundError if missing or not a commit."""
        ...

    @abstractmethod
    def parents(self, commit: CommitInfo) -> list[CommitInfo]:
        """Load the parents of a commit, in stored order."""
        ...

    @abstractmethod
    def root_tree(self, commit: CommitInfo) -> str:
        """Return the oid of a commit's root tree.

        Raises ObjectNotFoundError if the tree object is missing.
        """
        ...

    @abstractmethod
    def entries(self, tree_oid: str) -> list[TreeEntry]:
        """List the entries of a tree in tree order.

        Entry paths equal their names; callers accumulate prefixes.
        Raises ObjectNotFoundError if the tree is missing.
        """
        ...

    @abstractmethod
    def read_blob(self, oid: str) -> BlobInfo:
        """Load a blob. Raises ObjectNotFoundError if missing or not a blob."""
        ...

    @abstractmethod
    def diff(self, old: CommitInfo | None, new: CommitInfo) -> str:
        """Unified patch text turning *old* into *new*.

        ``old=None`` diffs against the empty tree.
        """
        ...

    @abstractmethod
    def walk(self, tip_oid: str) -> Iterator[CommitInfo]:
        """Yield commits reachable from *tip_oid*, most recent first.

        Every reachable commit is yielded exactly once. A tip that is
        not a commit raises ObjectNotFoundError when walk() is called,
        not on the first iteration.
        """
        ...

    @abstractmethod
    def list_branches(self) -> list[str]:
        """Branch names in adapter order."""
        ...

    @abstractmethod
    def list_tags(self) -> list[str]:
        """Tag names in adapter order."""
        ...

    def close(self) -> None:
        """Release any handles held on the underlying storage."""
        return None
