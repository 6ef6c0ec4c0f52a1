"""View results returned by the Shelf facade.

Each view bundles the objects a page needs with the cache key the
caller may use as a conditional-request validator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitshelf.models.objects import BlobInfo, CommitInfo, TreeEntry


@dataclass(frozen=True)
class CommitView:
    commit: CommitInfo
    cache_key: str


@dataclass(frozen=True)
class FeedView:
    """Recent commits for a ref, newest first (atom feed data)."""

    repo: str
    ref: str
    commits: list[CommitInfo] = field(default_factory=list)
    cache_key: str | None = None  # None when there are no commits


@dataclass(frozen=True)
class TreeView:
    """A directory listing.

    Attributes:
        ref: The ref or oid the tree was resolved from.
        path: Slash-joined path below the root tree ("" for the root).
        entry: The resolved tree entry itself.
        entries: Direct children, paths accumulated from the root.
        cache_key: Validator derived from the tree oid and path.
    """

    ref: str
    path: str
    entry: TreeEntry
    entries: list[TreeEntry]
    cache_key: str


@dataclass(frozen=True)
class BlobView:
    ref: str
    path: str
    entry: TreeEntry
    blob: BlobInfo
    cache_key: str


@dataclass(frozen=True)
class RawBlob:
    """Raw blob bytes with the content type to serve them as."""

    data: bytes
    content_type: str
    cache_key: str


@dataclass(frozen=True)
class PatchView:
    commit: CommitInfo
    text: str
    cache_key: str
