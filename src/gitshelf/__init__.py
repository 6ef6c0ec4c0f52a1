"""gitshelf: read-only browsing engine for git repositories.

Turns object-graph queries (by ref, by oid, by path, by page) into
stable, paginated, cacheable views: commit logs, trees, blobs, patches
and per-branch statistics.
"""

from gitshelf._version import __version__

# Core entry point
from gitshelf.shelf import Shelf, default_branch

# Registry and handles
from gitshelf.registry import RepoRegistry, get_registry, init_registry, reset_registry, sanitize_name
from gitshelf.handle import RepoHandle

# Models
from gitshelf.models.config import DEFAULT_PAGE_SIZE, ShelfConfig
from gitshelf.models.objects import (
    BlobInfo,
    CommitInfo,
    EntryKind,
    RefInfo,
    RefKind,
    RepositorySummary,
    Signature,
    TreeEntry,
)
from gitshelf.models.stats import AuthorCount, StatsReport
from gitshelf.models.views import BlobView, CommitView, FeedView, PatchView, RawBlob, TreeView

# Operations
from gitshelf.operations.history import HistoryPaginator, LogPage, PageWindow, walk_history
from gitshelf.operations.tree_path import resolve_path, split_path, walk_postorder
from gitshelf.operations.diff import DiffRenderer
from gitshelf.operations.stats import BranchStats, compute_stats

# Cache keys
from gitshelf.engine.hashing import cache_key

# Object-graph adapters
from gitshelf.storage.adapter import ObjectGraphAdapter
from gitshelf.storage.dulwich_graph import DulwichGraph

# Exceptions
from gitshelf.exceptions import (
    EmptyRepositoryError,
    InvalidRefError,
    ObjectNotFoundError,
    PathNotFoundError,
    RepositoryNotFoundError,
    ShelfError,
    TagNotFoundError,
)

__all__ = [
    "__version__",
    # Core
    "Shelf",
    "default_branch",
    "RepoRegistry",
    "RepoHandle",
    "init_registry",
    "get_registry",
    "reset_registry",
    "sanitize_name",
    # Models
    "DEFAULT_PAGE_SIZE",
    "ShelfConfig",
    "BlobInfo",
    "CommitInfo",
    "EntryKind",
    "RefInfo",
    "RefKind",
    "RepositorySummary",
    "Signature",
    "TreeEntry",
    "AuthorCount",
    "StatsReport",
    # Views
    "BlobView",
    "CommitView",
    "FeedView",
    "PatchView",
    "RawBlob",
    "TreeView",
    "LogPage",
    # Operations
    "HistoryPaginator",
    "PageWindow",
    "walk_history",
    "resolve_path",
    "split_path",
    "walk_postorder",
    "DiffRenderer",
    "BranchStats",
    "compute_stats",
    "cache_key",
    # Adapters
    "ObjectGraphAdapter",
    "DulwichGraph",
    # Exceptions
    "ShelfError",
    "RepositoryNotFoundError",
    "InvalidRefError",
    "ObjectNotFoundError",
    "TagNotFoundError",
    "PathNotFoundError",
    "EmptyRepositoryError",
]
