"""Domain models for gitshelf."""

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

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "AuthorCount",
    "BlobInfo",
    "CommitInfo",
    "EntryKind",
    "RefInfo",
    "RefKind",
    "RepositorySummary",
    "ShelfConfig",
    "Signature",
    "StatsReport",
    "TreeEntry",
]
