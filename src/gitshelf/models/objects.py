"""Object-graph domain models for gitshelf.

CommitInfo, TreeEntry and BlobInfo are the read-only views the engine
hands out for commits, tree entries and blobs. EntryKind and RefKind are
closed tagged variants: consumers match on the kind instead of inspecting
runtime types.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

# Git mode for a directory entry
TREE_MODE = 0o040000


class EntryKind(str, enum.Enum):
    """Kind of a tree entry."""

    TREE = "tree"
    BLOB = "blob"

    def __str__(self) -> str:
        return self.value


class RefKind(str, enum.Enum):
    """Kind of a named ref."""

    BRANCH = "branch"
    TAG = "tag"

    def __str__(self) -> str:
        return self.value


class Signature(BaseModel):
    """Author or committer identity plus timestamp."""

    model_config = {"frozen": True}

    name: str
    email: str
    time: datetime

    @property
    def identity(self) -> str:
        return f"{self.name} <{self.email}>"


class CommitInfo(BaseModel):
    """Immutable commit view.

    ``parent_oids`` keeps the stored order: the first parent is the
    mainline used for patches.
    """

    model_config = {"frozen": True}

    oid: str
    parent_oids: list[str] = []
    tree_oid: str
    author: Signature
    committer: Signature
    message: str

    @property
    def short_oid(self) -> str:
        return self.oid[:8]

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0].strip()

    @property
    def is_merge(self) -> bool:
        return len(self.parent_oids) > 1

    @property
    def is_root(self) -> bool:
        return not self.parent_oids

    def __str__(self) -> str:
        msg = self.summary
        if len(msg) > 60:
            msg = msg[:57] + "..."
        return f"{self.short_oid} {msg}"


class TreeEntry(BaseModel):
    """One named entry of a tree.

    ``path`` is the slash-joined path accumulated from the root tree.
    Adapters return entries with ``path`` equal to ``name``; the tree
    walk rewrites it with the full prefix.
    """

    model_config = {"frozen": True}

    name: str
    kind: EntryKind
    oid: str
    mode: int
    path: str = ""

    @classmethod
    def root(cls, tree_oid: str) -> TreeEntry:
        """The entry standing for a root tree itself (empty path)."""
        return cls(name="", kind=EntryKind.TREE, oid=tree_oid, mode=TREE_MODE, path="")

    @property
    def is_tree(self) -> bool:
        return self.kind is EntryKind.TREE

    def at(self, prefix: str) -> TreeEntry:
        """Return a copy of this entry located under *prefix*."""
        return self.model_copy(update={"path": f"{prefix}{self.name}"})


class BlobInfo(BaseModel):
    """Raw blob bytes plus the binary/text classification."""

    model_config = {"frozen": True}

    oid: str
    data: bytes
    is_binary: bool

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


class RefInfo(BaseModel):
    """A branch or tag and the commit it resolves to."""

    model_config = {"frozen": True}

    name: str
    kind: RefKind
    target_oid: str


class RepositorySummary(BaseModel):
    """One row of the repository registry."""

    model_config = {"frozen": True}

    name: str
    path: str
    description: Optional[str] = None
    is_bare: bool = False
