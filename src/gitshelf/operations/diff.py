"""Patch rendering for single commits.

A commit's patch is always taken against its first parent. Merge
commits therefore show only what the merge brought into the mainline,
and root commits are diffed against the empty tree.
"""

from __future__ import annotations

import logging
from email.utils import format_datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitshelf.models.objects import CommitInfo
    from gitshelf.storage.adapter import ObjectGraphAdapter

logger = logging.getLogger(__name__)

# Fixed date git format-patch writes on the mbox separator line
_MBOX_DATE = "Mon Sep 17 00:00:00 2001"


class DiffRenderer:
    """Render unified patches through an object-graph adapter."""

    def __init__(self, adapter: ObjectGraphAdapter) -> None:
        self._adapter = adapter

    def mainline_parent(self, commit: CommitInfo) -> CommitInfo | None:
        """First parent of *commit*, or None for a root commit."""
        if commit.is_root:
            return None
        return self._adapter.read_commit(commit.parent_oids[0])

    def patch(self, commit: CommitInfo) -> str:
        """Unified diff of *commit* against its first parent."""
        parent = self.mainline_parent(commit)
        if parent is None:
            logger.debug("Root commit %s: diffing against the empty tree", commit.short_oid)
        elif commit.is_merge:
            logger.debug(
                "Merge commit %s: diffing against first parent %s only",
                commit.short_oid, parent.short_oid,
            )
        return self._adapter.diff(parent, commit)

    def format_patch(self, commit: CommitInfo) -> str:
        """The patch as a mailbox message, like ``git format-patch``."""
        author = commit.author
        lines = [
            f"From {commit.oid} {_MBOX_DATE}",
            f"From: {author.identity}",
            f"Date: {format_datetime(author.time)}",
            f"Subject: [PATCH] {commit.summary}",
            "",
        ]
        body = commit.message.split("\n", 1)[1].strip() if "\n" in commit.message else ""
        if body:
            lines.extend([body, ""])
        lines.append("---")
        lines.append("")
        return "\n".join(lines) + self.patch(commit)
